"""
Metrics and Briefing

This module provides:
- Executive brief data (tiles, cards, chart series, impact snapshot)
- Node utilisation health bands
"""

from .brief import (
    ExecutiveBrief,
    MetricTile,
    BriefCard,
    ChartPoint,
    METRIC_EXPLANATIONS,
    build_brief
)
from .health import HealthSeverity, NodeHealth, classify_utilization, node_health, summarize

__all__ = [
    "ExecutiveBrief",
    "MetricTile",
    "BriefCard",
    "ChartPoint",
    "METRIC_EXPLANATIONS",
    "build_brief",
    "HealthSeverity",
    "NodeHealth",
    "classify_utilization",
    "node_health",
    "summarize"
]
