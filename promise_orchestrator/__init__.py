"""
Delivery Promise & Capacity Orchestrator

A deterministic what-if model of delivery promises for an illustrative
omni-channel retail network during a holiday surge:

- A closed-form KPI engine (on-time rate, orders, conversion, cost per order)
- A rule-based recommendation engine emitting configuration deltas
- An orchestration session with plan application, activity stream and Story Mode

All figures are synthetic and illustrative.
"""

from .core.entities import (
    Carrier,
    DistributionNode,
    FacilityKind,
    Policy,
    ScenarioConfig,
    DEFAULT_CARRIERS,
    DEFAULT_NODES,
)
from .simulation.kpi_engine import KPIResult, BucketMetrics, compute_kpis
from .orchestration.actions import RecommendedAction, propose_actions, apply_actions

__version__ = "0.1.0"

__all__ = [
    "Carrier",
    "DistributionNode",
    "FacilityKind",
    "Policy",
    "ScenarioConfig",
    "DEFAULT_CARRIERS",
    "DEFAULT_NODES",
    "KPIResult",
    "BucketMetrics",
    "compute_kpis",
    "RecommendedAction",
    "propose_actions",
    "apply_actions",
]
