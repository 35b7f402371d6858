"""
Delivery Promise Simulation

Purpose: produce internally coherent, directionally plausible delivery
metrics for a what-if scenario. It does not estimate real-world outcomes.

Timeframe:
- Ten time buckets shaped by a sinusoidal wave peaking mid-day

Mechanism assumptions:
- Surge scales demand; rebalancing diverts first-node demand
- Carrier deltas and crowd boost shift the blended on-time probability
- Policy, weather and member reserve adjust the on-time rate
- Reliable service above 90% lifts checkout conversion
"""

from .kpi_engine import (
    BucketMetrics,
    KPIResult,
    compute_kpis,
    baseline_config,
    blended_carrier_otp,
    node_utilization,
    BASELINE_CONVERSION,
    LATE_COST,
)

__all__ = [
    "BucketMetrics",
    "KPIResult",
    "compute_kpis",
    "baseline_config",
    "blended_carrier_otp",
    "node_utilization",
    "BASELINE_CONVERSION",
    "LATE_COST",
]
