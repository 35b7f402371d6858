"""
Node Health

Classifies node utilisation into severity bands:
- critical above 95%
- warning above 85%
- healthy otherwise
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from ..core.entities import DistributionNode, clamp


class HealthSeverity(Enum):
    """Node health levels."""
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


CRITICAL_UTILIZATION = 0.95
WARNING_UTILIZATION = 0.85


@dataclass(frozen=True)
class NodeHealth:
    """Utilisation and health of one node."""
    node_id: str
    city: str
    kind: str
    base_capacity_per_hour: float
    base_demand_per_hour: float
    utilization: float
    severity: HealthSeverity

    @property
    def bar_fill(self) -> float:
        return clamp(self.utilization, 0.0, 1.0)


def classify_utilization(utilization: float) -> HealthSeverity:
    if utilization > CRITICAL_UTILIZATION:
        return HealthSeverity.CRITICAL
    if utilization > WARNING_UTILIZATION:
        return HealthSeverity.WARNING
    return HealthSeverity.HEALTHY


def node_health(nodes: Sequence[DistributionNode], utilization: dict[str, float]) -> list[NodeHealth]:
    """Health for each node, in network order."""
    report = []
    for node in nodes:
        util = utilization.get(node.id, 0.0)
        report.append(NodeHealth(
            node_id=node.id,
            city=node.city,
            kind=node.kind.value,
            base_capacity_per_hour=node.base_capacity_per_hour,
            base_demand_per_hour=node.base_demand_per_hour,
            utilization=util,
            severity=classify_utilization(util)
        ))
    return report


def summarize(report: list[NodeHealth]) -> dict:
    """Count nodes per severity."""
    return {
        "total": len(report),
        "by_severity": {
            severity.value: sum(1 for n in report if n.severity == severity)
            for severity in HealthSeverity
        },
        "critical_nodes": [n.node_id for n in report if n.severity == HealthSeverity.CRITICAL]
    }
