"""
Recommendation Engine - Threshold-driven Actions

Evaluates an ordered set of rules against the current KPIs and scenario.
Each rule that holds emits a RecommendedAction carrying:
- A stable identifier
- Title, detail and impact text for presentation
- A pure `apply` delta from one ScenarioConfig to the next

Rules fire independently; none suppresses another. An empty result means
"hold current configuration".
"""

from dataclasses import dataclass
from typing import Callable
import logging

from ..core.entities import Policy, ScenarioConfig, clamp, CROWD_BOOST_RANGE, REBALANCE_RANGE
from ..simulation.kpi_engine import KPIResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendedAction:
    """A proposed change to the scenario with its rationale."""
    id: str
    title: str
    detail: str
    impact: str
    apply: Callable[[ScenarioConfig], ScenarioConfig]


@dataclass(frozen=True)
class ActionRule:
    """A condition over (kpi, config) and the action it proposes."""
    action: RecommendedAction
    condition: Callable[[KPIResult, ScenarioConfig], bool]

    def evaluate(self, kpi: KPIResult, config: ScenarioConfig) -> bool:
        return bool(self.condition(kpi, config))


def _tighten_promise(config: ScenarioConfig) -> ScenarioConfig:
    return config.with_changes(policy=Policy.RELIABLE, reserve_for_members=True)


def _rebalance_nodes(config: ScenarioConfig) -> ScenarioConfig:
    return config.with_changes(rebalance=clamp(config.rebalance + 0.2, *REBALANCE_RANGE))


def _boost_crowd(config: ScenarioConfig) -> ScenarioConfig:
    return config.with_changes(crowd_boost=clamp(config.crowd_boost + 0.15, *CROWD_BOOST_RANGE))


def _optimize_cost(config: ScenarioConfig) -> ScenarioConfig:
    return config.with_changes(policy=Policy.BALANCED)


TIGHTEN_PROMISE = RecommendedAction(
    id="tighten-promise",
    title="Tighten promise for non-members by +1 day in risk ZIPs",
    detail="Shift to Reliable policy; reserve capacity for Plus/Total to stabilize ETA",
    impact="+2-4 pts OTD; -0.1 pt conversion",
    apply=_tighten_promise
)

REBALANCE_NODES = RecommendedAction(
    id="rebalance-nodes",
    title="Rebalance 20% of MEC-1 (Chicago) volume to MEC-2 (Newark)",
    detail="Pre-allocate next 3 waves to Newark where cutoffs are healthier",
    impact="+1-2 pts OTD in Midwest; reduces late fees",
    apply=_rebalance_nodes
)

BOOST_CROWD = RecommendedAction(
    id="boost-crowd",
    title="Add 15% capacity via UberDirect/DoorDash for same-day ZIPs",
    detail="Temporal burst capacity on short-haul lanes while parcel recovers",
    impact="+1-2 pts OTD; +$0.10 CPO",
    apply=_boost_crowd
)

OPTIMIZE_COST = RecommendedAction(
    id="optimize-cost",
    title="Relax to Balanced policy after peak wave",
    detail="Recover conversion with minimal service risk",
    impact="+0.1-0.2 pt conversion; service stable",
    apply=_optimize_cost
)


# Evaluated and emitted in this order
DEFAULT_RULES: tuple[ActionRule, ...] = (
    ActionRule(TIGHTEN_PROMISE, lambda kpi, s: kpi.on_time_rate < 0.95),
    ActionRule(REBALANCE_NODES, lambda kpi, s: s.surge > 0.25),
    ActionRule(
        BOOST_CROWD,
        lambda kpi, s: s.parcel_delta_primary < -0.05 or s.parcel_delta_secondary < -0.05
    ),
    ActionRule(OPTIMIZE_COST, lambda kpi, s: kpi.on_time_rate >= 0.97),
)


def propose_actions(
    kpi: KPIResult,
    config: ScenarioConfig,
    rules: tuple = DEFAULT_RULES
) -> list[RecommendedAction]:
    """
    Propose actions for the current KPIs.

    `kpi` must come from the most recent compute_kpis call for `config`.
    """
    actions = [rule.action for rule in rules if rule.evaluate(kpi, config)]
    logger.debug(f"Proposed actions: {[a.id for a in actions] or 'none'}")
    return actions


def apply_actions(config: ScenarioConfig, actions: list[RecommendedAction]) -> ScenarioConfig:
    """Fold every action's delta over the config, in list order."""
    for action in actions:
        config = action.apply(config)
    return config
