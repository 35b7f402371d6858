"""
Executive Daily Brief

Generates the data behind the control tower views:
- Headline metric tiles with deltas vs baseline
- Service, carrier and member brief cards
- Per-bucket chart series for current and baseline scenarios
- Impact snapshot
"""

from dataclasses import dataclass, field
from datetime import datetime
import math

from ..core.entities import ScenarioConfig
from ..simulation.kpi_engine import KPIResult, LATE_COST


# Definitions shown when a tile is opened
METRIC_EXPLANATIONS = {
    "otd": (
        "On-Time (OTD) = Orders delivered within promised window / All delivered orders. "
        "Driven by slot capacity, carrier OTP and policy (Aggressive <-> Reliable). "
        "Weather penalty reduces OTD; member reserve can boost it."
    ),
    "orders": (
        "Orders/day is simulated from base demand, time-of-day wave shape, "
        "and the Holiday Surge setting."
    ),
    "conv": (
        "Conversion lifts with trustworthy ETAs and drops with over-aggressive promises. "
        "Baseline = 2.4%."
    ),
    "late$": (
        f"Late $ Avoided = (Baseline Late% - Current Late%) x Orders x ${LATE_COST:g} per late."
    ),
    "service": "Service tile summarizes OTD and cut-off health with a recommended stance.",
    "carrier": "Carrier tile reflects parcel vs crowd capacity, and its effect on $/order.",
    "member": "Membership tile shows whether capacity reserve is protecting Plus/Total ETAs.",
}


@dataclass(frozen=True)
class MetricTile:
    """A headline metric."""
    key: str
    label: str
    value: str
    sub: str = ""
    help: str = ""


@dataclass(frozen=True)
class BriefCard:
    """A narrative card in the daily brief."""
    key: str
    title: str
    detail: str
    impact: str


@dataclass(frozen=True)
class ChartPoint:
    x: str
    y: int


@dataclass
class ExecutiveBrief:
    """Complete brief snapshot."""
    generated_at: datetime = field(default_factory=datetime.now)

    tiles: list[MetricTile] = field(default_factory=list)
    cards: list[BriefCard] = field(default_factory=list)

    # Chart name -> list of ChartPoint
    series: dict[str, list[ChartPoint]] = field(default_factory=dict)
    baseline_series: dict[str, list[ChartPoint]] = field(default_factory=dict)

    impact: dict = field(default_factory=dict)


def _round(value: float) -> int:
    return math.floor(value + 0.5)


def _signed(value: float, digits: int = 1) -> str:
    return f"{'+' if value >= 0 else ''}{value:.{digits}f}"


def on_time_delta_pts(kpi: KPIResult, baseline: KPIResult) -> float:
    return (kpi.on_time_rate - baseline.on_time_rate) * 100


def build_tiles(kpi: KPIResult, baseline: KPIResult) -> list[MetricTile]:
    return [
        MetricTile(
            key="otd",
            label="On-Time",
            value=f"{kpi.on_time_rate * 100:.1f}%",
            sub=f"Δ {_signed(on_time_delta_pts(kpi, baseline))} pts",
            help="Share of orders delivered within the promised window."
        ),
        MetricTile(
            key="orders",
            label="Orders / day",
            value=f"{_round(kpi.daily_orders):,}",
            sub="synthetic",
            help="Projected daily order volume modeled from base demand + surge."
        ),
        MetricTile(
            key="conv",
            label="Conversion",
            value=f"{kpi.conversion_rate * 100:.2f}%",
            sub=f"Δ {kpi.conversion_lift_pts:.2f} pts",
            help="Checkout conversion impacted by promise reliability and policy."
        ),
        MetricTile(
            key="late$",
            label="Late $ Avoided",
            value=f"${_round(kpi.late_cost_avoided):,}",
            sub=f"@ ${LATE_COST:g}/late",
            help="Appeasement/avoid costs saved vs naive surge baseline."
        ),
    ]


def build_cards(kpi: KPIResult, baseline: KPIResult, config: ScenarioConfig) -> list[BriefCard]:
    at_risk = kpi.on_time_rate < 0.95
    delta = on_time_delta_pts(kpi, baseline)
    parcel_soft = config.parcel_delta_primary < 0

    return [
        BriefCard(
            key="service",
            title=(
                "ETA risk rising in Midwest (OTD < 95%)" if at_risk
                else "Service stable across nodes (OTD ≥ 95%)"
            ),
            detail=(
                "Chicago wave exceeds healthy cutoff capacity during surge hours; "
                "favor Reliable policy for non-members."
                if at_risk
                else "Healthy cutoffs; keep Balanced policy through evening wave."
            ),
            impact=f"{kpi.on_time_rate * 100:.1f}% on-time (Δ {'+' if delta > 0 else ''}{delta:.1f} pts)"
        ),
        BriefCard(
            key="carrier",
            title="UPS capacity soft; consider crowd boost" if parcel_soft else "Carrier capacity healthy",
            detail=(
                "Add +15% UberDirect/DD for short-haul ZIPs to stabilize same-day."
                if parcel_soft
                else "Hold crowd capacity flat; optimize cost per order."
            ),
            impact=f"${kpi.cost_per_order:.2f} $/order (blend)"
        ),
        BriefCard(
            key="member",
            title="Member promise protected" if config.reserve_for_members else "Enable member capacity reserve",
            detail=(
                "Plus/Total prioritized at cutoff windows."
                if config.reserve_for_members
                else "Reserve 10-15% slots for Plus/Total during surge."
            ),
            impact=f"{kpi.conversion_rate * 100:.2f}% conversion (Δ {kpi.conversion_lift_pts:.2f} pts)"
        ),
    ]


def build_series(kpi: KPIResult) -> dict[str, list[ChartPoint]]:
    """Per-bucket chart data, labelled T1..Tn."""
    def points(fn) -> list[ChartPoint]:
        return [ChartPoint(x=f"T{i + 1}", y=_round(fn(b))) for i, b in enumerate(kpi.buckets)]

    return {
        "capacity": points(lambda b: b.capacity),
        "demand": points(lambda b: b.demand),
        "on_time_pct": points(lambda b: b.on_time * 100),
        "capacity_gap": points(lambda b: b.capacity - b.demand),
    }


def build_impact(kpi: KPIResult, baseline: KPIResult) -> dict:
    """Quick deltas vs baseline."""
    return {
        "on_time_delta_pts": round(on_time_delta_pts(kpi, baseline), 1),
        "conversion_delta_pts": round(kpi.conversion_lift_pts, 2),
        "late_cost_avoided_per_day": _round(kpi.late_cost_avoided),
        "cost_per_order": round(kpi.cost_per_order, 2),
    }


def build_brief(kpi: KPIResult, baseline: KPIResult, config: ScenarioConfig) -> ExecutiveBrief:
    """Generate the complete brief for the current scenario."""
    return ExecutiveBrief(
        tiles=build_tiles(kpi, baseline),
        cards=build_cards(kpi, baseline, config),
        series=build_series(kpi),
        baseline_series=build_series(baseline),
        impact=build_impact(kpi, baseline)
    )
