#!/usr/bin/env python3
"""
Delivery Promise & Capacity Orchestrator - Main Demo

Runs the control tower against a synthetic omni-channel network during a
holiday surge:
1. Scenario and KPIs vs baseline
2. Recommended actions
3. Node health
4. Optional plan application and Story Mode playback
5. Activity stream

All data is synthetic and illustrative.
"""

from datetime import datetime
from typing import Optional, TextIO
import argparse
import json
import logging
import sys

from pydantic import ValidationError

from promise_orchestrator.config import get_settings
from promise_orchestrator.core.entities import DEFAULT_SCENARIO
from promise_orchestrator.core.schemas import (
    ScenarioInput,
    KPISnapshot,
    BucketSnapshot,
    ActionSnapshot
)
from promise_orchestrator.metrics import build_brief, node_health, summarize
from promise_orchestrator.metrics.brief import on_time_delta_pts
from promise_orchestrator.orchestration import OrchestratorSession, TickClock

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    d = DEFAULT_SCENARIO
    p = argparse.ArgumentParser(description="Delivery promise & capacity what-if demo")
    p.add_argument("--surge", type=float, default=d.surge, help="Additional demand over base (0-1)")
    p.add_argument("--weather", type=float, default=d.weather, help="Weather severity index (0-1)")
    p.add_argument("--member-mix", type=float, default=d.member_mix, help="Share of member orders (0-1)")
    p.add_argument("--policy", type=str, default=d.policy.value, help="Aggressive, Balanced or Reliable")
    p.add_argument("--ups-delta", type=float, default=d.parcel_delta_primary, help="UPS capacity change (-0.5-0.5)")
    p.add_argument("--fedex-delta", type=float, default=d.parcel_delta_secondary, help="FedEx capacity change (-0.5-0.5)")
    p.add_argument("--crowd-boost", type=float, default=d.crowd_boost, help="Crowd carrier capacity boost (0-0.5)")
    p.add_argument("--no-reserve", action="store_true", help="Disable member capacity reserve")
    p.add_argument("--rebalance", type=float, default=d.rebalance, help="Shift from Chicago to Newark (0-0.5)")
    p.add_argument("--apply", action="store_true", help="Apply the recommended plan")
    p.add_argument("--story", action="store_true", help="Play Story Mode")
    p.add_argument("--ticks", type=int, default=0, help="Commentary lines to rotate into the stream")
    p.add_argument("--json", action="store_true", help="Emit the KPI snapshot as JSON")
    return p.parse_args(argv)


def scenario_from_args(args: argparse.Namespace) -> ScenarioInput:
    return ScenarioInput(
        surge=args.surge,
        weather=args.weather,
        member_mix=args.member_mix,
        policy=args.policy,
        parcel_delta_primary=args.ups_delta,
        parcel_delta_secondary=args.fedex_delta,
        crowd_boost=args.crowd_boost,
        reserve_for_members=not args.no_reserve,
        rebalance=args.rebalance
    )


def build_snapshot(session: OrchestratorSession) -> KPISnapshot:
    kpi = session.kpis
    return KPISnapshot(
        scenario=ScenarioInput.from_config(session.config),
        buckets=[
            BucketSnapshot(bucket=b.bucket, demand=b.demand, capacity=b.capacity, on_time=b.on_time)
            for b in kpi.buckets
        ],
        daily_orders=kpi.daily_orders,
        on_time_rate=kpi.on_time_rate,
        late_rate=kpi.late_rate,
        late_cost_avoided=kpi.late_cost_avoided,
        conversion_rate=kpi.conversion_rate,
        conversion_lift_pts=kpi.conversion_lift_pts,
        cost_per_order=kpi.cost_per_order,
        on_time_delta_pts=on_time_delta_pts(kpi, session.baseline),
        actions=[
            ActionSnapshot(id=a.id, title=a.title, detail=a.detail, impact=a.impact)
            for a in session.actions
        ]
    )


def play_story(session: OrchestratorSession, out: Optional[TextIO] = None) -> None:
    """Advance Story Mode through every step on a simulated clock."""
    out = out or sys.stdout
    if not session.run_story():
        print("Story Mode unavailable.", file=out)
        return

    for step in session.story.steps:
        fired = session.advance_story(step.at_seconds)
        for name in fired:
            print(f"  [{step.at_seconds:>4.1f}s] {name:<12} stage={session.stage:<9} "
                  f"OTD={session.kpis.on_time_rate * 100:.1f}%", file=out)


def rotate_commentary(session: OrchestratorSession, clock: TickClock, ticks: int) -> None:
    """Rotate `ticks` commentary lines, one rotation interval apart."""
    for _ in range(ticks):
        clock.tick()
        session.rotate_commentary()


def print_report(session: OrchestratorSession) -> None:
    kpi = session.kpis
    brief = build_brief(kpi, session.baseline, session.config)

    print("=" * 60)
    print("SCENARIO")
    print("=" * 60)
    for key, value in session.config.to_dict().items():
        print(f"  {key:<24} {value}")
    print()

    print("=" * 60)
    print("KPIs (vs baseline)")
    print("=" * 60)
    for tile in brief.tiles:
        print(f"  {tile.label:<16} {tile.value:>12}   {tile.sub}")
    print(f"  {'Blended $/Order':<16} {'$' + format(kpi.cost_per_order, '.2f'):>12}")
    print()

    print("Daily brief:")
    for card in brief.cards:
        print(f"  - {card.title}")
        print(f"    {card.detail}")
        print(f"    {card.impact}")
    print()

    print("=" * 60)
    print("RECOMMENDED ACTIONS")
    print("=" * 60)
    actions = session.actions
    if not actions:
        print("  Hold current configuration.")
    for i, action in enumerate(actions, 1):
        print(f"  {i}. [{action.id}] {action.title}")
        print(f"     {action.detail}")
        print(f"     Impact: {action.impact}")
    print()

    print("=" * 60)
    print("NODE HEALTH")
    print("=" * 60)
    report = node_health(session.nodes, session.node_utilization())
    for node in report:
        print(f"  {node.node_id:<24} {node.city:<14} {node.utilization * 100:>6.1f}%  {node.severity.value}")
    print(f"  Critical: {summarize(report)['critical_nodes'] or 'none'}")
    print()

    print("Orchestration:")
    for state in session.flow_states():
        marker = "*" if state.active else " "
        print(f"  [{marker}] {state.label:<9} {state.note}")
    print()


def print_stream(session: OrchestratorSession) -> None:
    print("=" * 60)
    print("ACTIVITY STREAM")
    print("=" * 60)
    for event in session.visible_events():
        print(f"  {event.t}  {event.who:<13} {event.text}")
    print()


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    args = _parse_args(argv)
    try:
        scenario = scenario_from_args(args)
    except ValidationError as exc:
        print(f"Invalid scenario: {exc}", file=sys.stderr)
        return 2

    clock = TickClock(datetime.now(), settings.stream.rotation_interval_seconds)
    session = OrchestratorSession(config=scenario.to_config(), settings=settings, clock=clock)
    session.enter_app()

    # Narration goes to stderr so --json output stays parseable
    out = sys.stderr if args.json else sys.stdout

    if args.story:
        print("Story Mode: holiday spike", file=out)
        play_story(session, out)
        print(file=out)

    if args.apply:
        if not session.apply_plan():
            print("Nothing to apply.", file=out)

    rotate_commentary(session, clock, args.ticks)

    if args.json:
        print(json.dumps(build_snapshot(session).model_dump(mode="json"), indent=2))
        return 0

    print()
    print("+" + "=" * 58 + "+")
    print(f"|  {settings.app_name:<56}|")
    print("|  Synthetic data for demo. All figures illustrative.      |")
    print("+" + "=" * 58 + "+")
    print()

    print_report(session)
    print_stream(session)
    return 0


if __name__ == "__main__":
    sys.exit(main())
