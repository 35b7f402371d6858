"""
Tests for the executive brief and node health views.
"""

import typing

import pytest

from promise_orchestrator.core.entities import DEFAULT_NODES
from promise_orchestrator.simulation.kpi_engine import (
    BUCKETS,
    compute_kpis,
    baseline_config,
    node_utilization,
)
from promise_orchestrator.metrics.brief import (
    METRIC_EXPLANATIONS,
    BriefCard,
    ChartPoint,
    ExecutiveBrief,
    MetricTile,
    build_brief,
    build_cards,
    build_impact,
    build_series,
    build_tiles,
)
from promise_orchestrator.metrics.health import (
    HealthSeverity,
    classify_utilization,
    node_health,
    summarize,
)


def kpis_for(config):
    return compute_kpis(config), compute_kpis(baseline_config(config))


class TestTiles:

    def test_tile_order_and_labels(self, default_config):
        tiles = build_tiles(*kpis_for(default_config))
        assert [t.key for t in tiles] == ["otd", "orders", "conv", "late$"]
        assert [t.label for t in tiles] == ["On-Time", "Orders / day", "Conversion", "Late $ Avoided"]

    def test_tile_values(self, default_config):
        kpi, baseline = kpis_for(default_config)
        otd, orders, conv, late = build_tiles(kpi, baseline)
        assert otd.value == "90.3%"
        assert otd.sub.startswith("Δ ")
        assert orders.sub == "synthetic"
        assert conv.value == "2.63%"
        assert late.sub == "@ $8/late"
        assert late.value.startswith("$")

    def test_every_tile_has_an_explanation(self, default_config):
        for tile in build_tiles(*kpis_for(default_config)):
            assert tile.key in METRIC_EXPLANATIONS


class TestCards:

    def test_default_scenario_is_at_risk(self, default_config):
        service, carrier, member = build_cards(*kpis_for(default_config), default_config)
        assert service.title == "ETA risk rising in Midwest (OTD < 95%)"
        assert carrier.title == "UPS capacity soft; consider crowd boost"
        assert member.title == "Member promise protected"
        assert carrier.impact.endswith("$/order (blend)")

    def test_calm_scenario_is_stable(self, calm_config):
        service, carrier, member = build_cards(*kpis_for(calm_config), calm_config)
        assert service.title == "Service stable across nodes (OTD ≥ 95%)"
        assert service.impact == "96.1% on-time (Δ +2.4 pts)"
        assert carrier.title == "Carrier capacity healthy"
        assert member.title == "Member promise protected"

    def test_member_card_without_reserve(self, base_config):
        member = build_cards(*kpis_for(base_config), base_config)[2]
        assert member.title == "Enable member capacity reserve"


class TestSeriesAndImpact:

    def test_series_shape(self, default_config):
        series = build_series(compute_kpis(default_config))
        assert set(series) == {"capacity", "demand", "on_time_pct", "capacity_gap"}
        for points in series.values():
            assert len(points) == BUCKETS
            assert [p.x for p in points] == [f"T{i}" for i in range(1, BUCKETS + 1)]

    def test_on_time_series_is_percent(self, default_config):
        points = build_series(compute_kpis(default_config))["on_time_pct"]
        assert all(0 <= p.y <= 100 for p in points)

    def test_impact(self, calm_config):
        impact = build_impact(*kpis_for(calm_config))
        assert impact["on_time_delta_pts"] == pytest.approx(2.4)
        assert impact["cost_per_order"] == pytest.approx(7.6)

    def test_build_brief(self, default_config):
        kpi, baseline = kpis_for(default_config)
        brief = build_brief(kpi, baseline, default_config)
        assert len(brief.tiles) == 4
        assert len(brief.cards) == 3
        assert set(brief.baseline_series) == set(brief.series)

    def test_brief_fields_are_typed(self):
        hints = typing.get_type_hints(ExecutiveBrief)
        assert hints["tiles"] == list[MetricTile]
        assert hints["cards"] == list[BriefCard]
        assert hints["series"] == dict[str, list[ChartPoint]]


class TestNodeHealth:

    @pytest.mark.parametrize("utilization, severity", [
        (0.96, HealthSeverity.CRITICAL),
        (0.95, HealthSeverity.WARNING),
        (0.90, HealthSeverity.WARNING),
        (0.85, HealthSeverity.HEALTHY),
        (0.10, HealthSeverity.HEALTHY),
    ])
    def test_thresholds(self, utilization, severity):
        assert classify_utilization(utilization) == severity

    def test_default_surge_saturates_every_node(self, default_config):
        report = node_health(DEFAULT_NODES, node_utilization(default_config))
        assert [n.node_id for n in report] == [n.id for n in DEFAULT_NODES]
        assert all(n.severity == HealthSeverity.CRITICAL for n in report)
        assert all(n.bar_fill == 1.0 for n in report)

    def test_no_surge_is_healthy(self, calm_config):
        report = node_health(DEFAULT_NODES, node_utilization(calm_config))
        assert all(n.severity == HealthSeverity.HEALTHY for n in report)

    def test_summarize(self, default_config):
        summary = summarize(node_health(DEFAULT_NODES, node_utilization(default_config)))
        assert summary["total"] == 4
        assert summary["by_severity"] == {"healthy": 0, "warning": 0, "critical": 4}
        assert summary["critical_nodes"][0] == "MEC-1 Chicago"
