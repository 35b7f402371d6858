"""
Tests for boundary validation of scenario input.
"""

import pytest
from pydantic import ValidationError

from promise_orchestrator.core.entities import Policy, ScenarioConfig
from promise_orchestrator.core.schemas import ScenarioInput


class TestScenarioInput:

    def test_defaults_match_default_scenario(self):
        assert ScenarioInput().to_config() == ScenarioConfig()

    def test_values_are_clamped_to_domains(self):
        scenario = ScenarioInput(
            surge=2.0,
            weather=-1.0,
            member_mix=1.5,
            parcel_delta_primary=-0.9,
            parcel_delta_secondary=0.9,
            crowd_boost=0.8,
            rebalance=-0.1,
        )
        assert scenario.surge == 1.0
        assert scenario.weather == 0.0
        assert scenario.member_mix == 1.0
        assert scenario.parcel_delta_primary == -0.5
        assert scenario.parcel_delta_secondary == 0.5
        assert scenario.crowd_boost == 0.5
        assert scenario.rebalance == 0.0

    def test_policy_from_string(self):
        assert ScenarioInput(policy="Aggressive").policy == Policy.AGGRESSIVE

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValidationError):
            ScenarioInput(policy="Bogus")

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            ScenarioInput(surge="lots")

    def test_round_trip_through_config(self, base_config):
        assert ScenarioInput.from_config(base_config).to_config() == base_config

    def test_config_clamped_matches_input(self):
        raw = ScenarioConfig(surge=4.0, crowd_boost=-2.0, rebalance=0.9)
        clamped = raw.clamped()
        assert clamped == ScenarioInput(surge=4.0, crowd_boost=-2.0, rebalance=0.9).to_config()
        assert raw.surge == 4.0
