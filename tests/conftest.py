"""Shared fixtures for the orchestrator tests."""

from datetime import datetime

import pytest

from promise_orchestrator.config.settings import Settings, StreamConfig, StoryConfig
from promise_orchestrator.core.entities import Policy, ScenarioConfig
from promise_orchestrator.orchestration.session import OrchestratorSession


@pytest.fixture
def default_config():
    return ScenarioConfig()


@pytest.fixture
def base_config():
    """Moderate surge, clear weather, no levers pulled."""
    return ScenarioConfig(
        surge=0.2,
        weather=0.0,
        member_mix=0.3,
        policy=Policy.BALANCED,
        parcel_delta_primary=0.0,
        parcel_delta_secondary=0.0,
        crowd_boost=0.0,
        reserve_for_members=False,
        rebalance=0.0
    )


@pytest.fixture
def calm_config():
    """Scenario where no recommendation rule holds (OTD ~96%)."""
    return ScenarioConfig(
        surge=0.0,
        weather=0.0,
        member_mix=0.4,
        policy=Policy.BALANCED,
        parcel_delta_primary=0.0,
        parcel_delta_secondary=0.0,
        crowd_boost=0.0,
        reserve_for_members=True,
        rebalance=0.0
    )


@pytest.fixture
def clock():
    return lambda: datetime(2026, 11, 27, 14, 5)


@pytest.fixture
def settings():
    return Settings(stream=StreamConfig(), story=StoryConfig())


@pytest.fixture
def session(settings, clock):
    return OrchestratorSession(settings=settings, clock=clock)
