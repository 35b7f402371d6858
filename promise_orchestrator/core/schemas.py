"""
Pydantic Schemas for Boundary Input and Snapshots

These schemas sit where untrusted values enter or leave the model:
- ScenarioInput validates and clamps user-provided scenario values
- KPISnapshot is the serialisable view of a computation
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

from .entities import (
    ScenarioConfig,
    Policy,
    clamp,
    SURGE_RANGE,
    WEATHER_RANGE,
    MEMBER_MIX_RANGE,
    CARRIER_DELTA_RANGE,
    CROWD_BOOST_RANGE,
    REBALANCE_RANGE,
)


# =============================================================================
# Scenario Input
# =============================================================================

class ScenarioInput(BaseModel):
    """Scenario values as written by a control surface, clamped to their domains."""
    surge: float = Field(
        default=0.35,
        description="Additional demand over base, as a fraction"
    )
    weather: float = Field(
        default=0.2,
        description="Weather severity index, 0 (clear) to 1 (severe)"
    )
    member_mix: float = Field(
        default=0.4,
        description="Share of member orders"
    )
    policy: Policy = Field(
        default=Policy.BALANCED,
        description="Promise policy"
    )
    parcel_delta_primary: float = Field(
        default=-0.08,
        description="Capacity change for the first parcel carrier, signed fraction"
    )
    parcel_delta_secondary: float = Field(
        default=0.0,
        description="Capacity change for the second parcel carrier, signed fraction"
    )
    crowd_boost: float = Field(
        default=0.1,
        description="Capacity boost for the crowd carrier pair"
    )
    reserve_for_members: bool = Field(
        default=True,
        description="Reserve promise capacity for member orders"
    )
    rebalance: float = Field(
        default=0.0,
        description="Share of first-node volume shifted to the target node"
    )

    @field_validator("surge")
    @classmethod
    def _clamp_surge(cls, v: float) -> float:
        return clamp(v, *SURGE_RANGE)

    @field_validator("weather")
    @classmethod
    def _clamp_weather(cls, v: float) -> float:
        return clamp(v, *WEATHER_RANGE)

    @field_validator("member_mix")
    @classmethod
    def _clamp_member_mix(cls, v: float) -> float:
        return clamp(v, *MEMBER_MIX_RANGE)

    @field_validator("parcel_delta_primary", "parcel_delta_secondary")
    @classmethod
    def _clamp_carrier_delta(cls, v: float) -> float:
        return clamp(v, *CARRIER_DELTA_RANGE)

    @field_validator("crowd_boost")
    @classmethod
    def _clamp_crowd_boost(cls, v: float) -> float:
        return clamp(v, *CROWD_BOOST_RANGE)

    @field_validator("rebalance")
    @classmethod
    def _clamp_rebalance(cls, v: float) -> float:
        return clamp(v, *REBALANCE_RANGE)

    def to_config(self) -> ScenarioConfig:
        return ScenarioConfig(**self.model_dump())

    @classmethod
    def from_config(cls, config: ScenarioConfig) -> "ScenarioInput":
        return cls(**config.to_dict())


# =============================================================================
# KPI Snapshot
# =============================================================================

class BucketSnapshot(BaseModel):
    """One time bucket of demand, capacity and service."""
    bucket: int
    demand: float
    capacity: float
    on_time: float = Field(description="Bucket-level service ratio, 0 to 1")


class ActionSnapshot(BaseModel):
    """A recommended action without its transformation."""
    id: str
    title: str
    detail: str
    impact: str


class KPISnapshot(BaseModel):
    """Serialisable result of one pipeline run."""
    scenario: ScenarioInput
    buckets: List[BucketSnapshot] = Field(default_factory=list)
    daily_orders: float
    on_time_rate: float
    late_rate: float
    late_cost_avoided: float
    conversion_rate: float
    conversion_lift_pts: float
    cost_per_order: float
    on_time_delta_pts: float = Field(
        default=0.0,
        description="On-time rate change vs the baseline scenario, in points"
    )
    actions: List[ActionSnapshot] = Field(default_factory=list)
