"""
Network Entities - Reference Data and Scenario

This module defines the entities the KPI and recommendation engines
operate on. Reference entities are fixed for the life of the process;
the scenario is the single value the user changes.

Entities:
- DistributionNode: A fulfilment facility with hourly capacity and demand
- Carrier: A delivery provider with on-time probability, cost and capacity
- ScenarioConfig: The current "what-if" inputs (surge, weather, policy, levers)
"""

from dataclasses import dataclass, replace
from enum import Enum


class FacilityKind(Enum):
    """Kinds of fulfilment facility in the network."""
    MICRO_FULFILLMENT = "MicroFulfillment"
    REGIONAL_CENTER = "RegionalCenter"
    STORE = "Store"


class Policy(str, Enum):
    """
    Promise policy.

    Aggressive promises tighter windows (more conversion, less reliability);
    Reliable pads windows (fewer late orders, slightly lower conversion).
    """
    AGGRESSIVE = "Aggressive"
    BALANCED = "Balanced"
    RELIABLE = "Reliable"


@dataclass(frozen=True)
class DistributionNode:
    """A facility that fulfils orders."""
    id: str
    city: str
    kind: FacilityKind
    base_capacity_per_hour: float  # orders/hour
    base_demand_per_hour: float  # orders/hour


@dataclass(frozen=True)
class Carrier:
    """A delivery provider."""
    name: str
    base_otp: float  # on-time probability
    base_cost: float  # $ per order
    base_daily_capacity: float  # orders/day


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value into [lo, hi]."""
    return max(lo, min(hi, value))


# Control domains for scenario fields, as (low, high)
SURGE_RANGE = (0.0, 1.0)
WEATHER_RANGE = (0.0, 1.0)
MEMBER_MIX_RANGE = (0.0, 1.0)
CARRIER_DELTA_RANGE = (-0.5, 0.5)
CROWD_BOOST_RANGE = (0.0, 0.5)
REBALANCE_RANGE = (0.0, 0.5)


@dataclass(frozen=True)
class ScenarioConfig:
    """
    The user's current what-if inputs.

    A plain value object: fields do not depend on each other and every
    change produces a new instance (see `with_changes`). Validity is
    enforced at the boundary via `clamped()`; the engines tolerate
    out-of-range values by clamping their outputs.
    """
    surge: float = 0.35  # additional demand fraction
    weather: float = 0.2  # 0..1, higher is worse
    member_mix: float = 0.4  # share of member (Plus/Total) orders
    policy: Policy = Policy.BALANCED

    # Signed fraction of baseline daily capacity for the two parcel carriers
    parcel_delta_primary: float = -0.08
    parcel_delta_secondary: float = 0.0

    crowd_boost: float = 0.1  # capacity boost for the crowd carrier pair
    reserve_for_members: bool = True
    rebalance: float = 0.0  # share shifted from the first node to the target node

    def with_changes(self, **changes) -> "ScenarioConfig":
        """Return a new config with the given fields replaced."""
        return replace(self, **changes)

    def clamped(self) -> "ScenarioConfig":
        """Return a copy with every numeric field clamped to its control domain."""
        return ScenarioConfig(
            surge=clamp(self.surge, *SURGE_RANGE),
            weather=clamp(self.weather, *WEATHER_RANGE),
            member_mix=clamp(self.member_mix, *MEMBER_MIX_RANGE),
            policy=Policy(self.policy),
            parcel_delta_primary=clamp(self.parcel_delta_primary, *CARRIER_DELTA_RANGE),
            parcel_delta_secondary=clamp(self.parcel_delta_secondary, *CARRIER_DELTA_RANGE),
            crowd_boost=clamp(self.crowd_boost, *CROWD_BOOST_RANGE),
            reserve_for_members=bool(self.reserve_for_members),
            rebalance=clamp(self.rebalance, *REBALANCE_RANGE),
        )

    def to_dict(self) -> dict:
        return {
            "surge": self.surge,
            "weather": self.weather,
            "member_mix": self.member_mix,
            "policy": self.policy.value,
            "parcel_delta_primary": self.parcel_delta_primary,
            "parcel_delta_secondary": self.parcel_delta_secondary,
            "crowd_boost": self.crowd_boost,
            "reserve_for_members": self.reserve_for_members,
            "rebalance": self.rebalance,
        }


DEFAULT_SCENARIO = ScenarioConfig()

# Index 0 is the rebalancing source, index 3 the target.
DEFAULT_NODES: tuple[DistributionNode, ...] = (
    DistributionNode("MEC-1 Chicago", "Chicago, IL", FacilityKind.MICRO_FULFILLMENT, 820, 640),
    DistributionNode("RDC-East Columbus", "Columbus, OH", FacilityKind.REGIONAL_CENTER, 1200, 910),
    DistributionNode("Store-102 Lincoln Park", "Chicago, IL", FacilityKind.STORE, 110, 85),
    DistributionNode("MEC-2 Newark", "Newark, NJ", FacilityKind.MICRO_FULFILLMENT, 930, 720),
)

# Indices 0 and 1 are the parcel carriers, 2 and 3 the crowd pair.
DEFAULT_CARRIERS: tuple[Carrier, ...] = (
    Carrier("UPS", 0.95, 7.1, 5200),
    Carrier("FedEx", 0.94, 7.4, 5000),
    Carrier("UberDirect", 0.91, 9.6, 1300),
    Carrier("DoorDash", 0.90, 9.2, 1200),
)
