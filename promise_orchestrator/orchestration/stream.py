"""
Agent Activity Stream

Live commentary of what the agents are sensing, deciding and doing:
- A newest-first, capacity-bounded event log
- Filters for agent vs system entries
- A seeded commentary generator producing canned agent lines

The commentary generator is the only source of randomness in the
package and never influences KPI computation.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional
import math

from ..core.entities import ScenarioConfig
from ..simulation.kpi_engine import KPIResult


class StreamFilter(Enum):
    """Activity stream filters."""
    ALL = "All"
    AGENT = "Agent"
    SYSTEM = "System"


@dataclass(frozen=True)
class AgentEvent:
    """One line in the activity stream."""
    t: str  # HH:MM
    who: str
    text: str

    @property
    def is_agent(self) -> bool:
        return "Agent" in self.who

    @property
    def is_system(self) -> bool:
        return self.who in ("System", "Orchestrator")


INITIAL_EVENTS: tuple[AgentEvent, ...] = (
    AgentEvent("09:00", "SenseAgent", "Ingested 8 weeks history + live slots. Surge = 35%; WeatherIdx = 0.20."),
)


def clock_stamp(clock: Callable[[], datetime] = datetime.now) -> str:
    """Format the clock's current time as HH:MM."""
    return clock().strftime("%H:%M")


class TickClock:
    """
    Simulated wall clock for driving the stream without real timers.

    Calling it returns the current simulated time; `tick()` moves it
    forward by one rotation interval.
    """

    def __init__(self, start: datetime, interval_seconds: float = 3.5):
        self.now = start
        self.interval = timedelta(seconds=interval_seconds)

    def __call__(self) -> datetime:
        return self.now

    def tick(self) -> datetime:
        self.now += self.interval
        return self.now


class EventStream:
    """Newest-first event log capped at `max_events`."""

    def __init__(self, max_events: int = 30, initial: tuple = INITIAL_EVENTS):
        self.max_events = max_events
        self._events: list[AgentEvent] = list(initial)[:max_events]

    @property
    def events(self) -> list[AgentEvent]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def push(self, event: AgentEvent) -> None:
        """Prepend an event, dropping the oldest beyond capacity."""
        self._events.insert(0, event)
        del self._events[self.max_events:]

    def replace(self, events: list[AgentEvent]) -> None:
        """Replace the whole log."""
        self._events = list(events)[:self.max_events]

    def filtered(self, stream_filter: StreamFilter = StreamFilter.ALL) -> list[AgentEvent]:
        if stream_filter == StreamFilter.AGENT:
            return [e for e in self._events if e.is_agent]
        if stream_filter == StreamFilter.SYSTEM:
            return [e for e in self._events if e.is_system]
        return self.events


class LehmerRandom:
    """
    Minimal-standard Lehmer generator (multiplier 48271, modulus 2^31 - 1).

    Yields the same sequence for the same seed on every platform.
    """

    MODULUS = 2147483647
    MULTIPLIER = 48271

    def __init__(self, seed: int = 42):
        self._state = seed % self.MODULUS

    def random(self) -> float:
        self._state = (self._state * self.MULTIPLIER) % self.MODULUS
        return self._state / self.MODULUS

    def choice(self, items: list):
        return items[math.floor(self.random() * len(items))]


def _percent(value: float) -> int:
    return math.floor(value * 100 + 0.5)


def commentary_lines(config: ScenarioConfig, kpi: KPIResult) -> list[str]:
    """Canned agent lines for the current scenario."""
    carrier_line = (
        f"CarrierAgent: UPS cap {_percent(abs(config.parcel_delta_primary))}% down; proposing crowd boost."
        if config.parcel_delta_primary < 0
        else "CarrierAgent: Parcel steady; maintain blend."
    )
    member_line = (
        "MemberAgent: Capacity reserve active for Plus/Total through 8pm."
        if config.reserve_for_members
        else "MemberAgent: Consider enabling member reserve (10-15%)."
    )
    return [
        f"ForecastAgent: Next wave +{_percent(config.surge)}% vs base; Chicago tight at cutoff.",
        f"PromiseAgent: {config.policy.value} policy -> expected OTD {kpi.on_time_rate * 100:.1f}%.",
        carrier_line,
        member_line,
    ]


class CommentaryRotator:
    """Picks one commentary line per tick using a seeded generator."""

    def __init__(
        self,
        seed: int = 42,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[LehmerRandom] = None
    ):
        self._rng = rng or LehmerRandom(seed)
        self._clock = clock

    def next_event(self, config: ScenarioConfig, kpi: KPIResult) -> AgentEvent:
        text = self._rng.choice(commentary_lines(config, kpi))
        return AgentEvent(clock_stamp(self._clock), "Agent", text)
