"""
Story Mode - Scripted Scenario Playback

A guided holiday-spike scenario: surge → carrier dip → decision → plan.

Steps are timed callbacks against an orchestration session. There are no
real timers: the caller advances the story by elapsed seconds and every
step whose offset has passed fires once, in order.
"""

from dataclasses import dataclass
from typing import Callable, TYPE_CHECKING
import logging

from ..config.settings import StoryConfig

if TYPE_CHECKING:
    from .session import OrchestratorSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoryStep:
    """One scripted step."""
    at_seconds: float
    name: str
    effect: Callable[["OrchestratorSession"], None]


def build_story_steps(config: StoryConfig = None) -> tuple[StoryStep, ...]:
    """Build the holiday-spike script from configured offsets and values."""
    config = config or StoryConfig()

    def begin(session: "OrchestratorSession") -> None:
        session.set_stage("sense")
        session.log("System", "Story Mode: Holiday spike begins.")

    def surge(session: "OrchestratorSession") -> None:
        session.update(surge=config.surge_value)

    def carrier_dip(session: "OrchestratorSession") -> None:
        session.set_stage("forecast")
        session.update(parcel_delta_primary=config.carrier_dip_value)
        session.log("ForecastAgent", "UPS capacity dip detected; risk to same-day ZIPs.")

    def decide(session: "OrchestratorSession") -> None:
        session.set_stage("decide")
        proposed = ", ".join(a.id for a in session.actions) or "Tighten promise; crowd boost"
        session.log("DecideAgent", f"Proposed: {proposed}")

    def act(session: "OrchestratorSession") -> None:
        session.apply_plan()

    def finish(session: "OrchestratorSession") -> None:
        session.story.finish()

    return (
        StoryStep(0.0, "begin", begin),
        StoryStep(config.surge_at, "surge", surge),
        StoryStep(config.carrier_dip_at, "carrier_dip", carrier_dip),
        StoryStep(config.decide_at, "decide", decide),
        StoryStep(config.apply_at, "act", act),
        StoryStep(config.finish_at, "finish", finish),
    )


class StoryMode:
    """
    Plays a fixed sequence of steps against a session.

    Lifecycle:
    - start(): refuses while running; fires the step at offset 0
    - advance(elapsed): fires every pending step with at_seconds <= elapsed
    - cancel(): drops pending steps (used on reset)
    """

    def __init__(self, steps: tuple = None):
        self.steps = tuple(sorted(steps or build_story_steps(), key=lambda s: s.at_seconds))
        self.running = False
        self._next_index = 0
        self.fired: list[str] = []

    @property
    def pending(self) -> list[StoryStep]:
        if not self.running:
            return []
        return list(self.steps[self._next_index:])

    def start(self, session: "OrchestratorSession") -> bool:
        if self.running:
            logger.debug("Story already running; start ignored")
            return False

        self.running = True
        self._next_index = 0
        self.fired = []
        self.advance(session, 0.0)
        return True

    def advance(self, session: "OrchestratorSession", elapsed_seconds: float) -> list[str]:
        """Fire due steps; returns the names fired by this call."""
        fired_now = []
        while self.running and self._next_index < len(self.steps):
            step = self.steps[self._next_index]
            if step.at_seconds > elapsed_seconds:
                break
            self._next_index += 1
            logger.debug(f"Story step '{step.name}' at {step.at_seconds:.1f}s")
            step.effect(session)
            fired_now.append(step.name)
            self.fired.append(step.name)
        return fired_now

    def finish(self) -> None:
        self.running = False
        self._next_index = len(self.steps)

    def cancel(self) -> None:
        if self.running:
            logger.debug("Story cancelled")
        self.finish()
