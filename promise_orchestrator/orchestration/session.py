"""
Orchestrator Session - Process-wide Scenario State

Holds what the control tower shows at any moment:
- The current scenario (replaced wholesale on every change)
- A fixed baseline for comparison
- The Sense → Forecast → Decide → Act stage indicator
- The activity stream, Story Mode and landing/app view

KPIs and actions are always derived from the current scenario, so a
metric/action pair can never be stale.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional
import logging

from ..config.settings import Settings, get_settings
from ..core.entities import (
    ScenarioConfig,
    Policy,
    DEFAULT_CARRIERS,
    DEFAULT_NODES,
    DEFAULT_SCENARIO,
    clamp,
    REBALANCE_RANGE,
)
from ..simulation.kpi_engine import KPIResult, compute_kpis, baseline_config, node_utilization
from .actions import RecommendedAction, propose_actions, apply_actions
from .stream import (
    AgentEvent,
    CommentaryRotator,
    EventStream,
    StreamFilter,
    INITIAL_EVENTS,
    clock_stamp,
)
from .story import StoryMode, build_story_steps

logger = logging.getLogger(__name__)


class View(Enum):
    LANDING = "landing"
    APP = "app"


class Tab(Enum):
    BRIEF = "brief"
    ORCHESTRATOR = "orchestrator"


STAGES = ("sense", "forecast", "decide", "act")


@dataclass(frozen=True)
class FlowState:
    """One card of the orchestration flow."""
    id: str
    label: str
    active: bool
    note: str = ""


class OrchestratorSession:
    """
    Stateful wrapper around the pure KPI and recommendation engines.

    Flow:
    1. update() replaces the scenario
    2. kpis / actions recompute from the new scenario
    3. apply_plan() folds the actions back into the scenario
    """

    def __init__(
        self,
        config: ScenarioConfig = None,
        settings: Settings = None,
        nodes: tuple = DEFAULT_NODES,
        carriers: tuple = DEFAULT_CARRIERS,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.settings = settings or get_settings()
        self.nodes = nodes
        self.carriers = carriers
        self._clock = clock
        self._initial_config = (config or DEFAULT_SCENARIO).clamped()

        self.config = self._initial_config
        self.baseline = compute_kpis(baseline_config(self.config), nodes, carriers)

        self.view = View.LANDING
        self.tab = Tab.BRIEF
        self.stage = "sense"
        self.applied = False
        self.stream_filter = StreamFilter.ALL

        self.stream = EventStream(max_events=self.settings.stream.max_events)
        self._rotator = CommentaryRotator(seed=self.settings.stream.commentary_seed, clock=clock)
        self.story = StoryMode(build_story_steps(self.settings.story))

        # Memoised on the config value, which is immutable
        self._cache_key: Optional[ScenarioConfig] = None
        self._cache: tuple = ()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def _derive(self) -> tuple:
        if self._cache_key != self.config:
            kpi = compute_kpis(self.config, self.nodes, self.carriers)
            self._cache = (kpi, propose_actions(kpi, self.config))
            self._cache_key = self.config
        return self._cache

    @property
    def kpis(self) -> KPIResult:
        return self._derive()[0]

    @property
    def actions(self) -> list[RecommendedAction]:
        return list(self._derive()[1])

    @property
    def story_running(self) -> bool:
        return self.story.running

    def node_utilization(self) -> dict[str, float]:
        return node_utilization(self.config, self.nodes)

    def flow_states(self) -> list[FlowState]:
        actions = self.actions
        notes = {
            "sense": "Orders, slots, carriers",
            "forecast": "Surge + weather",
            "decide": actions[0].title if actions else "Policy steady",
            "act": "Apply plan & monitor",
        }
        return [
            FlowState(id=s, label=s.capitalize(), active=self.stage == s, note=notes[s])
            for s in STAGES
        ]

    def visible_events(self) -> list[AgentEvent]:
        return self.stream.filtered(self.stream_filter)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def update(self, **changes) -> ScenarioConfig:
        """Replace the scenario with one carrying `changes`, clamped at the boundary."""
        self.config = self.config.with_changes(**changes).clamped()
        return self.config

    def set_stage(self, stage: str) -> None:
        if stage not in STAGES:
            raise ValueError(f"Unknown stage: {stage}")
        self.stage = stage

    def log(self, who: str, text: str) -> AgentEvent:
        event = AgentEvent(clock_stamp(self._clock), who, text)
        self.stream.push(event)
        logger.debug(f"[{who}] {text}")
        return event

    def apply_plan(self) -> bool:
        """Apply every recommended action at once. Returns False when there is nothing to apply."""
        actions = self.actions
        if not actions:
            logger.debug("No actions to apply")
            return False

        self.config = apply_actions(self.config, actions).clamped()
        self.applied = True
        self.stage = "act"
        self.log("Orchestrator", f"Applied plan: {', '.join(a.id for a in actions)}")
        return True

    def reset(self, log_event: bool = True, hard: bool = False) -> None:
        """
        Restore the starting scenario.

        A hard reset also replaces the activity stream with its initial
        entries.
        """
        self.story.cancel()
        self.config = self._initial_config
        self.applied = False
        self.stage = "sense"

        reset_event = AgentEvent(clock_stamp(self._clock), "System", "Reset to baseline scenario.")
        if hard:
            events = list(INITIAL_EVENTS)
            if log_event:
                events.insert(0, reset_event)
            self.stream.replace(events)
        elif log_event:
            self.stream.push(reset_event)

    def enter_app(self) -> None:
        self._switch_view(View.APP)

    def return_to_landing(self) -> None:
        self._switch_view(View.LANDING)

    def _switch_view(self, view: View) -> None:
        self.reset(log_event=False, hard=True)
        self.tab = Tab.BRIEF
        self.stream_filter = StreamFilter.ALL
        self.view = view

    # Node levers

    def shift_volume_away(self) -> ScenarioConfig:
        return self.update(rebalance=clamp(self.config.rebalance + 0.1, *REBALANCE_RANGE))

    def relax_promises(self) -> ScenarioConfig:
        return self.update(policy=Policy.RELIABLE)

    # ------------------------------------------------------------------
    # Timed behaviour
    # ------------------------------------------------------------------

    def rotate_commentary(self) -> Optional[AgentEvent]:
        """Add one agent commentary line. Only runs in the app view."""
        if self.view != View.APP:
            return None
        event = self._rotator.next_event(self.config, self.kpis)
        self.stream.push(event)
        return event

    def run_story(self) -> bool:
        if self.story.running or self.view != View.APP:
            logger.debug("Story Mode unavailable")
            return False
        return self.story.start(self)

    def advance_story(self, elapsed_seconds: float) -> list[str]:
        return self.story.advance(self, elapsed_seconds)
