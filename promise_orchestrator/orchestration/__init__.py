"""
Agent Orchestration

The "agentic" narrative over the pure engines:

Sense → Forecast → Decide → Act:
- Sense: orders, slots and carrier signals (the scenario)
- Forecast: KPI engine over surge and weather
- Decide: threshold rules propose configuration deltas
- Act: apply the plan and monitor

Supporting pieces:
- Activity stream with seeded agent commentary
- Story Mode scripted playback
- Session holding the process-wide state
"""

from .actions import (
    RecommendedAction,
    ActionRule,
    DEFAULT_RULES,
    propose_actions,
    apply_actions
)
from .stream import (
    AgentEvent,
    EventStream,
    StreamFilter,
    LehmerRandom,
    TickClock,
    CommentaryRotator,
    commentary_lines
)
from .story import StoryMode, StoryStep, build_story_steps
from .session import OrchestratorSession, FlowState, View, Tab, STAGES

__all__ = [
    "RecommendedAction",
    "ActionRule",
    "DEFAULT_RULES",
    "propose_actions",
    "apply_actions",
    "AgentEvent",
    "EventStream",
    "StreamFilter",
    "LehmerRandom",
    "TickClock",
    "CommentaryRotator",
    "commentary_lines",
    "StoryMode",
    "StoryStep",
    "build_story_steps",
    "OrchestratorSession",
    "FlowState",
    "View",
    "Tab",
    "STAGES"
]
