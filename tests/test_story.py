"""
Tests for Story Mode playback.

Validates:
- Steps fire in order, once, when their offset has passed
- Start is refused while running or outside the app view
- Reset cancels pending steps
"""

import pytest

from promise_orchestrator.config.settings import StoryConfig
from promise_orchestrator.core.entities import Policy
from promise_orchestrator.orchestration.story import StoryMode, StoryStep, build_story_steps


STEP_NAMES = ["begin", "surge", "carrier_dip", "decide", "act", "finish"]


@pytest.fixture
def app_session(session):
    session.enter_app()
    return session


class TestStoryLifecycle:

    def test_refused_on_landing(self, session):
        assert session.run_story() is False
        assert session.story_running is False

    def test_start_fires_opening_step(self, app_session):
        assert app_session.run_story() is True
        assert app_session.story_running is True
        assert app_session.story.fired == ["begin"]
        assert app_session.stage == "sense"
        assert app_session.stream.events[0].who == "System"
        assert app_session.stream.events[0].text == "Story Mode: Holiday spike begins."

    def test_refused_while_running(self, app_session):
        app_session.run_story()
        assert app_session.run_story() is False
        assert app_session.story.fired == ["begin"]

    def test_steps_fire_on_schedule(self, app_session):
        app_session.run_story()

        assert app_session.advance_story(0.5) == []
        assert app_session.advance_story(0.8) == ["surge"]
        assert app_session.config.surge == pytest.approx(0.5)

        assert app_session.advance_story(1.8) == ["carrier_dip"]
        assert app_session.stage == "forecast"
        assert app_session.config.parcel_delta_primary == pytest.approx(-0.12)
        assert app_session.stream.events[0].who == "ForecastAgent"

        assert app_session.advance_story(2.8) == ["decide"]
        assert app_session.stage == "decide"
        assert app_session.stream.events[0].who == "DecideAgent"
        assert app_session.stream.events[0].text == (
            "Proposed: tighten-promise, rebalance-nodes, boost-crowd"
        )

        assert app_session.advance_story(3.8) == ["act"]
        assert app_session.stage == "act"
        assert app_session.applied is True
        assert app_session.config.policy == Policy.RELIABLE

        assert app_session.story_running is True
        assert app_session.advance_story(5.2) == ["finish"]
        assert app_session.story_running is False

    def test_late_advance_fires_everything_in_order(self, app_session):
        app_session.run_story()
        fired = app_session.advance_story(60.0)
        assert fired == STEP_NAMES[1:]
        assert app_session.story.fired == STEP_NAMES
        assert app_session.story_running is False

    def test_steps_fire_once(self, app_session):
        app_session.run_story()
        app_session.advance_story(2.0)
        assert app_session.advance_story(2.0) == []
        assert app_session.story.fired.count("surge") == 1

    def test_can_replay_after_finish(self, app_session):
        app_session.run_story()
        app_session.advance_story(10.0)
        assert app_session.run_story() is True
        assert app_session.story.fired == ["begin"]

    def test_reset_cancels_story(self, app_session):
        app_session.run_story()
        app_session.advance_story(1.0)
        app_session.reset()
        assert app_session.story_running is False
        assert app_session.story.pending == []
        assert app_session.advance_story(10.0) == []
        assert app_session.config.parcel_delta_primary == pytest.approx(-0.08)

    def test_return_to_landing_stops_story(self, app_session):
        app_session.run_story()
        app_session.return_to_landing()
        assert app_session.story_running is False


class TestStorySteps:

    def test_default_script(self):
        steps = build_story_steps()
        assert [s.name for s in steps] == STEP_NAMES
        assert [s.at_seconds for s in steps] == [0.0, 0.8, 1.8, 2.8, 3.8, 5.2]

    def test_configured_offsets(self):
        steps = build_story_steps(StoryConfig(surge_at=0.1, finish_at=9.0))
        by_name = {s.name: s.at_seconds for s in steps}
        assert by_name["surge"] == 0.1
        assert by_name["finish"] == 9.0

    def test_steps_are_sorted(self):
        calls = []
        story = StoryMode((
            StoryStep(2.0, "second", lambda s: calls.append("second")),
            StoryStep(0.0, "first", lambda s: calls.append("first")),
            StoryStep(3.0, "third", lambda s: calls.append("third")),
        ))
        assert [s.name for s in story.steps] == ["first", "second", "third"]
        story.start(session=None)
        assert calls == ["first"]
        story.advance(None, 2.5)
        assert calls == ["first", "second"]

    def test_decide_fallback_text(self, app_session):
        # A scenario with no proposals falls back to a canned line
        app_session.update(
            surge=0.0, weather=0.0, parcel_delta_primary=0.0, crowd_boost=0.0,
            member_mix=0.4, reserve_for_members=True
        )
        decide = next(s for s in build_story_steps() if s.name == "decide")
        decide.effect(app_session)
        assert app_session.stream.events[0].text == "Proposed: Tighten promise; crowd boost"
