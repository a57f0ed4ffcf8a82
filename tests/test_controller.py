"""
Tests for engine/controller.py: the FSM, its error reporting and the
snapshots it hands to subscribers.
"""

import pytest

from algorithms import get_algorithm
from config import load_settings
from engine import (
    ALGORITHM_FAILURE,
    INPUT_ERROR,
    ControllerState,
    SchedulerMode,
    UnknownAlgorithm,
    VisualizationController,
)

ARRAY  = {"array": "3, 1, 4, 1, 5, 9"}
CYCLE  = {"graph": '{"A": ["B"], "B": ["C"], "C": ["A"]}'}

# (algorithm, input) pairs covering a sort, a graph search and a run that fails
RUNS = [
    ("bubble_sort", ARRAY),
    ("merge_sort", ARRAY),
    ("dijkstra", get_algorithm("dijkstra").fields),
    ("topological_sort", CYCLE),
]


def manual(key, settings, clock):
    return VisualizationController(key, mode=SchedulerMode.MANUAL, clock=clock, settings=settings)


def timed(key, settings, clock):
    return VisualizationController(key, mode=SchedulerMode.TIMED, clock=clock, settings=settings)


def play(controller, clock, limit=1000):
    """Tick a timed controller until it leaves RUNNING."""
    for _ in range(limit):
        if controller.state != ControllerState.RUNNING:
            break
        clock.advance(1.0)
        controller.tick()
    return controller.current_state()


class TestLifecycle:

    def test_starts_idle(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        snap = c.current_state()
        assert snap.controller_state == ControllerState.IDLE
        assert snap.visualization_state is None
        assert snap.history == ()

    def test_unknown_algorithm(self, settings):
        with pytest.raises(UnknownAlgorithm) as info:
            VisualizationController("bogo_sort", settings=settings)
        assert "bogo_sort" in str(info.value)

    def test_submit_starts_a_run(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        snap = c.submit(ARRAY)
        assert snap.controller_state == ControllerState.RUNNING
        assert snap.history == (("idle", "validating"), ("validating", "running"))
        assert snap.visualization_state["array"] == [3, 1, 4, 1, 5, 9]
        assert snap.visualization_state["step_count"] == 0

    def test_sorting_reaches_done(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        c.submit(ARRAY)
        snap = c.run_to_end()
        assert snap.controller_state == ControllerState.DONE
        assert snap.visualization_state["array"] == [1, 1, 3, 4, 5, 9]
        assert snap.history[-1] == ("running", "done")
        assert snap.error is None

    def test_timed_playback_reaches_done(self, settings, clock):
        c = timed("bubble_sort", settings, clock)
        c.submit(ARRAY)
        assert c.tick() is False
        snap = play(c, clock)
        assert snap.controller_state == ControllerState.DONE
        assert snap.visualization_state["array"] == [1, 1, 3, 4, 5, 9]

    def test_submit_again_after_done(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        c.submit(ARRAY)
        c.run_to_end()
        snap = c.submit({"array": "2 1"})
        assert snap.controller_state == ControllerState.RUNNING
        assert snap.history[-4:] == (
            ("running", "done"), ("done", "idle"), ("idle", "validating"), ("validating", "running"),
        )

    def test_submit_again_after_error(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        c.submit({"array": ""})
        snap = c.submit(ARRAY)
        assert snap.history[-3:] == (("error", "idle"), ("idle", "validating"), ("validating", "running"))

    def test_reset_returns_to_idle(self, settings, clock):
        c = timed("bubble_sort", settings, clock)
        c.submit(ARRAY)
        snap = c.reset()
        assert snap.controller_state == ControllerState.IDLE
        assert snap.visualization_state is None
        clock.advance(10)
        assert c.tick() is False


class TestErrors:

    def test_cycle_is_an_algorithm_failure(self, settings, clock):
        c = manual("topological_sort", settings, clock)
        c.submit(CYCLE)
        snap = c.run_to_end()
        assert snap.controller_state == ControllerState.ERROR
        assert snap.error.category == ALGORITHM_FAILURE
        assert snap.error.kind == "failed"
        assert snap.error.message == "cycle detected"
        assert snap.visualization_state["failure"] == "cycle detected"

    @pytest.mark.parametrize("raw, kind", [
        ({"array": ""}, "EmptyInput"),
        ({"array": "3, one, 4"}, "NotANumber"),
        ({}, "EmptyInput"),
    ])
    def test_bad_input_never_runs(self, settings, clock, raw, kind):
        c = manual("bubble_sort", settings, clock)
        snap = c.submit(raw)
        assert snap.controller_state == ControllerState.ERROR
        assert snap.error.category == INPUT_ERROR
        assert snap.error.kind == kind
        assert snap.error.field == "array"
        assert snap.visualization_state is None
        assert all(to != "running" for _, to in snap.history)

    def test_non_mapping_input(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        snap = c.submit("3 1 2")
        assert snap.error.kind == "MalformedStructure"

    def test_error_clears_on_resubmit(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        c.submit({"array": ""})
        snap = c.submit(ARRAY)
        assert snap.error is None
        assert snap.controller_state == ControllerState.RUNNING


class TestPlayback:

    def test_pause_resume_gives_the_same_result(self, settings, clock):
        straight = manual("merge_sort", settings, clock)
        straight.submit(ARRAY)
        expected = straight.run_to_end().visualization_state

        c = timed("merge_sort", settings, clock)
        c.submit(ARRAY)
        clock.advance(1.0)
        c.tick()
        assert c.pause().controller_state == ControllerState.PAUSED
        clock.advance(5.0)
        assert c.tick() is False
        c.step_once()
        assert c.state == ControllerState.PAUSED
        assert c.resume().controller_state == ControllerState.RUNNING
        final = play(c, clock)
        assert final.controller_state == ControllerState.DONE
        assert final.visualization_state == expected

    def test_pause_twice_is_harmless(self, settings, clock):
        c = timed("bubble_sort", settings, clock)
        c.submit(ARRAY)
        c.pause()
        snap = c.pause()
        assert snap.controller_state == ControllerState.PAUSED
        assert snap.warning is None

    def test_pause_while_idle_only_warns(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        snap = c.pause()
        assert snap.controller_state == ControllerState.IDLE
        assert "pause" in snap.warning
        assert snap.history == ()

    def test_resume_after_done_only_warns(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        c.submit(ARRAY)
        c.run_to_end()
        snap = c.resume()
        assert snap.controller_state == ControllerState.DONE
        assert snap.warning

    def test_step_in_timed_running_only_warns(self, settings, clock):
        c = timed("bubble_sort", settings, clock)
        c.submit(ARRAY)
        snap = c.step_once()
        assert snap.controller_state == ControllerState.RUNNING
        assert snap.visualization_state["step_count"] == 0
        assert "manual" in snap.warning

    def test_manual_steps_one_at_a_time(self, settings, clock):
        c = manual("bfs", settings, clock)
        c.submit({"graph": '{"A": ["B"], "B": []}'})
        c.step_once()
        snap = c.step_once()
        assert snap.visualization_state["step_count"] == 2
        assert snap.visualization_state["frontier"] == ["A"]

    def test_resubmit_discards_the_old_run(self, settings, clock):
        fresh = manual("bubble_sort", settings, clock)
        fresh.submit({"array": "9 8 7"})
        expected = fresh.run_to_end().visualization_state

        c = manual("bubble_sort", settings, clock)
        c.submit(ARRAY)
        c.step_once()
        c.step_once()
        c.submit({"array": "9 8 7"})
        assert c.current_state().visualization_state["step_count"] == 0
        assert c.run_to_end().visualization_state == expected

    @pytest.mark.parametrize("key, raw", RUNS, ids=[key for key, _ in RUNS])
    def test_pause_at_every_step_gives_the_same_result(self, settings, clock, key, raw):
        straight = manual(key, settings, clock)
        straight.submit(raw)
        expected = straight.run_to_end()
        total = expected.visualization_state["step_count"]
        assert total > 1

        for k in range(total):
            c = timed(key, settings, clock)
            c.submit(raw)
            for _ in range(k):
                clock.advance(1.0)
                c.tick()
            assert c.pause().controller_state == ControllerState.PAUSED
            assert c.current_state().visualization_state["step_count"] == k
            clock.advance(5.0)
            assert c.tick() is False
            c.resume()
            final = play(c, clock)
            assert final.controller_state == expected.controller_state
            assert final.visualization_state == expected.visualization_state

    @pytest.mark.parametrize("key, raw", RUNS, ids=[key for key, _ in RUNS])
    def test_resubmit_after_every_step_discards_the_old_run(self, settings, clock, key, raw):
        other = {"array": "9 8 7"} if "array" in raw else {"graph": '{"X": ["Y"], "Y": []}'}
        fresh = manual(key, settings, clock)
        fresh.submit(other)
        expected = fresh.run_to_end()

        first = manual(key, settings, clock)
        first.submit(raw)
        total = first.run_to_end().visualization_state["step_count"]

        for k in range(total + 1):
            c = manual(key, settings, clock)
            c.submit(raw)
            for _ in range(k):
                c.step_once()
            before = c.state.value
            snap = c.submit(other)
            assert snap.controller_state == ControllerState.RUNNING
            assert snap.visualization_state["step_count"] == 0
            assert snap.history[-3:] == ((before, "idle"), ("idle", "validating"), ("validating", "running"))
            final = c.run_to_end()
            assert final.controller_state == expected.controller_state
            assert final.visualization_state == expected.visualization_state


class TestSpeed:

    def test_preset_and_number(self, settings, clock):
        c = timed("bubble_sort", settings, clock)
        assert c.set_speed("fast").interval_ms == 150
        assert c.set_speed(250).interval_ms == 250

    @pytest.mark.parametrize("speed", ["warp", -5, 0, True])
    def test_bad_speed_only_warns(self, settings, clock, speed):
        c = timed("bubble_sort", settings, clock)
        before = c.current_state().interval_ms
        snap = c.set_speed(speed)
        assert snap.interval_ms == before
        assert "unknown speed" in snap.warning

    def test_default_speed_from_settings(self, clock):
        c = timed("bubble_sort", load_settings({"VISUALIZER_DEFAULT_SPEED": "slow"}), clock)
        assert c.current_state().interval_ms == 1000


class TestObservation:

    def test_subscribers_see_every_transition(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        seen = []
        c.subscribe(seen.append)
        c.submit(ARRAY)
        states = [s.controller_state for s in seen]
        assert states[:2] == [ControllerState.VALIDATING, ControllerState.RUNNING]

    def test_subscribers_see_idle_on_resubmit(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        c.submit(ARRAY)
        c.run_to_end()
        seen = []
        c.subscribe(seen.append)
        c.submit(ARRAY)
        states = [s.controller_state for s in seen]
        assert states[:3] == [ControllerState.IDLE, ControllerState.VALIDATING, ControllerState.RUNNING]

    def test_each_step_notifies(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        c.submit(ARRAY)
        seen = []
        c.subscribe(seen.append)
        c.step_once()
        assert len(seen) == 1
        assert seen[0].visualization_state["step_count"] == 1

    def test_unsubscribe(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        seen = []
        unsubscribe = c.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        c.submit(ARRAY)
        assert seen == []

    def test_snapshots_are_copies(self, settings, clock):
        c = manual("bubble_sort", settings, clock)
        c.submit(ARRAY)
        snap = c.current_state()
        snap.visualization_state["array"].clear()
        assert c.current_state().visualization_state["array"] == [3, 1, 4, 1, 5, 9]

    def test_to_dict(self, settings, clock):
        c = manual("topological_sort", settings, clock)
        c.submit(CYCLE)
        c.run_to_end()
        data = c.current_state().to_dict()
        assert data["controller_state"] == "error"
        assert data["error"]["category"] == "AlgorithmFailure"
        assert data["mode"] == "manual"
        assert ["running", "error"] in data["history"]
