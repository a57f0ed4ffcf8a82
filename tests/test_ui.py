"""
Tests for ui/: which controls are live per state, and that user text
is escaped before it reaches the page.
"""

import pytest

from algorithms import get_algorithm
from engine import ControllerState, SchedulerMode, VisualizationController
from ui import (
    enabled_controls,
    explanation_panel,
    input_form,
    message_panel,
    playback_controls,
    render_canvas,
    status_badge,
)


class TestEnabledControls:

    @pytest.mark.parametrize("state, expected", [
        (ControllerState.IDLE,       {"submit"}),
        (ControllerState.VALIDATING, set()),
        (ControllerState.RUNNING,    {"submit", "reset", "pause"}),
        (ControllerState.PAUSED,     {"submit", "reset", "resume", "step"}),
        (ControllerState.DONE,       {"submit", "reset"}),
        (ControllerState.ERROR,      {"submit", "reset"}),
    ])
    def test_timed(self, state, expected):
        assert enabled_controls(state, "timed") == expected

    def test_manual_running_can_step(self):
        assert "step" in enabled_controls(ControllerState.RUNNING, "manual")

    def test_disabled_buttons_rendered(self):
        html = playback_controls(ControllerState.IDLE)
        assert '<button id="btn-pause" title="Pause" disabled>' in html
        assert 'id="btn-submit"' in html and 'title="Validate and run" >' in html


class TestPanels:

    def test_status_badge_exposes_state(self):
        html = status_badge(ControllerState.PAUSED, 7)
        assert 'data-state="paused"' in html
        assert "step 7" in html

    def test_messages_escape(self):
        html = message_panel({"category": "InputError", "kind": "NotANumber",
                              "message": "<script>x</script>", "field": "array"})
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_empty_messages(self):
        assert "No messages." in message_panel()

    def test_explanation_escape(self):
        assert "&lt;b&gt;" in explanation_panel("<b>")

    def test_form_keeps_values(self):
        html = input_form(get_algorithm("bubble_sort"), {"array": '1, 2"3'})
        assert 'value="1, 2&#34;3"' in html


class TestCanvas:

    def test_placeholder(self):
        assert "Submit input to start a run." in render_canvas(None)

    @pytest.mark.parametrize("kind, extra, marker", [
        ("array",   {"array": [3, 1, 2]},           'class="bar"'),
        ("buckets", {"buckets": [[1], [], [9, 16]]}, 'class="buckets"'),
        ("forest",  {"parents": [0, 0, 1]},         'class="element"'),
        ("table",   {"table": [[0, 0], [None, 1]]}, 'class="dp-table"'),
    ])
    def test_each_kind_has_its_renderer(self, kind, extra, marker):
        assert marker in render_canvas(_vis(kind, **extra))

    def test_array_bar_per_value(self):
        assert render_canvas(_vis("array", array=[3, 1, 2])).count('class="bar"') == 3

    def test_graph_from_a_live_run(self, settings):
        c = VisualizationController("bfs", mode=SchedulerMode.MANUAL, settings=settings)
        c.submit({"graph": '{"A": ["B"], "B": ["<i>"]}'})
        c.run_to_end()
        html = render_canvas(c.current_state().visualization_state)
        assert 'data-id="A"' in html
        assert "state-visited" in html
        assert "<i>" not in html


def _vis(kind, **fields):
    base = {
        "kind": kind, "array": [], "highlighted": [], "marked": {}, "pointers": {},
        "window": None, "graph": None, "current": None, "active_edge": None,
        "visited": [], "frontier": [], "distances": {}, "order": [], "table": [],
        "buckets": [], "parents": [], "result": None, "failure": None,
        "step_count": 0, "last_step": None, "explanation": "", "pseudocode_line": -1,
    }
    base.update(fields)
    return base
