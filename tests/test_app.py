"""
Tests for the Flask layer in main.py, through the test client.
"""

import json
import threading
import time

import pytest

from config import load_settings
from engine import SchedulerMode
from main import ControllerRegistry, create_app


@pytest.fixture
def client():
    app = create_app(load_settings({"VISUALIZER_SECRET_KEY": "test-secret"}))
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def select(client, algorithm, mode="manual"):
    return client.post("/api/select", json={"algorithm": algorithm, "mode": mode})


def _strict(constant):
    raise ValueError(f"non-standard JSON constant {constant}")


class TestPages:

    def test_index(self, client):
        res = client.get("/")
        assert res.status_code == 200
        body = res.get_data(as_text=True)
        assert 'id="algo-selector"' in body
        assert 'data-state="idle"' in body

    def test_algorithms(self, client):
        data = client.get("/api/algorithms").get_json()
        keys = [a["key"] for a in data["algorithms"]]
        assert "dijkstra" in keys and len(keys) == 15


class TestRunFlow:

    def test_manual_run_to_done(self, client):
        assert select(client, "bubble_sort").status_code == 200
        data = client.post("/api/submit", json={"input": {"array": "3 1 2"}}).get_json()
        assert data["snapshot"]["controller_state"] == "running"
        for _ in range(50):
            data = client.post("/api/step").get_json()
            if data["snapshot"]["controller_state"] != "running":
                break
        assert data["snapshot"]["controller_state"] == "done"
        assert data["snapshot"]["visualization_state"]["array"] == [1, 2, 3]
        assert 'data-state="done"' in data["panels"]["status"]

    def test_fields_can_be_posted_directly(self, client):
        select(client, "bubble_sort")
        data = client.post("/api/submit", json={"array": "2 1"}).get_json()
        assert data["snapshot"]["controller_state"] == "running"

    def test_bad_input(self, client):
        select(client, "bubble_sort")
        data = client.post("/api/submit", json={"input": {"array": "1, x"}}).get_json()
        assert data["snapshot"]["controller_state"] == "error"
        assert data["snapshot"]["error"]["kind"] == "NotANumber"
        assert "NotANumber" in data["panels"]["messages"]

    def test_non_finite_weight_never_reaches_the_wire(self, client):
        select(client, "dijkstra")
        res = client.post("/api/submit", json={"input": {"graph": '{"A": {"B": NaN}, "B": {}}'}})
        data = json.loads(res.get_data(as_text=True), parse_constant=_strict)
        assert data["snapshot"]["controller_state"] == "error"
        assert data["snapshot"]["error"]["kind"] == "NotANumber"

    def test_non_mapping_input(self, client):
        select(client, "bubble_sort")
        data = client.post("/api/submit", json={"input": [1, 2]}).get_json()
        assert data["snapshot"]["error"]["kind"] == "MalformedStructure"

    def test_pause_resume_reset(self, client):
        select(client, "bfs", mode="timed")
        client.post("/api/submit", json={"input": {"graph": '{"A": ["B"], "B": []}'}})
        assert client.post("/api/pause").get_json()["snapshot"]["controller_state"] == "paused"
        assert client.post("/api/resume").get_json()["snapshot"]["controller_state"] == "running"
        assert client.post("/api/reset").get_json()["snapshot"]["controller_state"] == "idle"

    def test_misuse_is_a_warning_not_an_error(self, client):
        res = client.post("/api/pause")
        assert res.status_code == 200
        snap = res.get_json()["snapshot"]
        assert snap["controller_state"] == "idle"
        assert snap["warning"]

    def test_state_polls(self, client):
        data = client.get("/api/state").get_json()
        assert data["snapshot"]["controller_state"] == "idle"
        assert "canvas" in data["panels"]

    def test_sessions_are_isolated(self, client):
        select(client, "knapsack")
        other = client.application.test_client()
        data = other.get("/api/state").get_json()
        assert data["snapshot"]["algorithm"] == "bubble_sort"
        assert len(client.application.extensions["visualizer"]) == 2


class TestSelectAndSpeed:

    def test_unknown_algorithm(self, client):
        res = select(client, "bogo_sort")
        assert res.status_code == 400
        assert "bogo_sort" in res.get_json()["error"]

    def test_unknown_mode(self, client):
        assert select(client, "bfs", mode="warp").status_code == 400

    def test_select_returns_form(self, client):
        data = select(client, "knapsack").get_json()
        assert 'name="capacity"' in data["panels"]["form"]
        assert data["algorithm"]["family"] == "dp"

    def test_speed_preset_and_number(self, client):
        assert client.post("/api/speed", json={"speed": "turbo"}).get_json()["snapshot"]["interval_ms"] == 50
        assert client.post("/api/speed", json={"speed": "300"}).get_json()["snapshot"]["interval_ms"] == 300

    def test_bad_speed_warns(self, client):
        snap = client.post("/api/speed", json={"speed": "warp"}).get_json()["snapshot"]
        assert "unknown speed" in snap["warning"]


class TestRecord:

    def test_nothing_to_record(self, client):
        assert client.post("/api/record").status_code == 400

    def test_records_last_input(self, client):
        select(client, "hash_table")
        client.post("/api/submit", json={"input": {"keys": "1 8 15", "buckets": "7"}})
        data = client.post("/api/record").get_json()
        assert data["metrics"]["outcome"] == "done"
        assert data["metrics"]["probes"] == 3
        assert "Analytics" in data["analytics"]


class TestRegistry:

    def test_one_session_runs_one_call_at_a_time(self, settings):
        registry = ControllerRegistry(settings)
        with registry.session("sid") as slot:
            slot.switch("bubble_sort", SchedulerMode.MANUAL, settings)
            slot.controller.submit({"array": "3, 1, 4, 1, 5, 9"})

        inside, overlaps, errors = [], [], []

        def slow_subscriber(snap):
            inside.append(snap)
            if len(inside) > 1:
                overlaps.append(len(inside))
            time.sleep(0.005)
            inside.pop()

        slot.controller.subscribe(slow_subscriber)

        def drive():
            try:
                for _ in range(5):
                    with registry.session("sid") as s:
                        s.controller.step_once()
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=drive) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert overlaps == []
        with registry.session("sid") as s:
            assert s.controller.current_state().visualization_state["step_count"] == 10

    def test_session_holds_its_lock(self, settings):
        registry = ControllerRegistry(settings)
        with registry.session("sid") as slot:
            assert slot.lock.locked()
        assert not slot.lock.locked()

    def test_least_recently_used_session_is_dropped(self):
        registry = ControllerRegistry(load_settings({"VISUALIZER_MAX_SESSIONS": "2"}))
        for sid in ("a", "b", "a", "c"):
            with registry.session(sid):
                pass
        assert len(registry) == 2
        assert "a" in registry and "c" in registry
        assert "b" not in registry

    def test_dropped_session_starts_over(self):
        registry = ControllerRegistry(load_settings({"VISUALIZER_MAX_SESSIONS": "1"}))
        with registry.session("a") as slot:
            slot.switch("knapsack", SchedulerMode.TIMED, registry.settings)
        with registry.session("b"):
            pass
        with registry.session("a") as slot:
            assert slot.controller.algorithm.key == "bubble_sort"
