"""
Tests for engine/recorder.py.
"""

import json

import pytest

from engine import Recorder, UnknownAlgorithm


class TestRecorder:

    def test_sorting_metrics(self, settings):
        rec = Recorder(settings)
        metrics = rec.record("bubble_sort", {"array": "3, 1, 2"})
        assert metrics.outcome == "done"
        assert metrics.algo_label == "Bubble Sort"
        assert metrics.total_steps == len(rec.steps)
        assert metrics.comparisons == 3
        assert metrics.swaps == 2
        assert rec.get_metrics() is metrics

    def test_graph_metrics(self, settings):
        metrics = Recorder(settings).record("bfs", {"graph": '{"A": ["B", "C"], "B": [], "C": []}'})
        assert metrics.visits == 3
        assert metrics.relaxations == 3

    def test_failure_is_reported(self, settings):
        metrics = Recorder(settings).record("topological_sort", {"graph": '{"A": ["B"], "B": ["A"]}'})
        assert metrics.outcome == "error"
        assert metrics.error == "cycle detected"

    def test_bad_input_records_nothing(self, settings):
        rec = Recorder(settings)
        metrics = rec.record("bubble_sort", {"array": "x"})
        assert metrics.outcome == "error"
        assert metrics.total_steps == 0
        assert rec.steps == []

    def test_unknown_algorithm(self, settings):
        with pytest.raises(UnknownAlgorithm):
            Recorder(settings).record("nope", {})

    def test_export_is_json(self, settings):
        rec = Recorder(settings)
        rec.record("hash_table", {"keys": "1 8", "buckets": "7"})
        data = json.loads(json.dumps(rec.export()))
        assert data["algo_key"] == "hash_table"
        assert data["final"]["controller_state"] == "done"
        assert [s["kind"] for s in data["steps"]][-1] == "done"
        assert data["metrics"]["probes"] == 2
