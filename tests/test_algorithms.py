"""
Tests for algorithms/: every registered algorithm is replayed through
the VisualizationState fold and checked against its own summary and a
hand-computed answer.
"""

import pytest

from algorithms import (
    REGISTRY,
    StepEmitter,
    StepKind,
    algorithms_by_family,
    algorithms_by_tag,
    get_algorithm,
    list_algorithms,
)
from algorithms.step import StepBuilder
from engine.state import VisualizationState
from validation import validate


def _params(key, raw):
    info = get_algorithm(key)
    result = validate(info.validator, raw)
    assert result.is_success, result.error
    return info, result.value


def run(key, raw):
    """Emit every step for `raw` and fold them; returns (steps, state)."""
    info, params = _params(key, raw)
    steps = info.emitter(params).steps()
    state = VisualizationState.initial(params)
    for step in steps:
        state.apply(step)
    return steps, state


# ---------------------------------------------------------------------------
# Properties every algorithm shares
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("key", sorted(REGISTRY))
class TestEveryAlgorithm:

    def test_sample_input_finishes(self, key):
        steps, state = run(key, REGISTRY[key].fields)
        assert steps[-1].kind == StepKind.DONE
        assert state.result == steps[-1].summary

    def test_exactly_one_terminal_step_at_the_end(self, key):
        steps, _ = run(key, REGISTRY[key].fields)
        assert [s.is_terminal for s in steps].count(True) == 1
        assert steps[-1].is_terminal

    def test_step_numbers_are_consecutive(self, key):
        steps, _ = run(key, REGISTRY[key].fields)
        assert [s.step_number for s in steps] == list(range(len(steps)))

    def test_deterministic(self, key):
        info, params = _params(key, REGISTRY[key].fields)
        emitter = info.emitter(params)
        assert emitter.steps() == emitter.steps()
        assert info.emitter(params).steps() == emitter.steps()

    def test_pseudocode_lines_exist(self, key):
        info = REGISTRY[key]
        steps, _ = run(key, info.fields)
        assert all(0 <= s.pseudocode_line < len(info.pseudocode) for s in steps)

    def test_fold_counts_every_step(self, key):
        steps, state = run(key, REGISTRY[key].fields)
        assert state.step_count == len(steps)
        assert state.last_step == steps[-1].to_dict()


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
SORTS = ["bubble_sort", "insertion_sort", "selection_sort", "merge_sort"]


class TestSorting:

    @pytest.mark.parametrize("key", SORTS)
    def test_sorts_and_fold_matches(self, key):
        _, state = run(key, {"array": "3, 1, 4, 1, 5, 9"})
        assert state.array == [1, 1, 3, 4, 5, 9]
        assert state.result["array"] == state.array

    @pytest.mark.parametrize("key", SORTS)
    def test_single_element(self, key):
        steps, state = run(key, {"array": "7"})
        assert state.array == [7]
        assert steps[-1].kind == StepKind.DONE

    @pytest.mark.parametrize("key", SORTS)
    def test_negative_and_float_values(self, key):
        _, state = run(key, {"array": "2.5, -1, 0, -3.5"})
        assert state.array == [-3.5, -1, 0, 2.5]

    def test_bubble_sort_stops_early_on_sorted_input(self):
        steps, _ = run("bubble_sort", {"array": "1 2 3 4 5"})
        assert not any(s.kind == StepKind.SWAP for s in steps)
        assert sum(s.kind == StepKind.COMPARE for s in steps) == 4

    def test_bubble_sort_marks_everything_sorted(self):
        _, state = run("bubble_sort", {"array": "5 4 3 2 1"})
        assert sorted(state.marked["sorted"]) == [0, 1, 2, 3, 4]


# ---------------------------------------------------------------------------
# Searching
# ---------------------------------------------------------------------------
class TestSearching:

    def test_binary_search_found(self):
        _, state = run("binary_search", {"array": "1, 3, 5, 7, 9, 11, 13", "target": "9"})
        assert state.result["found"]
        assert state.result["index"] == 4
        assert state.marked["found"] == [4]

    def test_binary_search_missing(self):
        _, state = run("binary_search", {"array": "1 3 5", "target": "4"})
        assert state.result == {"index": -1, "found": False, "probes": 2}
        assert "mid" not in state.pointers

    def test_two_pointers(self):
        _, state = run("two_pointers", {"array": "1, 2, 4, 7, 11, 15", "target": "15"})
        assert state.result["pair"] == [2, 4]
        assert state.result["values"] == [4, 11]

    def test_two_pointers_no_pair(self):
        _, state = run("two_pointers", {"array": "1 2", "target": "10"})
        assert state.result["found"] is False

    def test_sliding_window_best_sum(self):
        _, state = run("sliding_window", {"array": "2, 1, 5, 1, 3, 2", "window": "3"})
        assert state.result["best_sum"] == 9
        assert (state.result["start"], state.result["end"]) == (2, 4)
        assert state.result["sums"] == [8, 7, 9, 6]
        assert state.window == {"lo": 3, "hi": 5, "value": 6}

    def test_sliding_window_tie_keeps_earliest(self):
        _, state = run("sliding_window", {"array": "3 1 3 1", "window": "2"})
        assert state.result["start"] == 0


# ---------------------------------------------------------------------------
# Graphs
# ---------------------------------------------------------------------------
SAMPLE = '{"A": ["B", "C"], "B": ["D"], "C": ["D", "E"], "D": [], "E": []}'


class TestGraphTraversal:

    def test_bfs_layers(self):
        _, state = run("bfs", {"graph": SAMPLE})
        assert state.visited == ["A", "B", "C", "D", "E"]
        assert state.result["order"] == state.visited
        assert state.distances == state.result["hops"] == {"A": 0, "B": 1, "C": 1, "D": 2, "E": 2}
        assert state.frontier == []

    def test_bfs_stops_at_target(self):
        _, state = run("bfs", {"graph": SAMPLE, "target": "E"})
        assert state.result["path"] == ["A", "C", "E"]
        assert state.visited[-1] == "E"

    def test_bfs_unreachable_target(self):
        _, state = run("bfs", {"graph": '{"A": ["B"], "B": [], "Z": []}', "target": "Z"})
        assert state.result["reached"] is False
        assert state.result["path"] == []

    def test_bfs_undirected(self):
        _, state = run("bfs", {"graph": '{"A": ["B"], "C": ["B"]}', "undirected": "true"})
        assert state.visited == ["A", "B", "C"]

    def test_dfs_preorder(self):
        _, state = run("dfs", {"graph": '{"A": ["B", "C"], "B": ["D"], "C": ["E"], "D": [], "E": []}'})
        assert state.visited == ["A", "B", "D", "C", "E"]
        assert state.result["order"] == state.visited

    def test_dfs_cycle_terminates(self):
        _, state = run("dfs", {"graph": '{"A": ["B"], "B": ["A"]}'})
        assert state.visited == ["A", "B"]


class TestShortestPaths:

    GRAPH = '{"A": {"B": 4, "C": 1}, "B": {"D": 1}, "C": {"B": 2, "D": 5}, "D": {}}'

    def test_dijkstra_distances(self):
        _, state = run("dijkstra", {"graph": self.GRAPH})
        assert state.result["distances"] == {"A": 0, "B": 3, "C": 1, "D": 4}
        assert state.distances == state.result["distances"]
        assert state.visited == ["A", "C", "B", "D"]

    def test_dijkstra_path(self):
        _, state = run("dijkstra", {"graph": self.GRAPH, "target": "D"})
        assert state.result["path"] == ["A", "C", "B", "D"]

    def test_dijkstra_equal_distances_keep_insertion_order(self):
        _, state = run("dijkstra", {"graph": '{"S": {"A": 1, "B": 1}, "A": {}, "B": {}}'})
        assert state.visited == ["S", "A", "B"]

    def test_bellman_ford_handles_negative_edge(self):
        graph = '{"A": {"B": 4, "C": 5}, "B": {"D": 3}, "C": {"B": -2}, "D": {}}'
        _, state = run("bellman_ford", {"graph": graph, "target": "D"})
        assert state.result["distances"] == {"A": 0, "B": 3, "C": 5, "D": 6}
        assert state.distances == state.result["distances"]
        assert state.result["path"] == ["A", "C", "B", "D"]

    def test_bellman_ford_agrees_with_dijkstra(self):
        _, bf = run("bellman_ford", {"graph": self.GRAPH})
        _, dj = run("dijkstra", {"graph": self.GRAPH})
        assert bf.result["distances"] == dj.result["distances"]

    def test_bellman_ford_negative_cycle(self):
        steps, state = run("bellman_ford", {"graph": '{"A": {"B": 1}, "B": {"C": -3}, "C": {"A": 1}}'})
        assert steps[-1].kind == StepKind.FAILED
        assert state.failure == "negative cycle detected"
        assert state.result is None


class TestTopologicalSort:

    def test_clothes(self):
        _, state = run("topological_sort", REGISTRY["topological_sort"].fields)
        assert state.order == ["shirt", "pants", "tie", "shoes", "belt", "jacket"]
        assert state.result["order"] == state.order

    def test_order_respects_every_edge(self):
        graph = '{"a": ["c"], "b": ["c", "d"], "c": ["e"], "d": ["e"], "e": []}'
        _, state = run("topological_sort", {"graph": graph})
        pos = {n: i for i, n in enumerate(state.order)}
        for u, vs in {"a": "c", "b": "cd", "c": "e", "d": "e"}.items():
            assert all(pos[u] < pos[v] for v in vs)

    def test_cycle_detected(self):
        steps, state = run("topological_sort", {"graph": '{"A": ["B"], "B": ["C"], "C": ["A"]}'})
        assert steps[-1].kind == StepKind.FAILED
        assert steps[-1].reason == "cycle detected"
        assert state.failure == "cycle detected"


# ---------------------------------------------------------------------------
# Dynamic programming / structures
# ---------------------------------------------------------------------------
class TestKnapsack:

    def test_best_value_and_items(self):
        _, state = run("knapsack", {"weights": "1, 3, 4, 5", "values": "1, 4, 5, 7", "capacity": "7"})
        assert state.result["best_value"] == 9
        assert state.result["items"] == [1, 2]
        assert state.marked["chosen"] == [1, 2]
        assert state.table == state.result["table"]

    def test_nothing_fits(self):
        _, state = run("knapsack", {"weights": "5", "values": "10", "capacity": "3"})
        assert state.result["best_value"] == 0
        assert state.result["items"] == []

    def test_cell_count(self):
        steps, _ = run("knapsack", {"weights": "1 2", "values": "1 2", "capacity": "3"})
        assert sum(s.kind == StepKind.CELL for s in steps) == 2 * 4


class TestUnionFind:

    def test_sets_and_same_set(self):
        steps, state = run("union_find", {"size": "4", "unions": "0-1, 2-3, 1-0"})
        assert state.result["sets"] == [[0, 1], [2, 3]]
        assert state.result["set_count"] == 2
        assert state.parents == state.result["parents"] == [0, 0, 2, 2]
        assert state.marked["same-set"] == [1, 0]

    def test_sample_collapses_to_one_set(self):
        _, state = run("union_find", REGISTRY["union_find"].fields)
        assert state.result["set_count"] == 1
        assert state.parents == state.result["parents"]


class TestHashTable:

    def test_chains(self):
        _, state = run("hash_table", {"keys": "15, 11, 27, 8, 12, 22, 33", "buckets": "7"})
        assert state.buckets == [[], [15, 8, 22], [], [], [11], [12, 33], [27]]
        assert state.buckets == state.result["buckets"]
        assert state.result["collisions"] == 3
        assert state.result["load_factor"] == 1.0

    def test_duplicates_are_skipped(self):
        _, state = run("hash_table", {"keys": "4 4 9", "buckets": "5"})
        assert state.buckets == [[], [], [], [], [4, 9]]
        assert state.marked["duplicate"] == [4]

    def test_negative_keys_use_python_modulo(self):
        _, state = run("hash_table", {"keys": "-1", "buckets": "3"})
        assert state.buckets[2] == [-1]


# ---------------------------------------------------------------------------
# Emitter guarantees
# ---------------------------------------------------------------------------
class TestStepEmitter:

    def test_missing_terminal_becomes_done(self):
        def two_steps(_):
            sb = StepBuilder()
            yield sb.compare(0, 1)
            yield sb.compare(1, 2)

        steps = StepEmitter(two_steps, None).steps()
        assert [s.kind for s in steps] == [StepKind.COMPARE, StepKind.COMPARE, StepKind.DONE]
        assert steps[-1].step_number == 2

    def test_nothing_after_terminal(self):
        def chatty(_):
            sb = StepBuilder()
            yield sb.done({})
            yield sb.compare(0, 1)

        assert [s.kind for s in StepEmitter(chatty, None).steps()] == [StepKind.DONE]

    def test_crash_becomes_failed(self):
        def crashes(_):
            sb = StepBuilder()
            yield sb.visit("A")
            raise ZeroDivisionError("boom")

        steps = StepEmitter(crashes, None, label="Crashy").steps()
        assert steps[-1].kind == StepKind.FAILED
        assert "boom" in steps[-1].reason
        assert steps[-1].step_number == 1


class TestRegistry:

    def test_fifteen_algorithms(self):
        assert len(list_algorithms()) == 15

    def test_unknown_key(self):
        assert get_algorithm("quantum_sort") is None

    def test_families(self):
        keys = {a.key for a in algorithms_by_family("graph")}
        assert keys == {"bfs", "dfs", "dijkstra", "bellman_ford", "topological_sort"}

    def test_every_entry_states_a_tie_break(self):
        assert all(a.tie_break for a in list_algorithms())

    def test_to_dict_is_serialisable(self):
        card = get_algorithm("bfs").to_dict()
        assert card["key"] == "bfs"
        assert "fn" not in card and "validator" not in card

    def test_tag_lookup(self):
        keys = {a.key for a in algorithms_by_tag("stable")}
        assert keys == {"bubble_sort", "insertion_sort", "merge_sort"}
