"""
Tests for graph/: the input parsers, adjacency order and path rebuild.
"""

import pytest

from graph import Graph, GraphFormatError, WeightError, reconstruct_path


def weights(g):
    """{(source, target): weight} for every edge."""
    return {(e.source, e.target): e.weight for e in g.edges.values()}


class TestParsers:

    def test_json_adjacency_weighted(self):
        g = Graph.parse('{"A": {"B": 4, "C": 1}, "C": {"B": 2}}')
        assert g.node_ids() == ["A", "C", "B"]
        assert [(n, e.weight) for n, e in g.neighbours("A")] == [("B", 4), ("C", 1)]
        assert g.edge_count() == 3

    def test_node_order_keys_first(self):
        g = Graph.parse({"X": ["Z"], "Y": []})
        assert g.node_ids() == ["X", "Y", "Z"]

    def test_unweighted_list_defaults_to_one(self):
        g = Graph.parse({"A": ["B", "C"]})
        assert weights(g) == {("A", "B"): 1, ("A", "C"): 1}

    def test_explicit_pairs(self):
        g = Graph.parse({"A": [["B", 2.5]]})
        assert weights(g) == {("A", "B"): 2.5}

    def test_text_adjacency_list(self):
        g = Graph.parse("A: B(3) C\n# comment\n\nB -> C(2)")
        assert weights(g) == {("A", "B"): 3, ("A", "C"): 1, ("B", "C"): 2}

    def test_text_line_without_separator(self):
        with pytest.raises(GraphFormatError, match="line 1"):
            Graph.parse("A B C")

    def test_matrix(self):
        g = Graph.parse([[0, 2, 0], [0, 0, 3], [1, 0, 0]])
        assert g.node_ids() == ["0", "1", "2"]
        assert weights(g) == {("0", "1"): 2, ("1", "2"): 3, ("2", "0"): 1}

    def test_matrix_must_be_square(self):
        with pytest.raises(GraphFormatError, match="not square"):
            Graph.parse([[0, 1], [1]])

    def test_bad_weight(self):
        with pytest.raises(WeightError):
            Graph.parse({"A": {"B": "x"}})

    @pytest.mark.parametrize("raw", [
        '{"A": {"B": NaN}, "B": {}}',
        '{"A": {"B": Infinity}}',
        '{"A": [["B", -Infinity]]}',
        {"A": {"B": "nan"}},
        "A: B(inf)",
    ])
    def test_non_finite_weight(self, raw):
        with pytest.raises(WeightError, match="finite"):
            Graph.parse(raw)

    def test_matrix_infinity_means_no_edge(self):
        g = Graph.parse("[[0, Infinity], [4, 0]]")
        assert weights(g) == {("1", "0"): 4}

    def test_large_integer_weight_is_exact(self):
        g = Graph.parse("A: B(12345678901234567891)")
        assert weights(g) == {("A", "B"): 12345678901234567891}

    def test_text_weight_without_node(self):
        with pytest.raises(GraphFormatError, match="missing node name"):
            Graph.parse("A: (3)")

    def test_bad_json(self):
        with pytest.raises(GraphFormatError, match="invalid graph JSON"):
            Graph.parse("{")

    def test_unsupported_type(self):
        with pytest.raises(GraphFormatError):
            Graph.parse(42)


class TestAdjacency:

    def test_edge_ids_follow_insertion(self):
        g = Graph.parse({"A": ["B", "C"], "B": ["C"]})
        assert list(g.edges) == ["e0", "e1", "e2"]

    def test_same_input_parses_identically(self):
        text = '{"A": {"B": 1, "C": 2}, "B": {"C": 1}}'
        assert Graph.parse(text).to_dict() == Graph.parse(text).to_dict()

    def test_undirected_dedup_and_both_directions(self):
        g = Graph.parse({"A": ["B"], "B": ["A"]}, directed=False)
        assert g.edge_count() == 1
        assert [n for n, _ in g.neighbours("B")] == ["A"]
        assert len(g.directed_edges()) == 2

    def test_in_degrees(self):
        g = Graph.parse({"A": ["B", "C"], "B": ["C"], "C": []})
        assert g.in_degrees() == {"A": 0, "B": 1, "C": 2}

    def test_negative_edges_in_insertion_order(self):
        g = Graph.parse({"A": {"B": 2, "C": -1}, "C": {"B": -3}})
        assert [e.id for e in g.negative_edges()] == ["e1", "e2"]
        assert Graph.parse({"A": {"B": 0}}).negative_edges() == []

    def test_to_dict(self):
        g = Graph.parse({"A": {"B": 3}})
        assert g.to_dict()["nodes"] == ["A", "B"]
        assert g.to_dict()["edges"][0]["weight"] == 3


class TestReconstructPath:

    def test_walks_back_to_root(self):
        parent = {"A": None, "B": "A", "C": "B"}
        assert reconstruct_path(parent, "C") == ["A", "B", "C"]

    def test_unreached_target(self):
        assert reconstruct_path({"A": None}, "Z") == []
