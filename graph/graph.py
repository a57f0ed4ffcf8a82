"""
graph.py — Graph Container & Parsers
=====================================
The graph input model for every graph algorithm (BFS, DFS, Dijkstra,
Bellman-Ford, topological sort).

Responsibilities:
  1. Nodes & edges                          (add / get)
  2. Adjacency queries                      (neighbours, in-degrees, …)
  3. Parsing user input                     (JSON adjacency, JSON matrix,
                                             text adjacency list)
  4. Serialisation                          (to_dict)

Design decisions:
  - Node order is insertion order: keys of the adjacency object first,
    then any node that only ever appears as a neighbour, in order of
    first appearance.  Algorithms iterate this order, so it is part of
    their tie-break policy.
  - A separate adjacency dict `_adj[node_id] → [(neighbour_id, edge_id)]`
    is maintained incrementally so neighbour queries are O(degree).
  - Parsers raise GraphFormatError (a ValueError).  The validation layer
    translates these into typed validation errors; this module knows
    nothing about the controller.
"""

import json
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from graph.edge import Edge


class GraphFormatError(ValueError):
    """The input does not describe a graph."""


class WeightError(GraphFormatError):
    """An edge weight is not a number."""


Number = Union[int, float]

_INTEGER = re.compile(r"[+-]?\d+")


class Graph:
    """
    Attributes:
        edges      : {edge_id: Edge}, insertion ordered
        directed   : bool – graph-level directedness
        _adj       : {node_id: [(neighbour_id, edge_id), …]}, insertion ordered
    """

    def __init__(self, directed: bool = True):
        self.edges:    Dict[str, Edge] = {}
        self.directed: bool            = directed
        self._adj:     Dict[str, List[Tuple[str, str]]] = {}

    # ==================================================================
    # NODES & EDGES
    # ==================================================================
    def add_node(self, node_id: str) -> str:
        self._adj.setdefault(node_id, [])
        return node_id

    def add_edge(self, source: str, target: str, weight: Number = 1) -> Edge:
        self.add_node(source)
        self.add_node(target)
        edge = Edge(source=source, target=target, weight=weight,
                    directed=self.directed, edge_id=f"e{len(self.edges)}")
        self.edges[edge.id] = edge
        self._adj[source].append((target, edge.id))
        if not self.directed and source != target:
            self._adj[target].append((source, edge.id))
        return edge

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: str) -> List[Tuple[str, Edge]]:
        """Return [(neighbour_id, edge)] in listed order."""
        return [(nbr, self.edges[eid]) for nbr, eid in self._adj.get(node_id, [])]

    def directed_edges(self) -> List[Tuple[str, str, Number, Edge]]:
        """Every traversable (u, v, w, edge); undirected edges appear both ways."""
        out = []
        for edge in self.edges.values():
            out.append((edge.source, edge.target, edge.weight, edge))
            if not edge.directed and edge.source != edge.target:
                out.append((edge.target, edge.source, edge.weight, edge))
        return out

    def in_degrees(self) -> Dict[str, int]:
        degrees = {nid: 0 for nid in self._adj}
        for nid in self._adj:
            for nbr, _ in self._adj[nid]:
                degrees[nbr] += 1
        return degrees

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_ids(self) -> List[str]:
        return list(self._adj.keys())

    def node_count(self) -> int:
        return len(self._adj)

    def edge_count(self) -> int:
        return len(self.edges)

    def negative_edges(self) -> List[Edge]:
        return [e for e in self.edges.values() if e.weight < 0]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._adj

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, directed={self.directed})"

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "nodes":    self.node_ids(),
            "edges":    [e.to_dict() for e in self.edges.values()],
        }

    # ==================================================================
    # PARSERS
    # ==================================================================
    @classmethod
    def parse(cls, raw: Any, directed: bool = True) -> "Graph":
        """
        Accept whatever a form field or JSON body can carry:
          • a dict            → adjacency mapping
          • a list of lists   → adjacency matrix
          • a string starting with '{' or '[' → JSON of the above
          • any other string  → text adjacency list ("A: B(3) C")
        """
        if isinstance(raw, Graph):
            return raw
        if isinstance(raw, Mapping):
            return cls.from_adjacency(raw, directed=directed)
        if isinstance(raw, (list, tuple)):
            return cls.from_adjacency_matrix(raw, directed=directed)
        if isinstance(raw, str):
            text = raw.strip()
            if text.startswith("{") or text.startswith("["):
                return cls.from_json(text, directed=directed)
            return cls.from_adjacency_list(text, directed=directed)
        raise GraphFormatError(f"cannot read a graph from {type(raw).__name__}")

    @classmethod
    def from_json(cls, text: str, directed: bool = True) -> "Graph":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise GraphFormatError(f"invalid graph JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})") from exc
        if isinstance(data, dict):
            return cls.from_adjacency(data, directed=directed)
        if isinstance(data, list):
            return cls.from_adjacency_matrix(data, directed=directed)
        raise GraphFormatError("graph JSON must be an object (adjacency) or an array (matrix)")

    # ---------- Adjacency mapping ----------
    @classmethod
    def from_adjacency(cls, mapping: Mapping[Any, Any], directed: bool = True) -> "Graph":
        """
        Supported neighbour shapes for each key:
            {"A": ["B", "C"]}            unweighted
            {"A": {"B": 4, "C": 1}}      weighted
            {"A": [["B", 4], ["C", 1]]}  weighted, explicit order
            {"A": []} / {"A": null}      isolated node
        """
        g = cls(directed=directed)
        pending: List[Tuple[str, str, Number]] = []

        for key, nbrs in mapping.items():
            src = _node_id(key)
            g.add_node(src)
            for tgt, w in _neighbour_entries(src, nbrs):
                pending.append((src, tgt, w))

        _add_all(g, pending)
        return g

    # ---------- Adjacency list (text) ----------
    @classmethod
    def from_adjacency_list(cls, text: str, directed: bool = True) -> "Graph":
        """
        One node per line:
            A: B C D            → A connects to B, C, D  (weight 1)
            A: B(3) C(7)        → A→B weight 3, A→C weight 7
            0 -> 1, 2           → alternate arrow syntax
        Blank lines and lines starting with '#' are ignored.
        """
        g = cls(directed=directed)
        pending: List[Tuple[str, str, Number]] = []

        for lineno, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            for sep in (":", "→", "->"):
                if sep in line:
                    src_raw, rest = line.split(sep, 1)
                    break
            else:
                raise GraphFormatError(f"line {lineno}: expected 'node: neighbours', got {line!r}")

            src = src_raw.strip()
            if not src:
                raise GraphFormatError(f"line {lineno}: missing node name before separator")
            g.add_node(src)

            for token in rest.replace(",", " ").split():
                if "(" in token and token.endswith(")"):
                    tgt, w_str = token[:-1].split("(", 1)
                    if not tgt.strip():
                        raise GraphFormatError(f"line {lineno}: missing node name before '({w_str})'")
                    pending.append((src, tgt, _weight(w_str, f"{src}->{tgt}")))
                else:
                    pending.append((src, token, 1))

        _add_all(g, pending)
        return g

    # ---------- Adjacency matrix ----------
    @classmethod
    def from_adjacency_matrix(cls, rows: Sequence[Any], directed: bool = True) -> "Graph":
        """
        Square matrix, nodes labelled "0" … "n-1".
        0 / null / "inf" / "-" mean no edge; the diagonal is ignored.
        """
        matrix: List[List[Any]] = []
        for i, row in enumerate(rows):
            if not isinstance(row, (list, tuple)):
                raise GraphFormatError(f"matrix row {i} is not a list")
            matrix.append(list(row))

        n = len(matrix)
        for i, row in enumerate(matrix):
            if len(row) != n:
                raise GraphFormatError(f"matrix is not square: row {i} has {len(row)} entries, expected {n}")

        g = cls(directed=directed)
        labels = [str(i) for i in range(n)]
        for label in labels:
            g.add_node(label)

        pending: List[Tuple[str, str, Number]] = []
        for i in range(n):
            for j in range(n):
                val = matrix[i][j]
                if i == j or _is_no_edge(val):
                    continue
                pending.append((labels[i], labels[j], _weight(val, f"{labels[i]}->{labels[j]}")))

        _add_all(g, pending)
        return g


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------
def _node_id(raw: Any) -> str:
    if isinstance(raw, bool) or not isinstance(raw, (str, int)):
        raise GraphFormatError(f"node names must be strings or integers, got {raw!r}")
    nid = str(raw).strip()
    if not nid:
        raise GraphFormatError("node names must not be blank")
    return nid


def _weight(raw: Any, where: str) -> Number:
    if isinstance(raw, bool):
        raise WeightError(f"weight of {where} is not a number: {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        value = raw
    else:
        text = str(raw).strip()
        if _INTEGER.fullmatch(text):
            return int(text)
        try:
            value = float(text)
        except ValueError:
            raise WeightError(f"weight of {where} is not a number: {raw!r}") from None
        if value.is_integer():
            value = int(value)
    if value != value or value in (float("inf"), float("-inf")):
        raise WeightError(f"weight of {where} must be a finite number, got {raw!r}")
    return value


def _is_no_edge(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, str) and val.strip().lower() in ("", "-", "inf", "∞", "0"):
        return True
    return not isinstance(val, bool) and isinstance(val, (int, float)) and val in (0, float("inf"))


def _neighbour_entries(src: str, nbrs: Any) -> Iterable[Tuple[str, Number]]:
    if nbrs is None:
        return []
    if isinstance(nbrs, Mapping):
        return [(_node_id(t), _weight(w, f"{src}->{t}")) for t, w in nbrs.items()]
    if isinstance(nbrs, (list, tuple)):
        out = []
        for entry in nbrs:
            if isinstance(entry, (list, tuple)):
                if len(entry) != 2:
                    raise GraphFormatError(f"neighbour of {src!r} must be [node, weight], got {entry!r}")
                tgt = _node_id(entry[0])
                out.append((tgt, _weight(entry[1], f"{src}->{tgt}")))
            else:
                out.append((_node_id(entry), 1))
        return out
    raise GraphFormatError(f"neighbours of {src!r} must be a list or an object, got {nbrs!r}")


def _add_all(g: Graph, pending: List[Tuple[str, str, Number]]) -> None:
    """Register every target node, then add edges (deduplicated when undirected)."""
    for _, tgt, _ in pending:
        g.add_node(tgt)
    seen: Set[Any] = set()
    for src, tgt, w in pending:
        key = (src, tgt) if g.directed else frozenset((src, tgt))
        if key in seen:
            continue
        seen.add(key)
        g.add_edge(src, tgt, w)


def reconstruct_path(parent: Mapping[str, Optional[str]], target: str) -> List[str]:
    """Walk a parent map back from target; [] when target was never reached."""
    if target not in parent:
        return []
    path: List[str] = []
    cur: Optional[str] = target
    while cur is not None:
        path.append(cur)
        cur = parent.get(cur)
    path.reverse()
    return path
