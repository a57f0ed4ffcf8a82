"""
state.py — Visualization State (fold over Steps)
=================================================
A Step only says what CHANGED.  VisualizationState is what a renderer
draws: it starts as a snapshot of the validated params and absorbs every
Step, in order, through apply().

    state = VisualizationState.initial(params)
    for step in emitter:
        state.apply(step)
    state.snapshot()          # deep copy, safe to hand to any reader

Replaying the same Steps over the same params always lands on the same
state; that is what makes a run inspectable from tests.
"""

import copy
from typing import Any, Dict, List, Optional

from algorithms.step import Step, StepKind
from validation.params import (
    ArrayParams,
    GraphParams,
    HashingParams,
    KnapsackParams,
    UnionFindParams,
)


class VisualizationState:
    """
    Attributes:
        kind            : "array" | "graph" | "table" | "forest" | "buckets"
        array           : Working copy of the array (sorts rewrite it).
        highlighted     : Indices or node ids touched by the latest step.
        marked          : {label: [index, …]} e.g. "sorted", "found", "chosen".
        pointers        : {name: index} e.g. lo / hi / mid / key.
        window          : {"lo", "hi", "value"} or None.
        graph           : {"directed", "nodes", "edges"} for graph inputs.
        current         : Node being expanded.
        active_edge     : Edge id of the latest relaxation.
        visited         : Nodes in the order they were expanded.
        frontier        : Nodes waiting in the queue / stack / heap.
        distances       : {node: best known distance}.
        order           : Emitted output order (topological sort).
        table           : DP table; None marks a cell not yet filled.
        buckets         : Hash chains.
        parents         : Union-find parent pointers.
        result          : Summary of the `done` step.
        failure         : Reason of the `failed` step.
        step_count      : Number of steps applied.
        last_step       : The latest Step as a dict.
        explanation     : Learning-mode text of the latest step.
        pseudocode_line : Highlighted pseudocode line.
    """

    def __init__(self, kind: str = "array"):
        self.kind:            str                       = kind
        self.array:           List[Any]                 = []
        self.highlighted:     List[Any]                 = []
        self.marked:          Dict[str, List[int]]      = {}
        self.pointers:        Dict[str, int]            = {}
        self.window:          Optional[Dict[str, Any]]  = None
        self.graph:           Optional[Dict[str, Any]]  = None
        self.current:         Optional[str]             = None
        self.active_edge:     Optional[str]             = None
        self.visited:         List[str]                 = []
        self.frontier:        List[str]                 = []
        self.distances:       Dict[str, Any]            = {}
        self.order:           List[Any]                 = []
        self.table:           List[List[Any]]           = []
        self.buckets:         List[List[int]]           = []
        self.parents:         List[int]                 = []
        self.result:          Optional[Dict[str, Any]]  = None
        self.failure:         Optional[str]             = None
        self.step_count:      int                       = 0
        self.last_step:       Optional[Dict[str, Any]]  = None
        self.explanation:     str                       = ""
        self.pseudocode_line: int                       = -1

    # ------------------------------------------------------------------
    # Initial snapshot
    # ------------------------------------------------------------------
    @classmethod
    def initial(cls, params: Any) -> "VisualizationState":
        """Derive the pre-run picture from validated params."""
        if isinstance(params, ArrayParams):
            state = cls("array")
            state.array = list(params.array)
        elif isinstance(params, GraphParams):
            state = cls("graph")
            state.graph = params.graph.to_dict()
            state.graph["source"] = params.source
            state.graph["target"] = params.target
        elif isinstance(params, KnapsackParams):
            state = cls("table")
            cols = params.capacity + 1
            state.table = [[0] * cols] + [[None] * cols for _ in params.weights]
        elif isinstance(params, UnionFindParams):
            state = cls("forest")
            state.parents = list(range(params.size))
        elif isinstance(params, HashingParams):
            state = cls("buckets")
            state.buckets = [[] for _ in range(params.bucket_count)]
        else:
            raise TypeError(f"no initial state for {type(params).__name__}")
        return state

    # ------------------------------------------------------------------
    # Fold
    # ------------------------------------------------------------------
    def apply(self, step: Step) -> None:
        self.step_count      += 1
        self.last_step        = step.to_dict()
        self.explanation      = step.explanation
        self.pseudocode_line  = step.pseudocode_line
        self.highlighted      = list(step.nodes) if step.nodes else list(step.indices)

        handler = _HANDLERS.get(step.kind)
        if handler is not None:
            handler(self, step)

    def _swap(self, step: Step) -> None:
        i, j = step.indices
        self.array[i], self.array[j] = self.array[j], self.array[i]

    def _write(self, step: Step) -> None:
        self.array[step.indices[0]] = step.value

    def _mark(self, step: Step) -> None:
        bucket = self.marked.setdefault(step.name or "marked", [])
        for idx in step.indices:
            if idx not in bucket:
                bucket.append(idx)

    def _pointer(self, step: Step) -> None:
        if step.indices:
            self.pointers[step.name] = step.indices[0]
        else:
            self.pointers.pop(step.name, None)

    def _window(self, step: Step) -> None:
        lo, hi = step.indices
        self.window = {"lo": lo, "hi": hi, "value": step.value}

    def _visit(self, step: Step) -> None:
        node = step.nodes[0]
        self.current = node
        if node not in self.visited:
            self.visited.append(node)
        if node in self.frontier:
            self.frontier.remove(node)

    def _enqueue(self, step: Step) -> None:
        node = step.nodes[0]
        if node not in self.frontier:
            self.frontier.append(node)

    def _relax(self, step: Step) -> None:
        self.active_edge = step.name
        if step.value is not None:
            self.distances[step.nodes[-1]] = step.value

    def _emit(self, step: Step) -> None:
        self.order.append(step.nodes[0] if step.nodes else step.value)

    def _cell(self, step: Step) -> None:
        row, col = step.cell
        self.table[row][col] = step.value

    def _insert(self, step: Step) -> None:
        self.buckets[step.indices[0]].append(step.value)

    def _link(self, step: Step) -> None:
        child, parent = step.indices
        self.parents[child] = parent

    def _done(self, step: Step) -> None:
        self.result = dict(step.summary)

    def _failed(self, step: Step) -> None:
        self.failure = step.reason

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind":            self.kind,
            "array":           self.array,
            "highlighted":     self.highlighted,
            "marked":          self.marked,
            "pointers":        self.pointers,
            "window":          self.window,
            "graph":           self.graph,
            "current":         self.current,
            "active_edge":     self.active_edge,
            "visited":         self.visited,
            "frontier":        self.frontier,
            "distances":       self.distances,
            "order":           self.order,
            "table":           self.table,
            "buckets":         self.buckets,
            "parents":         self.parents,
            "result":          self.result,
            "failure":         self.failure,
            "step_count":      self.step_count,
            "last_step":       self.last_step,
            "explanation":     self.explanation,
            "pseudocode_line": self.pseudocode_line,
        }

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy: mutating it never reaches the live state."""
        return copy.deepcopy(self.to_dict())

    def __repr__(self) -> str:
        return f"VisualizationState(kind={self.kind}, steps={self.step_count})"


_HANDLERS = {
    StepKind.SWAP:    VisualizationState._swap,
    StepKind.WRITE:   VisualizationState._write,
    StepKind.MARK:    VisualizationState._mark,
    StepKind.POINTER: VisualizationState._pointer,
    StepKind.WINDOW:  VisualizationState._window,
    StepKind.VISIT:   VisualizationState._visit,
    StepKind.ENQUEUE: VisualizationState._enqueue,
    StepKind.RELAX:   VisualizationState._relax,
    StepKind.EMIT:    VisualizationState._emit,
    StepKind.CELL:    VisualizationState._cell,
    StepKind.INSERT:  VisualizationState._insert,
    StepKind.LINK:    VisualizationState._link,
    StepKind.DONE:    VisualizationState._done,
    StepKind.FAILED:  VisualizationState._failed,
}
