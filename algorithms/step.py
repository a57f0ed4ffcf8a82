"""
step.py — Algorithm Step Records
=================================
Every algorithm is a generator that yields Step objects.
A Step is ONE atomic change the algorithm makes — a comparison, a swap,
a visit, a table cell being filled — never a full picture of the world.
The controller folds Steps, in order, over an initial snapshot to get
the VisualizationState a renderer draws.

    compare   indices=(i, j)                 two array slots are being compared
    swap      indices=(i, j)                 two array slots exchange values
    write     indices=(i,),   value=v        array[i] ← v
    mark      indices=(…),    name=label     slots become sorted / found / …
    pointer   indices=(i,) or (), name=p     pointer p moves to i (or is cleared)
    window    indices=(lo, hi), value=s      window [lo, hi] with aggregate s
    visit     nodes=(n,)                     node n is expanded
    enqueue   nodes=(n,)                     node n joins the frontier
    relax     nodes=(u, v), value=d|None     edge u→v examined; d = new dist[v]
    emit      nodes=(n,) / value=x           x is appended to the output order
    cell      cell=(r, c),    value=v        DP table[r][c] ← v
    probe     indices=(b,),   value=k        bucket / element b is inspected for k
    insert    indices=(b,),   value=k        key k appended to bucket b
    link      indices=(child, parent)        union-find parent pointer update
    done      summary={…}                    terminal: run finished
    failed    reason="…"                     terminal: semantic failure

Design decisions:
  - Step is a frozen dataclass with tuple payloads, so a Step can be
    handed to any number of readers without being copied.
  - `explanation` and `pseudocode_line` ride along on every Step so a
    renderer can narrate the run without knowing the algorithm.
  - `done` and `failed` are the only terminal kinds.  Failure is data,
    not an exception.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


class StepKind(Enum):
    COMPARE = "compare"
    SWAP    = "swap"
    WRITE   = "write"
    MARK    = "mark"
    POINTER = "pointer"
    WINDOW  = "window"
    VISIT   = "visit"
    ENQUEUE = "enqueue"
    RELAX   = "relax"
    EMIT    = "emit"
    CELL    = "cell"
    PROBE   = "probe"
    INSERT  = "insert"
    LINK    = "link"
    DONE    = "done"
    FAILED  = "failed"


TERMINAL_KINDS = frozenset({StepKind.DONE, StepKind.FAILED})


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        kind            : What happened (StepKind).
        step_number     : 0-based position in the run (assigned by StepEmitter).
        indices         : Array / bucket / element positions involved.
        nodes           : Graph node ids involved.
        value           : Kind-specific payload (written value, new distance, key, …).
        name            : Pointer name, mark label or edge id.
        cell            : (row, col) for DP table steps.
        pseudocode_line : 0-based index into the algorithm's PSEUDOCODE.
        explanation     : Human-readable "why" text for Learning Mode.
        summary         : Result payload of a `done` step.
        reason          : Failure reason of a `failed` step.
    """

    kind:             StepKind
    step_number:      int                        = 0
    indices:          Tuple[int, ...]            = ()
    nodes:            Tuple[str, ...]            = ()
    value:            Any                        = None
    name:             Optional[str]              = None
    cell:             Optional[Tuple[int, int]]  = None
    pseudocode_line:  int                        = 0
    explanation:      str                        = ""
    summary:          Dict[str, Any]             = field(default_factory=dict)
    reason:           str                        = ""

    @property
    def is_terminal(self) -> bool:
        return self.kind in TERMINAL_KINDS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind":            self.kind.value,
            "step_number":     self.step_number,
            "indices":         list(self.indices),
            "nodes":           list(self.nodes),
            "value":           self.value,
            "name":            self.name,
            "cell":            list(self.cell) if self.cell is not None else None,
            "pseudocode_line": self.pseudocode_line,
            "explanation":     self.explanation,
            "summary":         dict(self.summary),
            "reason":          self.reason,
        }


# ---------------------------------------------------------------------------
# Convenience builder so algorithms don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Numbers steps as it builds them.

    Usage inside an algorithm generator:
        sb = StepBuilder()
        yield sb.compare(0, 1, line=4, why="Is 3 > 1?")
        yield sb.swap(0, 1, line=5, why="Yes — swap them.")
        yield sb.done({"array": arr}, line=7)
    """

    def __init__(self):
        self.step_no = 0

    def _make(self, kind: StepKind, line: int, why: str, **fields) -> Step:
        step = Step(kind=kind, step_number=self.step_no, pseudocode_line=line, explanation=why, **fields)
        self.step_no += 1
        return step

    # -- arrays --
    def compare(self, i: int, j: int, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.COMPARE, line, why, indices=(i, j))

    def swap(self, i: int, j: int, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.SWAP, line, why, indices=(i, j))

    def write(self, i: int, value: Any, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.WRITE, line, why, indices=(i,), value=value)

    def mark(self, indices: Iterable[int], label: str = "sorted", line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.MARK, line, why, indices=tuple(indices), name=label)

    def pointer(self, name: str, index: Optional[int], line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.POINTER, line, why, indices=() if index is None else (index,), name=name)

    def window(self, lo: int, hi: int, value: Any, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.WINDOW, line, why, indices=(lo, hi), value=value)

    # -- graphs --
    def visit(self, node: str, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.VISIT, line, why, nodes=(node,))

    def enqueue(self, node: str, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.ENQUEUE, line, why, nodes=(node,))

    def relax(self, u: Optional[str], v: str, new_dist: Any, edge_id: Optional[str] = None,
              line: int = 0, why: str = "") -> Step:
        nodes = (v,) if u is None else (u, v)
        return self._make(StepKind.RELAX, line, why, nodes=nodes, value=new_dist, name=edge_id)

    def emit(self, item: Any, line: int = 0, why: str = "") -> Step:
        if isinstance(item, str):
            return self._make(StepKind.EMIT, line, why, nodes=(item,), value=item)
        return self._make(StepKind.EMIT, line, why, value=item)

    # -- tables / buckets / forests --
    def cell(self, row: int, col: int, value: Any, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.CELL, line, why, cell=(row, col), value=value)

    def probe(self, index: int, key: Any, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.PROBE, line, why, indices=(index,), value=key)

    def insert(self, bucket: int, key: Any, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.INSERT, line, why, indices=(bucket,), value=key)

    def link(self, child: int, parent: int, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.LINK, line, why, indices=(child, parent))

    # -- terminal --
    def done(self, summary: Dict[str, Any], line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.DONE, line, why, summary=dict(summary))

    def failed(self, reason: str, line: int = 0, why: str = "") -> Step:
        return self._make(StepKind.FAILED, line, why or reason, reason=reason)
