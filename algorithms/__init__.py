"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the visualizer knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "bubble_sort": AlgoInfo(key, label, fn, validator, pseudocode, family, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and UI both consume it
so adding a new algorithm is literally: write the generator, pick (or
write) a validator, add one entry here.  That's the plugin system.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from validation import (
    array_input,
    dag_input,
    graph_input,
    hashing_input,
    knapsack_input,
    non_negative_graph_input,
    sorted_search_input,
    union_find_input,
    window_input,
)

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms.bubble_sort      import bubble_sort      as _bubble,  PSEUDOCODE as _bubble_pc
from algorithms.insertion_sort   import insertion_sort   as _insert,  PSEUDOCODE as _insert_pc
from algorithms.selection_sort   import selection_sort   as _select,  PSEUDOCODE as _select_pc
from algorithms.merge_sort       import merge_sort       as _merge,   PSEUDOCODE as _merge_pc
from algorithms.binary_search    import binary_search    as _bsearch, PSEUDOCODE as _bsearch_pc
from algorithms.two_pointers     import two_pointers     as _twoptr,  PSEUDOCODE as _twoptr_pc
from algorithms.sliding_window   import sliding_window   as _window,  PSEUDOCODE as _window_pc
from algorithms.bfs              import bfs              as _bfs,     PSEUDOCODE as _bfs_pc
from algorithms.dfs              import dfs              as _dfs,     PSEUDOCODE as _dfs_pc
from algorithms.dijkstra         import dijkstra         as _dij,     PSEUDOCODE as _dij_pc
from algorithms.bellman_ford     import bellman_ford     as _bf,      PSEUDOCODE as _bf_pc
from algorithms.topological_sort import topological_sort as _topo,    PSEUDOCODE as _topo_pc
from algorithms.knapsack         import knapsack         as _knap,    PSEUDOCODE as _knap_pc
from algorithms.union_find       import union_find       as _uf,      PSEUDOCODE as _uf_pc
from algorithms.hash_table       import hash_table       as _hash,    PSEUDOCODE as _hash_pc

from algorithms.emitter import StepEmitter
from algorithms.step    import TERMINAL_KINDS, Step, StepBuilder, StepKind


_SAMPLE_GRAPH = '{"A": {"B": 4, "C": 1}, "B": {"D": 1}, "C": {"B": 2, "D": 5}, "D": {}}'


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:               str                    # registry key, e.g. "bfs"
    label:             str                    # human label, e.g. "Breadth-First Search"
    fn:                Callable               # the generator function
    validator:         Callable               # raw mapping → TypedParams (validation/)
    pseudocode:        List[str]              # lines for the side-panel
    family:            str      = ""          # "sorting", "graph", "dp", …
    tags:              List[str] = field(default_factory=list)   # e.g. ["stable", "in-place"]
    tie_break:         str      = ""          # stated tie-break policy
    complexity_time:   str      = ""          # e.g. "O(V + E)"
    complexity_space:  str      = ""          # e.g. "O(V)"
    description:       str      = ""          # one-liner for the UI card
    fields:            Dict[str, str] = field(default_factory=dict)  # form field → sample value

    def emitter(self, params: Any) -> StepEmitter:
        return StepEmitter(self.fn, params, label=self.label)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key":              self.key,
            "label":            self.label,
            "family":           self.family,
            "tags":             list(self.tags),
            "tie_break":        self.tie_break,
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
            "fields":           dict(self.fields),
            "pseudocode":       list(self.pseudocode),
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    # -- sorting --
    "bubble_sort": AlgoInfo(
        key="bubble_sort", label="Bubble Sort", fn=_bubble, validator=array_input, pseudocode=_bubble_pc,
        family="sorting", tags=["stable", "in-place"],
        tie_break="Swaps only when left > right, so equal values keep their order.",
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Repeatedly swaps adjacent out-of-order pairs; the largest value bubbles to the end.",
        fields={"array": "3, 1, 4, 1, 5, 9"},
    ),

    "insertion_sort": AlgoInfo(
        key="insertion_sort", label="Insertion Sort", fn=_insert, validator=array_input, pseudocode=_insert_pc,
        family="sorting", tags=["stable", "in-place"],
        tie_break="Shifts only while left > key, so equal values keep their order.",
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Grows a sorted prefix by inserting each value into its place.",
        fields={"array": "5, 2, 4, 6, 1, 3"},
    ),

    "selection_sort": AlgoInfo(
        key="selection_sort", label="Selection Sort", fn=_select, validator=array_input, pseudocode=_select_pc,
        family="sorting", tags=["in-place", "unstable"],
        tie_break="Leftmost minimum wins; long-range swaps make it unstable.",
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Selects the minimum of the unsorted suffix and swaps it to the front.",
        fields={"array": "64, 25, 12, 22, 11"},
    ),

    "merge_sort": AlgoInfo(
        key="merge_sort", label="Merge Sort", fn=_merge, validator=array_input, pseudocode=_merge_pc,
        family="sorting", tags=["stable", "divide-and-conquer"],
        tie_break="On equal values the left half is taken first (<=), so it is stable.",
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Splits in half, sorts each half, merges the two sorted runs.",
        fields={"array": "38, 27, 43, 3, 9, 82, 10"},
    ),

    # -- searching / scans --
    "binary_search": AlgoInfo(
        key="binary_search", label="Binary Search", fn=_bsearch, validator=sorted_search_input,
        pseudocode=_bsearch_pc, family="searching", tags=["sorted-input"],
        tie_break="Returns the first midpoint that matches, not necessarily the leftmost copy.",
        complexity_time="O(log n)", complexity_space="O(1)",
        description="Halves the search range around the middle element each step.",
        fields={"array": "1, 3, 5, 7, 9, 11, 13", "target": "9"},
    ),

    "two_pointers": AlgoInfo(
        key="two_pointers", label="Two-Pointer Pair Sum", fn=_twoptr, validator=sorted_search_input,
        pseudocode=_twoptr_pc, family="searching", tags=["sorted-input", "two-pointer"],
        tie_break="Reports the first pair met while scanning from both ends inward.",
        complexity_time="O(n)", complexity_space="O(1)",
        description="Moves a left and right pointer toward each other to hit a target sum.",
        fields={"array": "1, 2, 4, 7, 11, 15", "target": "15"},
    ),

    "sliding_window": AlgoInfo(
        key="sliding_window", label="Sliding Window Max Sum", fn=_window, validator=window_input,
        pseudocode=_window_pc, family="searching", tags=["window"],
        tie_break="Earliest window wins among equal sums.",
        complexity_time="O(n)", complexity_space="O(1)",
        description="Slides a fixed-width window, updating its sum in O(1) per move.",
        fields={"array": "2, 1, 5, 1, 3, 2", "window": "3"},
    ),

    # -- graphs --
    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", fn=_bfs, validator=graph_input, pseudocode=_bfs_pc,
        family="graph", tags=["unweighted", "shortest-path", "traversal"],
        tie_break="Neighbours in listed order; FIFO queue.",
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Explores layer-by-layer. Finds shortest path by hop count.",
        fields={"graph": '{"A": ["B", "C"], "B": ["D"], "C": ["D", "E"], "D": [], "E": []}',
                "source": "A", "target": "", "undirected": ""},
    ),

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search", fn=_dfs, validator=graph_input, pseudocode=_dfs_pc,
        family="graph", tags=["unweighted", "traversal"],
        tie_break="Neighbours in listed order (pushed reversed onto the stack).",
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Dives deep before backtracking. Does NOT guarantee shortest path.",
        fields={"graph": '{"A": ["B", "C"], "B": ["D"], "C": ["E"], "D": [], "E": []}',
                "source": "A", "target": "", "undirected": ""},
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=_dij, validator=non_negative_graph_input,
        pseudocode=_dij_pc, family="graph", tags=["weighted", "shortest-path"],
        tie_break="Equal distances pop in insertion order.",
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="Greedily expands the closest node. Optimal for non-negative weights.",
        fields={"graph": _SAMPLE_GRAPH, "source": "A", "target": "", "undirected": ""},
    ),

    "bellman_ford": AlgoInfo(
        key="bellman_ford", label="Bellman–Ford", fn=_bf, validator=graph_input, pseudocode=_bf_pc,
        family="graph", tags=["weighted", "shortest-path", "negative-edges"],
        tie_break="Edges relaxed in listed order each round.",
        complexity_time="O(V · E)", complexity_space="O(V)",
        description="Handles negative edges. Detects negative cycles. Slower than Dijkstra.",
        fields={"graph": '{"A": {"B": 4, "C": 5}, "B": {"D": 3}, "C": {"B": -2}, "D": {}}',
                "source": "A", "target": "", "undirected": ""},
    ),

    "topological_sort": AlgoInfo(
        key="topological_sort", label="Topological Sort (Kahn)", fn=_topo, validator=dag_input,
        pseudocode=_topo_pc, family="graph", tags=["dag", "ordering"],
        tie_break="Zero in-degree queue is FIFO, seeded in node order.",
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Peels off nodes with no remaining prerequisites; fails on a cycle.",
        fields={"graph": '{"shirt": ["tie", "belt"], "tie": ["jacket"], "pants": ["shoes", "belt"], '
                         '"belt": ["jacket"], "shoes": [], "jacket": []}'},
    ),

    # -- dynamic programming / structures --
    "knapsack": AlgoInfo(
        key="knapsack", label="0/1 Knapsack", fn=_knap, validator=knapsack_input, pseudocode=_knap_pc,
        family="dp", tags=["table"],
        tie_break="Row-major fill; on equal value, skipping the item wins.",
        complexity_time="O(n · C)", complexity_space="O(n · C)",
        description="Fills the best-value table item by item, then traces back the chosen set.",
        fields={"weights": "1, 3, 4, 5", "values": "1, 4, 5, 7", "capacity": "7"},
    ),

    "union_find": AlgoInfo(
        key="union_find", label="Union-Find", fn=_uf, validator=union_find_input, pseudocode=_uf_pc,
        family="structure", tags=["disjoint-set", "forest"],
        tie_break="Union by rank; on equal rank the second root goes under the first.",
        complexity_time="O(α(n)) per op", complexity_space="O(n)",
        description="Merges sets with union by rank and flattens paths on every find.",
        fields={"size": "8", "unions": "0-1, 2-3, 1-3, 4-5, 6-7, 5-7, 3-7"},
    ),

    "hash_table": AlgoInfo(
        key="hash_table", label="Hash Table (Chaining)", fn=_hash, validator=hashing_input,
        pseudocode=_hash_pc, family="structure", tags=["hashing"],
        tie_break="key mod buckets; new keys go to the chain's tail.",
        complexity_time="O(1) average", complexity_space="O(n + m)",
        description="Hashes each key to a bucket and chains collisions.",
        fields={"keys": "15, 11, 27, 8, 12, 22, 33", "buckets": "7"},
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


def algorithms_by_family(family: str) -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if a.family == family]


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "Step",
    "StepBuilder",
    "StepEmitter",
    "StepKind",
    "TERMINAL_KINDS",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_tag",
    "algorithms_by_family",
]
