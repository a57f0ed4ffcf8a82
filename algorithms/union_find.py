"""
union_find.py — Disjoint Set Union
===================================
Processes the requested unions one by one on a forest of `size`
singletons.

    find(x)    : PROBE every node on the way to the root, then LINK each
                 one straight to the root (path compression)
    union(a,b) : attach the shorter tree under the taller (union by rank)

Tie-break: on equal ranks the second root goes under the first and the
first root's rank grows by one.
"""

from typing import Dict, Generator, Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import UnionFindParams


PSEUDOCODE: List[str] = [
    "def find(x):",                                   # 0
    "    if parent[x] ≠ x:",                          # 1
    "        parent[x] ← find(parent[x])",            # 2
    "    return parent[x]",                           # 3
    "def union(a, b):",                               # 4
    "    ra, rb ← find(a), find(b)",                  # 5
    "    if ra == rb: return",                        # 6
    "    if rank[ra] < rank[rb]: swap(ra, rb)",       # 7
    "    parent[rb] ← ra",                            # 8
    "    if rank[ra] == rank[rb]: rank[ra] += 1",     # 9
]


def union_find(params: UnionFindParams) -> Iterator[Step]:
    sb     = StepBuilder()
    parent = list(range(params.size))
    rank   = [0] * params.size

    def _find(x: int) -> Generator[Step, None, int]:
        path = []
        while True:
            yield sb.probe(x, x, line=1, why=f"find: visit {x} (parent {parent[x]}).")
            if parent[x] == x:
                break
            path.append(x)
            x = parent[x]
        for node in path:
            if parent[node] != x:
                parent[node] = x
                yield sb.link(node, x, line=2, why=f"Path compression: point {node} straight at root {x}.")
        return x

    for a, b in params.unions:
        ra = yield from _find(a)
        rb = yield from _find(b)
        if ra == rb:
            yield sb.mark([a, b], label="same-set", line=6,
                          why=f"{a} and {b} already share root {ra}; nothing to do.")
            continue
        if rank[ra] < rank[rb]:
            ra, rb = rb, ra
        parent[rb] = ra
        if rank[ra] == rank[rb]:
            rank[ra] += 1
        yield sb.link(rb, ra, line=8, why=f"union({a}, {b}): root {rb} goes under root {ra} (rank {rank[ra]}).")

    sets: Dict[int, List[int]] = {}
    for x in range(params.size):
        root = x
        while parent[root] != root:
            root = parent[root]
        sets.setdefault(root, []).append(x)

    yield sb.done(
        {"parents": parent[:], "sets": list(sets.values()), "set_count": len(sets)},
        line=3,
        why=f"{len(params.unions)} union(s) processed: {len(sets)} disjoint set(s) remain.",
    )
