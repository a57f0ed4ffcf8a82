"""
topological_sort.py — Kahn's Algorithm
=======================================
Repeatedly remove a node with no remaining incoming edges and append it
to the output order.

Yields a Step at:
  1. Seed: every zero in-degree node joins the queue   →  ENQUEUE
  2. Dequeue a node                                     →  VISIT
  3. Append it to the order                             →  EMIT
  4. Drop each outgoing edge                            →  RELAX (value None)
  5. A neighbour's in-degree hits 0                     →  ENQUEUE
  6. All nodes emitted                                  →  DONE
     Nodes left over (a cycle)                          →  FAILED "cycle detected"

Tie-break: the queue is FIFO and is seeded in node order, so among
several available nodes the one listed first comes out first.
"""

from collections import deque
from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import GraphParams


PSEUDOCODE: List[str] = [
    "def Kahn(graph):",                             # 0
    "    indeg ← in-degree of every node",          # 1
    "    queue ← [v for v in V if indeg[v] == 0]",  # 2
    "    order ← []",                               # 3
    "    while queue is not empty:",                # 4
    "        node ← queue.dequeue()",               # 5
    "        order.append(node)",                   # 6
    "        for neighbour in adj(node):",          # 7
    "            indeg[neighbour] -= 1",            # 8
    "            if indeg[neighbour] == 0:",        # 9
    "                queue.enqueue(neighbour)",     # 10
    "    if len(order) < |V|: return CYCLE",        # 11
    "    return order",                             # 12
]


def topological_sort(params: GraphParams) -> Iterator[Step]:
    graph = params.graph
    sb    = StepBuilder()
    indeg = graph.in_degrees()
    order: List[str] = []
    queue = deque()

    for node in graph.node_ids():
        if indeg[node] == 0:
            queue.append(node)
            yield sb.enqueue(node, line=2, why=f"'{node}' has no incoming edges, so it can go first.")

    while queue:
        node = queue.popleft()
        yield sb.visit(node, line=5, why=f"Dequeue '{node}': all of its prerequisites are already placed.")
        order.append(node)
        yield sb.emit(node, line=6, why=f"Append '{node}' to the order (position {len(order) - 1}).")

        for nbr, edge in graph.neighbours(node):
            indeg[nbr] -= 1
            yield sb.relax(node, nbr, None, edge.id, line=8,
                           why=f"Remove edge {node}→{nbr}: '{nbr}' now waits on {indeg[nbr]} more node(s).")
            if indeg[nbr] == 0:
                queue.append(nbr)
                yield sb.enqueue(nbr, line=10, why=f"'{nbr}' has no incoming edges left, enqueue it.")

    if len(order) < graph.node_count():
        stuck = [n for n in graph.node_ids() if indeg[n] > 0]
        yield sb.failed("cycle detected", line=11, why=(
            f"Only {len(order)} of {graph.node_count()} node(s) could be ordered. "
            f"{', '.join(stuck)} still have incoming edges, so the graph contains a cycle."
        ))
        return

    yield sb.done({"order": order}, line=12, why=f"Topological order: {' → '.join(order)}.")
