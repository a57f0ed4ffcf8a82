"""
bfs.py — Breadth-First Search
==============================
Generator-based BFS.  Yields a Step at every meaningful event:
  1. Dequeue a node            →  VISIT
  2. Examine each neighbour    →  RELAX (value = hop count if newly seen, else None)
  3. Enqueue an unseen node    →  ENQUEUE
  4. Target reached / queue exhausted → DONE

Tie-break: neighbours are examined in the order the input lists them,
and the queue is FIFO.  With no target the whole reachable component is
traversed.
"""

from collections import deque
from typing import Dict, Iterator, List, Optional

from algorithms.step import Step, StepBuilder
from graph import reconstruct_path
from validation.params import GraphParams


PSEUDOCODE: List[str] = [
    "def BFS(graph, source, target):",          # 0
    "    queue ← [source]",                     # 1
    "    seen ← {source}",                      # 2
    "    parent ← {}",                          # 3
    "    while queue is not empty:",            # 4
    "        node ← queue.dequeue()",           # 5
    "        if node == target: return path",   # 6
    "        for neighbour in adj(node):",      # 7
    "            if neighbour not in seen:",    # 8
    "                seen.add(neighbour)",      # 9
    "                parent[neighbour] = node", # 10
    "                queue.enqueue(neighbour)", # 11
    "    return order",                         # 12
]


def bfs(params: GraphParams) -> Iterator[Step]:
    graph, source, target = params.graph, params.source, params.target

    sb    = StepBuilder()
    queue = deque([source])
    hops:   Dict[str, int]           = {source: 0}
    parent: Dict[str, Optional[str]] = {source: None}
    order:  List[str]                = []

    yield sb.relax(None, source, 0, line=2, why=f"Source '{source}' is 0 hops from itself.")
    yield sb.enqueue(source, line=1, why=f"Initialise: '{source}' goes into the queue. BFS explores layer by layer.")

    while queue:
        node = queue.popleft()
        order.append(node)
        yield sb.visit(node, line=5, why=(
            f"Dequeue '{node}' (hop {hops[node]}). BFS always expands the node discovered earliest (FIFO)."
        ))

        if node == target:
            path = reconstruct_path(parent, target)
            yield sb.done(
                {"order": order, "hops": dict(hops), "path": path, "reached": True},
                line=6,
                why=f"Target '{target}' reached in {len(path) - 1} hop(s): {' → '.join(path)}",
            )
            return

        for nbr, edge in graph.neighbours(node):
            if nbr in hops:
                yield sb.relax(node, nbr, None, edge.id, line=8,
                               why=f"Edge {node}→{nbr}: '{nbr}' already seen — skip.")
                continue
            hops[nbr]   = hops[node] + 1
            parent[nbr] = node
            queue.append(nbr)
            yield sb.relax(node, nbr, hops[nbr], edge.id, line=10,
                           why=f"Edge {node}→{nbr}: '{nbr}' is new, {hops[nbr]} hop(s) from '{source}'.")
            yield sb.enqueue(nbr, line=11, why=f"Enqueue '{nbr}' (parent '{node}').")

    summary = {"order": order, "hops": dict(hops), "path": [], "reached": target is None}
    if target is None:
        why = f"Queue empty: visited {len(order)} node(s) in BFS order {' → '.join(order)}."
    else:
        why = f"Queue empty: '{target}' is NOT reachable from '{source}'."
    yield sb.done(summary, line=12, why=why)
