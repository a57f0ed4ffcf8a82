"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
==================================================
Generator-based Dijkstra using a min-heap (heapq).

Yields a Step at:
  1. Initialise the source distance            →  RELAX (source, 0) + ENQUEUE
  2. Pop minimum-distance node                  →  VISIT
  3. Each neighbour relaxation attempt          →  RELAX (value = new dist or None)
  4. Successful relaxation re-queues neighbour  →  ENQUEUE
  5. Target popped / heap empty                 →  DONE

Tie-break: equal distances pop in insertion order (a running counter is
the heap's second key).  Stale heap entries are skipped silently.

Correctness note: Dijkstra requires non-negative weights.  The validator
rejects negative edges before a run is ever started.
"""

import heapq
from typing import Dict, Iterator, List, Optional, Tuple

from algorithms.step import Step, StepBuilder
from graph import reconstruct_path
from validation.params import GraphParams


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, source, target):",        # 0
    "    dist ← {v: ∞ for v in V}",                # 1
    "    dist[source] ← 0",                        # 2
    "    pq ← [(0, source)]",                      # 3
    "    parent ← {}",                             # 4
    "    while pq is not empty:",                  # 5
    "        (d, node) ← pq.pop_min()",            # 6
    "        if d > dist[node]: continue",         # 7
    "        if node == target: return path",      # 8
    "        for (neighbour, w) in adj(node):",    # 9
    "            new_dist ← dist[node] + w",       # 10
    "            if new_dist < dist[neighbour]:",  # 11
    "                dist[neighbour] ← new_dist",  # 12
    "                parent[neighbour] = node",    # 13
    "                pq.push((new_dist, nbr))",    # 14
    "    return dist",                             # 15
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(params: GraphParams) -> Iterator[Step]:
    graph, source, target = params.graph, params.source, params.target

    sb      = StepBuilder()
    dist:   Dict[str, float]         = {source: 0}
    parent: Dict[str, Optional[str]] = {source: None}
    done:   set                      = set()
    order:  List[str]                = []
    counter = 0
    pq: List[Tuple[float, int, str]] = [(0, counter, source)]   # (distance, tie-break, node)

    yield sb.relax(None, source, 0, line=2, why=f"Initialise: dist['{source}'] = 0, every other node is ∞.")
    yield sb.enqueue(source, line=3, why=f"Push '{source}' into the priority queue.")

    # --- main loop ---
    while pq:
        d, _, node = heapq.heappop(pq)
        if node in done or d > dist[node]:
            continue                                 # stale entry

        done.add(node)
        order.append(node)
        yield sb.visit(node, line=6, why=(
            f"Pop '{node}' with distance {d}, the smallest in the queue. "
            f"This distance is now FINAL."
        ))

        if node == target:
            path = reconstruct_path(parent, target)
            yield sb.done(
                {"distances": dict(dist), "path": path, "order": order, "reached": True},
                line=8,
                why=f"Target '{target}' popped. Shortest distance = {dist[target]}. Path: {' → '.join(path)}",
            )
            return

        # -- relax neighbours --
        for nbr, edge in graph.neighbours(node):
            if nbr in done:
                yield sb.relax(node, nbr, None, edge.id, line=9,
                               why=f"Edge {node}→{nbr} (w={edge.weight}): '{nbr}' already final — skip.")
                continue

            new_dist = dist[node] + edge.weight
            old      = dist.get(nbr)
            if old is None or new_dist < old:
                dist[nbr]   = new_dist
                parent[nbr] = node
                counter += 1
                heapq.heappush(pq, (new_dist, counter, nbr))
                yield sb.relax(node, nbr, new_dist, edge.id, line=12, why=(
                    f"Relax {node}→{nbr}: {dist[node]} + {edge.weight} = {new_dist} "
                    f"< {'∞' if old is None else old} → UPDATE."
                ))
                yield sb.enqueue(nbr, line=14, why=f"Push ({new_dist}, '{nbr}') into the queue.")
            else:
                yield sb.relax(node, nbr, None, edge.id, line=11, why=(
                    f"Edge {node}→{nbr}: {dist[node]} + {edge.weight} = {new_dist} "
                    f"≥ current {old} → no improvement."
                ))

    summary = {"distances": dict(dist), "path": [], "order": order, "reached": target is None}
    if target is None:
        why = f"Priority queue empty. Final distances from '{source}' are settled for {len(order)} node(s)."
    else:
        why = f"Priority queue empty. '{target}' is not reachable from '{source}'."
    yield sb.done(summary, line=15, why=why)
