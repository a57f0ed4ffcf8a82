"""
bellman_ford.py — Bellman–Ford Algorithm
=========================================
The only single-source shortest-path algorithm that handles NEGATIVE edge
weights (but not negative cycles).

Structure:
  • V-1 rounds of relaxing every edge in the graph.
  • A V-th "detector" round that flags negative cycles.

Yields a Step for:
  1. Each round start                         →  POINTER "round"
  2. Each relaxation attempt                  →  RELAX (value = new dist or None)
  3. Negative-cycle detection                 →  FAILED "negative cycle detected"
  4. Converged                                →  DONE

Edges are scanned in listed order; undirected edges are scanned in both
directions.  A round that relaxes nothing ends the main loop early.
"""

from typing import Dict, Iterator, List, Optional

from algorithms.step import Step, StepBuilder
from graph import reconstruct_path
from validation.params import GraphParams


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BellmanFord(graph, source):",             # 0
    "    dist ← {v: ∞ for v in V}",                # 1
    "    dist[source] ← 0",                        # 2
    "    parent ← {}",                             # 3
    "    for i in 1 … |V|-1:",                     # 4
    "        for each edge (u, v, w):",            # 5
    "            if dist[u] + w < dist[v]:",       # 6
    "                dist[v] ← dist[u] + w",       # 7
    "                parent[v] = u",               # 8
    "    // negative-cycle check:",                # 9
    "    for each edge (u, v, w):",                # 10
    "        if dist[u] + w < dist[v]:",           # 11
    "            return NEGATIVE CYCLE",           # 12
    "    return dist, parent",                     # 13
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bellman_ford(params: GraphParams) -> Iterator[Step]:
    graph, source, target = params.graph, params.source, params.target

    sb        = StepBuilder()
    V         = graph.node_count()
    all_edges = graph.directed_edges()
    dist:   Dict[str, float]         = {source: 0}
    parent: Dict[str, Optional[str]] = {source: None}

    yield sb.relax(None, source, 0, line=2, why=(
        f"Bellman-Ford init: dist['{source}'] = 0, all others = ∞. "
        f"Up to {V - 1} rounds over {len(all_edges)} directed edge(s)."
    ))

    # ==============================================================
    # MAIN ROUNDS
    # ==============================================================
    for round_idx in range(1, V):                  # rounds 1 … V-1
        yield sb.pointer("round", round_idx, line=4, why=f"Round {round_idx} of {V - 1}: scan all edges.")

        any_relaxed = False
        for u, v, w, edge in all_edges:
            if u not in dist:
                continue                           # can't relax from an unreachable node
            new_dist = dist[u] + w
            old      = dist.get(v)
            if old is None or new_dist < old:
                dist[v]   = new_dist
                parent[v] = u
                any_relaxed = True
                yield sb.relax(u, v, new_dist, edge.id, line=7, why=(
                    f"Relax {u}→{v} (w={w}): {dist[u]} + {w} = {new_dist} "
                    f"< {'∞' if old is None else old} → UPDATE dist[{v}]."
                ))
            else:
                yield sb.relax(u, v, None, edge.id, line=6, why=(
                    f"Edge {u}→{v} (w={w}): {dist[u]} + {w} = {new_dist} ≥ {old}, no change."
                ))

        if not any_relaxed:
            yield sb.pointer("round", None, line=4, why=(
                f"Round {round_idx}: nothing relaxed, distances converged early."
            ))
            break

    # ==============================================================
    # NEGATIVE-CYCLE DETECTOR (round V)
    # ==============================================================
    for u, v, w, edge in all_edges:
        if u in dist and dist[u] + w < dist[v]:
            yield sb.failed("negative cycle detected", line=12, why=(
                f"NEGATIVE CYCLE detected via edge {u}→{v} (w={w}): "
                f"dist[{u}] + {w} = {dist[u] + w} still improves dist[{v}]. Shortest paths are undefined."
            ))
            return

    path = reconstruct_path(parent, target) if target is not None else []
    summary = {"distances": dict(dist), "path": path, "reached": target is None or bool(path)}
    if target is None:
        why = f"No negative cycle. Distances from '{source}' are final."
    elif path:
        why = f"No negative cycle. Shortest path to '{target}': {' → '.join(path)}, cost = {dist[target]}."
    else:
        why = f"No negative cycle, but '{target}' is unreachable (dist = ∞)."
    yield sb.done(summary, line=13, why=why)
