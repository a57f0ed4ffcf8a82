"""
dfs.py — Depth-First Search
=============================
Generator-based DFS using an explicit stack (no Python recursion limit issues).

Yields a Step at:
  1. Push source onto the stack           →  ENQUEUE
  2. Pop an unvisited node                 →  VISIT
  3. Examine each neighbour                →  RELAX
  4. Push an unvisited neighbour           →  ENQUEUE
  5. Target visited / stack empty          →  DONE

Tie-break: neighbours are pushed in REVERSE listed order so they are
popped in listed order; with "mark on pop" this reproduces the preorder
of the recursive algorithm.  A node may sit on the stack more than once;
stale entries are skipped silently when popped.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from algorithms.step import Step, StepBuilder
from graph import reconstruct_path
from validation.params import GraphParams


PSEUDOCODE: List[str] = [
    "def DFS(graph, source, target):",          # 0
    "    stack ← [source]",                     # 1
    "    visited ← {}",                         # 2
    "    while stack is not empty:",            # 3
    "        node ← stack.pop()",               # 4
    "        if node in visited: continue",     # 5
    "        visited.add(node)",                # 6
    "        if node == target: return path",   # 7
    "        for neighbour in reversed(adj(node)):",  # 8
    "            if neighbour not visited:",    # 9
    "                stack.push(neighbour)",    # 10
    "    return order",                         # 11
]


def dfs(params: GraphParams) -> Iterator[Step]:
    graph, source, target = params.graph, params.source, params.target

    sb = StepBuilder()
    stack: List[Tuple[str, Optional[str]]] = [(source, None)]   # (node, pushed-from)
    parent: Dict[str, Optional[str]] = {}
    order:  List[str] = []

    yield sb.enqueue(source, line=1, why=f"Push source '{source}' onto the stack.")

    while stack:
        node, came_from = stack.pop()
        if node in parent:
            continue
        parent[node] = came_from
        order.append(node)
        depth_note = f"from '{came_from}'" if came_from else "as the root"
        yield sb.visit(node, line=6, why=f"Pop '{node}' ({depth_note}) and mark it visited. DFS dives deep first.")

        if node == target:
            path = reconstruct_path(parent, target)
            yield sb.done(
                {"order": order, "path": path, "reached": True},
                line=7,
                why=f"Target '{target}' reached: {' → '.join(path)} (not necessarily shortest).",
            )
            return

        for nbr, edge in reversed(graph.neighbours(node)):
            if nbr in parent:
                yield sb.relax(node, nbr, None, edge.id, line=9,
                               why=f"Edge {node}→{nbr}: '{nbr}' already visited — skip.")
                continue
            stack.append((nbr, node))
            yield sb.relax(node, nbr, None, edge.id, line=9, why=f"Edge {node}→{nbr}: '{nbr}' not visited yet.")
            yield sb.enqueue(nbr, line=10, why=f"Push '{nbr}' onto the stack.")

    summary = {"order": order, "path": [], "reached": target is None}
    if target is None:
        why = f"Stack empty: DFS preorder is {' → '.join(order)}."
    else:
        why = f"Stack empty: '{target}' is NOT reachable from '{source}'."
    yield sb.done(summary, line=11, why=why)
