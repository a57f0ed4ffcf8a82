"""
knapsack.py — 0/1 Knapsack (Dynamic Programming)
==================================================
Fills the (n+1) × (C+1) table row by row:

    table[i][w] = best value using the first i items with capacity w

Row 0 starts as all zeros.  Every other cell is one CELL step.  After the
fill, a traceback from table[n][C] marks the chosen items.

Tie-break: an item is taken only when taking it is STRICTLY better than
skipping it, so on equal value "skip" wins.
"""

from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import KnapsackParams


PSEUDOCODE: List[str] = [
    "def knapsack(weights, values, C):",                  # 0
    "    T ← (n+1) × (C+1) table, row 0 = 0",             # 1
    "    for i in 1 … n:",                                # 2
    "        for w in 0 … C:",                            # 3
    "            T[i][w] ← T[i-1][w]              # skip",  # 4
    "            if weight[i] ≤ w:",                      # 5
    "                take ← T[i-1][w-weight[i]] + value[i]",  # 6
    "                if take > T[i][w]: T[i][w] ← take",  # 7
    "    trace back from T[n][C] to list items",          # 8
    "    return T[n][C]",                                 # 9
]


def knapsack(params: KnapsackParams) -> Iterator[Step]:
    sb = StepBuilder()
    weights, values, C = params.weights, params.values, params.capacity
    n = len(weights)
    table = [[0] * (C + 1)] + [[0] * (C + 1) for _ in range(n)]

    for i in range(1, n + 1):
        wt, val = weights[i - 1], values[i - 1]
        for w in range(C + 1):
            skip = table[i - 1][w]
            if wt <= w and table[i - 1][w - wt] + val > skip:
                take = table[i - 1][w - wt] + val
                table[i][w] = take
                yield sb.cell(i, w, take, line=7, why=(
                    f"Item {i - 1} (w={wt}, v={val}) at capacity {w}: "
                    f"take = {table[i - 1][w - wt]} + {val} = {take} > skip = {skip}."
                ))
            else:
                table[i][w] = skip
                if wt > w:
                    why = f"Item {i - 1} (w={wt}) does not fit in capacity {w}: carry {skip} down."
                else:
                    why = (f"Item {i - 1} at capacity {w}: take = {table[i - 1][w - wt] + val} "
                           f"is not better than skip = {skip}.")
                yield sb.cell(i, w, skip, line=4, why=why)

    # -- traceback --
    chosen: List[int] = []
    w = C
    for i in range(n, 0, -1):
        if table[i][w] != table[i - 1][w]:
            chosen.append(i - 1)
            w -= weights[i - 1]
    chosen.reverse()
    yield sb.mark(chosen, label="chosen", line=8,
                  why=f"Trace back from T[{n}][{C}]: items {chosen or 'none'} are in the knapsack.")

    best = table[n][C]
    yield sb.done(
        {"best_value": best, "items": chosen, "table": [row[:] for row in table]},
        line=9,
        why=f"Best total value within capacity {C} is {best}.",
    )
