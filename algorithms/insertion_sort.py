"""
insertion_sort.py — Insertion Sort
===================================
Lifts a[i] out as the "key", shifts larger values one slot right, then
drops the key into the gap.  Shifts are WRITE steps, so the folded array
always shows exactly what the algorithm's array holds.

Tie-break: shifts only on strict `>` (stable).
"""

from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import ArrayParams


PSEUDOCODE: List[str] = [
    "def insertion_sort(a):",                   # 0
    "    for i in 1 … n-1:",                    # 1
    "        key ← a[i]",                       # 2
    "        j ← i - 1",                        # 3
    "        while j ≥ 0 and a[j] > key:",      # 4
    "            a[j+1] ← a[j]",                # 5
    "            j ← j - 1",                    # 6
    "        a[j+1] ← key",                     # 7
    "    return a",                             # 8
]


def insertion_sort(params: ArrayParams) -> Iterator[Step]:
    sb = StepBuilder()
    a  = list(params.array)
    n  = len(a)
    comparisons = writes = 0

    for i in range(1, n):
        key = a[i]
        yield sb.pointer("key", i, line=2, why=f"Take key = a[{i}] = {key}.")
        j = i - 1
        while j >= 0:
            comparisons += 1
            yield sb.compare(j, j + 1, line=4, why=f"Is a[{j}]={a[j]} > key={key}?")
            if a[j] <= key:
                break
            a[j + 1] = a[j]
            writes += 1
            yield sb.write(j + 1, a[j], line=5, why=f"{a[j]} > {key}: shift it right to slot {j + 1}.")
            j -= 1
        a[j + 1] = key
        writes += 1
        yield sb.write(j + 1, key, line=7, why=f"Drop key {key} into slot {j + 1}.")

    yield sb.pointer("key", None, line=8, why="Every key has been inserted.")
    yield sb.mark(range(n), line=8, why="The whole array is sorted.")
    yield sb.done(
        {"array": a, "comparisons": comparisons, "writes": writes},
        line=8,
        why=f"Sorted: {a}.",
    )
