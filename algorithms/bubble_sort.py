"""
bubble_sort.py — Bubble Sort
=============================
Generator-based bubble sort.  Yields a Step at every meaningful event:
  1. Compare two neighbours
  2. Swap them when the left one is larger
  3. Mark the slot that just became final at the end of a pass
  4. Early exit when a pass makes no swap

Tie-break: swaps only on strict `>`, so equal values keep their
relative order (stable).
"""

from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import ArrayParams


PSEUDOCODE: List[str] = [
    "def bubble_sort(a):",                      # 0
    "    n ← len(a)",                           # 1
    "    for i in 0 … n-2:",                    # 2
    "        swapped ← false",                  # 3
    "        for j in 0 … n-i-2:",              # 4
    "            if a[j] > a[j+1]:",            # 5
    "                swap(a[j], a[j+1])",       # 6
    "                swapped ← true",           # 7
    "        if not swapped: break",            # 8
    "    return a",                             # 9
]


def bubble_sort(params: ArrayParams) -> Iterator[Step]:
    sb = StepBuilder()
    a  = list(params.array)
    n  = len(a)
    comparisons = swaps = 0
    settled = n          # a[settled:] is final

    for i in range(n - 1):
        swapped = False
        for j in range(n - i - 1):
            comparisons += 1
            yield sb.compare(j, j + 1, line=5, why=f"Compare a[{j}]={a[j]} with a[{j + 1}]={a[j + 1]}.")
            if a[j] > a[j + 1]:
                a[j], a[j + 1] = a[j + 1], a[j]
                swaps += 1
                swapped = True
                yield sb.swap(j, j + 1, line=6, why=f"{a[j + 1]} > {a[j]}, so they swap places.")

        settled = n - 1 - i
        yield sb.mark([settled], line=2, why=f"Pass {i + 1} done: the largest remaining value {a[settled]} is in place.")

        if not swapped:
            yield sb.mark(range(settled), line=8, why="No swaps in this pass, so the rest is already sorted.")
            settled = 0
            break

    if settled > 0:
        yield sb.mark(range(settled), line=9, why="Only one unsorted slot remains; it is in place.")

    yield sb.done(
        {"array": a, "comparisons": comparisons, "swaps": swaps},
        line=9,
        why=f"Sorted: {a}.",
    )
