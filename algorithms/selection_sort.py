"""
selection_sort.py — Selection Sort
===================================
Scans the unsorted suffix for its minimum and swaps it to the front.

Tie-break: the LEFTMOST minimum wins (strict `<` while scanning).  The
long-range swap means selection sort is not stable; [2, 2, 1] moves the
first 2 behind the second.
"""

from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import ArrayParams


PSEUDOCODE: List[str] = [
    "def selection_sort(a):",                   # 0
    "    for i in 0 … n-2:",                    # 1
    "        min ← i",                          # 2
    "        for j in i+1 … n-1:",              # 3
    "            if a[j] < a[min]:",            # 4
    "                min ← j",                  # 5
    "        swap(a[i], a[min])",               # 6
    "    return a",                             # 7
]


def selection_sort(params: ArrayParams) -> Iterator[Step]:
    sb = StepBuilder()
    a  = list(params.array)
    n  = len(a)
    comparisons = swaps = 0

    for i in range(n - 1):
        m = i
        yield sb.pointer("min", m, line=2, why=f"Assume a[{i}]={a[i]} is the minimum of the unsorted part.")
        for j in range(i + 1, n):
            comparisons += 1
            yield sb.compare(m, j, line=4, why=f"Is a[{j}]={a[j]} smaller than the current minimum {a[m]}?")
            if a[j] < a[m]:
                m = j
                yield sb.pointer("min", m, line=5, why=f"New minimum {a[m]} at index {m}.")
        if m != i:
            a[i], a[m] = a[m], a[i]
            swaps += 1
            yield sb.swap(i, m, line=6, why=f"Swap the minimum {a[i]} into slot {i}.")
        yield sb.mark([i], line=1, why=f"Slot {i} is final: {a[i]}.")

    yield sb.pointer("min", None, line=7, why="Scan complete.")
    if n:
        yield sb.mark([n - 1], line=7, why="The last slot holds the largest value.")
    yield sb.done(
        {"array": a, "comparisons": comparisons, "swaps": swaps},
        line=7,
        why=f"Sorted: {a}.",
    )
