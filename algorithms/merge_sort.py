"""
merge_sort.py — Merge Sort
===========================
Top-down merge sort.  Recursion is expressed as nested generators
(`yield from`), so every comparison and every write inside a merge
surfaces as its own Step.

Tie-break: on equal values the LEFT half is taken first (`<=`), which
makes the sort stable.
"""

from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import ArrayParams


PSEUDOCODE: List[str] = [
    "def merge_sort(a, lo, hi):",               # 0
    "    if hi - lo ≤ 1: return",               # 1
    "    mid ← (lo + hi) // 2",                 # 2
    "    merge_sort(a, lo, mid)",               # 3
    "    merge_sort(a, mid, hi)",               # 4
    "    left, right ← a[lo:mid], a[mid:hi]",   # 5
    "    while both non-empty:",                # 6
    "        if left[0] ≤ right[0]:",           # 7
    "            a[k] ← left.pop_front()",      # 8
    "        else: a[k] ← right.pop_front()",   # 9
    "    copy the leftovers",                   # 10
]


def merge_sort(params: ArrayParams) -> Iterator[Step]:
    sb = StepBuilder()
    a  = list(params.array)
    counters = {"comparisons": 0, "writes": 0}

    yield from _sort(a, 0, len(a), sb, counters)

    yield sb.mark(range(len(a)), line=0, why="The whole array is merged.")
    yield sb.done(dict(array=a, **counters), line=0, why=f"Sorted: {a}.")


def _sort(a: List, lo: int, hi: int, sb: StepBuilder, counters: dict) -> Iterator[Step]:
    if hi - lo <= 1:
        return
    mid = (lo + hi) // 2
    yield sb.pointer("mid", mid, line=2, why=f"Split [{lo}, {hi}) at {mid}.")
    yield from _sort(a, lo, mid, sb, counters)
    yield from _sort(a, mid, hi, sb, counters)
    yield from _merge(a, lo, mid, hi, sb, counters)


def _merge(a: List, lo: int, mid: int, hi: int, sb: StepBuilder, counters: dict) -> Iterator[Step]:
    left, right = a[lo:mid], a[mid:hi]
    i = j = 0
    k = lo

    while i < len(left) and j < len(right):
        counters["comparisons"] += 1
        yield sb.compare(lo + i, mid + j, line=7, why=f"Merge: compare {left[i]} (left) with {right[j]} (right).")
        if left[i] <= right[j]:
            a[k] = left[i]
            i += 1
            line = 8
        else:
            a[k] = right[j]
            j += 1
            line = 9
        counters["writes"] += 1
        yield sb.write(k, a[k], line=line, why=f"Write {a[k]} into slot {k}.")
        k += 1

    for value in left[i:] + right[j:]:
        a[k] = value
        counters["writes"] += 1
        yield sb.write(k, value, line=10, why=f"Copy leftover {value} into slot {k}.")
        k += 1
