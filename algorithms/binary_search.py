"""
binary_search.py — Binary Search
=================================
Halves a sorted array's search range until the target is found or the
range is empty.  Pointers `lo`, `hi` and `mid` are published as Steps so
the renderer can draw the shrinking range.

Tie-break: with duplicates, the first midpoint that matches is reported;
that is not necessarily the leftmost occurrence.
"""

from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import ArrayParams


PSEUDOCODE: List[str] = [
    "def binary_search(a, target):",            # 0
    "    lo, hi ← 0, n - 1",                    # 1
    "    while lo ≤ hi:",                       # 2
    "        mid ← (lo + hi) // 2",             # 3
    "        if a[mid] == target: return mid",  # 4
    "        if a[mid] < target: lo ← mid + 1", # 5
    "        else: hi ← mid - 1",               # 6
    "    return -1",                            # 7
]


def binary_search(params: ArrayParams) -> Iterator[Step]:
    sb     = StepBuilder()
    a      = params.array
    target = params.target
    lo, hi = 0, len(a) - 1
    probes = 0

    yield sb.pointer("lo", lo, line=1, why=f"Search the whole array for {target}.")
    yield sb.pointer("hi", hi, line=1)

    while lo <= hi:
        mid = (lo + hi) // 2
        probes += 1
        yield sb.pointer("mid", mid, line=3, why=f"Middle of [{lo}, {hi}] is index {mid}.")
        yield sb.probe(mid, target, line=4, why=f"Is a[{mid}]={a[mid]} equal to {target}?")

        if a[mid] == target:
            yield sb.mark([mid], label="found", line=4, why=f"Found {target} at index {mid}.")
            yield sb.done({"index": mid, "found": True, "probes": probes}, line=4,
                          why=f"{target} found at index {mid} after {probes} probe(s).")
            return

        if a[mid] < target:
            lo = mid + 1
            yield sb.pointer("lo", lo, line=5, why=f"{a[mid]} < {target}: discard the left half.")
        else:
            hi = mid - 1
            yield sb.pointer("hi", hi, line=6, why=f"{a[mid]} > {target}: discard the right half.")

    yield sb.pointer("mid", None, line=7)
    yield sb.done({"index": -1, "found": False, "probes": probes}, line=7,
                  why=f"The range is empty: {target} is not in the array.")
