"""
two_pointers.py — Two-Pointer Pair Sum
=======================================
Given a sorted array and a target, walk `left` up from the start and
`right` down from the end until a[left] + a[right] == target.

Tie-break: the first pair met while scanning outside-in is reported.
"""

from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import ArrayParams


PSEUDOCODE: List[str] = [
    "def pair_sum(a, target):",                 # 0
    "    left, right ← 0, n - 1",               # 1
    "    while left < right:",                  # 2
    "        s ← a[left] + a[right]",           # 3
    "        if s == target: return (left, right)",  # 4
    "        if s < target: left ← left + 1",   # 5
    "        else: right ← right - 1",          # 6
    "    return NOT FOUND",                     # 7
]


def two_pointers(params: ArrayParams) -> Iterator[Step]:
    sb     = StepBuilder()
    a      = params.array
    target = params.target
    left, right = 0, len(a) - 1
    comparisons = 0

    yield sb.pointer("left", left, line=1, why="Start with one pointer at each end.")
    yield sb.pointer("right", right, line=1)

    while left < right:
        s = a[left] + a[right]
        comparisons += 1
        yield sb.compare(left, right, line=3, why=f"a[{left}] + a[{right}] = {a[left]} + {a[right]} = {s}.")

        if s == target:
            yield sb.mark([left, right], label="found", line=4, why=f"{s} equals the target {target}.")
            yield sb.done(
                {"found": True, "pair": [left, right], "values": [a[left], a[right]], "comparisons": comparisons},
                line=4,
                why=f"Pair found at indices {left} and {right}.",
            )
            return

        if s < target:
            left += 1
            yield sb.pointer("left", left, line=5, why=f"{s} < {target}: move left forward for a larger sum.")
        else:
            right -= 1
            yield sb.pointer("right", right, line=6, why=f"{s} > {target}: move right back for a smaller sum.")

    yield sb.done({"found": False, "pair": None, "values": None, "comparisons": comparisons},
                  line=7, why=f"The pointers met: no two values add up to {target}.")
