"""
sliding_window.py — Maximum-Sum Sliding Window
===============================================
Fixed-width window slid across the array; the running sum is updated in
O(1) per move (add the entering value, subtract the leaving one).

Tie-break: among windows with equal sums the EARLIEST one is reported
(the best is only replaced on a strictly larger sum).
"""

from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import ArrayParams


PSEUDOCODE: List[str] = [
    "def max_window(a, k):",                    # 0
    "    s ← sum(a[0:k])",                      # 1
    "    best ← s",                             # 2
    "    for i in k … n-1:",                    # 3
    "        s ← s + a[i] - a[i-k]",            # 4
    "        if s > best: best ← s",            # 5
    "    return best",                          # 6
]


def sliding_window(params: ArrayParams) -> Iterator[Step]:
    sb = StepBuilder()
    a  = params.array
    k  = params.window
    n  = len(a)

    s = sum(a[:k])
    best, best_start = s, 0
    sums = [s]
    yield sb.window(0, k - 1, s, line=1, why=f"First window a[0..{k - 1}] sums to {s}.")
    yield sb.pointer("best", 0, line=2, why=f"Best so far: {s}.")

    for i in range(k, n):
        s += a[i] - a[i - k]
        sums.append(s)
        start = i - k + 1
        yield sb.window(start, i, s, line=4,
                        why=f"Slide: add a[{i}]={a[i]}, drop a[{i - k}]={a[i - k]} → sum {s}.")
        if s > best:
            best, best_start = s, start
            yield sb.pointer("best", start, line=5, why=f"New best window sum {s} starting at {start}.")

    yield sb.done(
        {"best_sum": best, "start": best_start, "end": best_start + k - 1, "sums": sums},
        line=6,
        why=f"Maximum window sum is {best} at [{best_start}, {best_start + k - 1}].",
    )
