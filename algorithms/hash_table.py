"""
hash_table.py — Hash Table with Separate Chaining
==================================================
Inserts keys in order into `m` buckets using h(k) = k mod m.  Each
bucket is a chain; a new key goes to the chain's tail.  A key already
present in its chain is not inserted twice.
"""

from typing import Iterator, List

from algorithms.step import Step, StepBuilder
from validation.params import HashingParams


PSEUDOCODE: List[str] = [
    "def insert_all(keys, m):",                  # 0
    "    buckets ← m empty chains",              # 1
    "    for k in keys:",                        # 2
    "        b ← k mod m",                       # 3
    "        if k in buckets[b]: continue",      # 4
    "        buckets[b].append(k)",              # 5
    "    return buckets",                        # 6
]


def hash_table(params: HashingParams) -> Iterator[Step]:
    sb = StepBuilder()
    m  = params.bucket_count
    buckets: List[List[int]] = [[] for _ in range(m)]
    collisions = 0

    for k in params.keys:
        b = k % m
        yield sb.probe(b, k, line=3, why=f"h({k}) = {k} mod {m} = {b}.")
        if k in buckets[b]:
            yield sb.mark([b], label="duplicate", line=4, why=f"{k} is already in bucket {b}; skip it.")
            continue
        if buckets[b]:
            collisions += 1
        buckets[b].append(k)
        chain = " → ".join(str(x) for x in buckets[b])
        yield sb.insert(b, k, line=5, why=f"Append {k} to bucket {b}: {chain}.")

    stored = sum(len(chain) for chain in buckets)
    load   = round(stored / m, 3)
    yield sb.done(
        {"buckets": [chain[:] for chain in buckets], "load_factor": load, "collisions": collisions},
        line=6,
        why=f"{stored} key(s) in {m} bucket(s): load factor {load}, {collisions} collision(s).",
    )
