"""
params.py — Typed Algorithm Parameters
=======================================
What a validator hands to a StepEmitter.  All frozen, all tuples:
once validated, input is never mutated.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from graph import Graph

Number = Union[int, float]


@dataclass(frozen=True)
class ArrayParams:
    array:  Tuple[Number, ...]
    target: Optional[Number] = None     # binary search / pair sum
    window: Optional[int]    = None     # sliding window width


@dataclass(frozen=True)
class GraphParams:
    graph:  Graph
    source: Optional[str] = None        # None for whole-graph algorithms (topological sort)
    target: Optional[str] = None


@dataclass(frozen=True)
class KnapsackParams:
    weights:  Tuple[int, ...]
    values:   Tuple[Number, ...]
    capacity: int


@dataclass(frozen=True)
class UnionFindParams:
    size:   int
    unions: Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class HashingParams:
    keys:         Tuple[int, ...]
    bucket_count: int
