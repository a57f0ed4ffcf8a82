"""
validators.py — Raw Input → Typed Parameters
=============================================
One validator per input shape.  Each takes the raw mapping a form (or a
test) supplies and returns a TypedParams dataclass, raising an
InputError subclass on the first problem it finds.

`validate()` is the only public entry point that callers above this
package use: it never raises for bad input, it returns a Result.

Field names (what a renderer's form must send):

    array                         "3, 1, 4 1 5"
    target                        "7"
    window                        "3"
    graph, source, target         JSON adjacency / matrix / text list
    undirected                    "true" / "false" (default directed)
    weights, values, capacity     knapsack
    size, unions                  union-find: "0-1, 2 3; 1-2"
    keys, buckets                 hash table
"""

import logging
import re
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from config import SETTINGS, Settings
from graph import Graph, GraphFormatError, WeightError
from validation.errors import (
    ConstraintViolation,
    EmptyInput,
    InputError,
    LengthMismatch,
    MalformedStructure,
    NotANumber,
    OutOfBounds,
    Result,
)
from validation.params import (
    ArrayParams,
    GraphParams,
    HashingParams,
    KnapsackParams,
    UnionFindParams,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]
Validator = Callable[[Mapping[str, Any], Settings], Any]

_TOKEN_SPLIT = re.compile(r"[\s,;]+")
_PAIR_SPLIT  = re.compile(r"[;,]")
_INTEGER     = re.compile(r"[+-]?\d+")


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def validate(
    validator: Validator,
    raw: Optional[Mapping[str, Any]],
    settings: Optional[Settings] = None,
) -> Result:
    """Run `validator` over `raw`; wrap the outcome in a Result."""
    settings = settings or SETTINGS
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        return Result.failure(MalformedStructure("input", "input must be a mapping of field → value").to_error())
    try:
        params = validator(raw, settings)
    except InputError as exc:
        logger.info("input rejected: %s (%s) %s", exc.kind.value, exc.field, exc.message)
        return Result.failure(exc.to_error())
    return Result.success(params)


# ---------------------------------------------------------------------------
# Scalar / list parsers
# ---------------------------------------------------------------------------
def _present(raw: Mapping[str, Any], field: str) -> Any:
    value = raw.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise EmptyInput(field, f"'{field}' is required")
    if isinstance(value, (list, tuple)) and not value:
        raise EmptyInput(field, f"'{field}' must not be empty")
    return value


def parse_number(value: Any, field: str) -> Number:
    if isinstance(value, bool):
        raise NotANumber(field, f"'{field}' must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        num = value
    else:
        text = str(value).strip()
        if not text:
            raise EmptyInput(field, f"'{field}' is required")
        if _INTEGER.fullmatch(text):
            return int(text)
        try:
            num = float(text)
        except ValueError:
            raise NotANumber(field, f"'{field}' must be a number, got {text!r}") from None
    if num != num or num in (float("inf"), float("-inf")):
        raise NotANumber(field, f"'{field}' must be a finite number, got {value!r}")
    if isinstance(num, float) and num.is_integer():
        return int(num)
    return num


def parse_int(value: Any, field: str) -> int:
    num = parse_number(value, field)
    if not isinstance(num, int):
        raise ConstraintViolation(field, f"'{field}' must be a whole number, got {num}")
    return num


def parse_number_list(value: Any, field: str, settings: Settings) -> Tuple[Number, ...]:
    if isinstance(value, (list, tuple)):
        tokens: Sequence[Any] = value
    else:
        tokens = [t for t in _TOKEN_SPLIT.split(str(value).strip()) if t]
    if not tokens:
        raise EmptyInput(field, f"'{field}' must contain at least one number")
    numbers = tuple(parse_number(t, field) for t in tokens)
    if len(numbers) > settings.max_items:
        raise ConstraintViolation(field, f"'{field}' holds {len(numbers)} values; the limit is {settings.max_items}")
    return numbers


def _flag(raw: Mapping[str, Any], field: str) -> bool:
    value = raw.get(field)
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


def _is_sorted(values: Sequence[Number]) -> bool:
    return all(values[i] <= values[i + 1] for i in range(len(values) - 1))


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------
def array_input(raw: Mapping[str, Any], settings: Settings) -> ArrayParams:
    """Plain numeric array (sorting)."""
    return ArrayParams(array=parse_number_list(_present(raw, "array"), "array", settings))


def sorted_search_input(raw: Mapping[str, Any], settings: Settings) -> ArrayParams:
    """Sorted array + numeric target (binary search, two-pointer pair sum)."""
    array = parse_number_list(_present(raw, "array"), "array", settings)
    if not _is_sorted(array):
        raise ConstraintViolation("array", "array must be sorted in ascending order")
    target = parse_number(_present(raw, "target"), "target")
    return ArrayParams(array=array, target=target)


def window_input(raw: Mapping[str, Any], settings: Settings) -> ArrayParams:
    array = parse_number_list(_present(raw, "array"), "array", settings)
    window = parse_int(_present(raw, "window"), "window")
    if window < 1:
        raise ConstraintViolation("window", f"window size must be at least 1, got {window}")
    if window > len(array):
        raise ConstraintViolation("window", f"window size {window} is larger than the array ({len(array)} values)")
    return ArrayParams(array=array, window=window)


# ---------------------------------------------------------------------------
# Graphs
# ---------------------------------------------------------------------------
def _graph(raw: Mapping[str, Any]) -> Graph:
    value = _present(raw, "graph")
    try:
        graph = Graph.parse(value, directed=not _flag(raw, "undirected"))
    except WeightError as exc:
        raise NotANumber("graph", str(exc)) from exc
    except GraphFormatError as exc:
        raise MalformedStructure("graph", str(exc)) from exc
    if graph.node_count() == 0:
        raise EmptyInput("graph", "graph has no nodes")
    return graph


def _node(raw: Mapping[str, Any], field: str, graph: Graph, default: Optional[str]) -> Optional[str]:
    value = raw.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    node = str(value).strip()
    if node not in graph:
        raise OutOfBounds(field, f"{field} '{node}' is not a node of the graph")
    return node


def graph_input(raw: Mapping[str, Any], settings: Settings) -> GraphParams:
    """Graph + source (defaults to the first node) + optional target."""
    graph = _graph(raw)
    source = _node(raw, "source", graph, default=graph.node_ids()[0])
    target = _node(raw, "target", graph, default=None)
    return GraphParams(graph=graph, source=source, target=target)


def non_negative_graph_input(raw: Mapping[str, Any], settings: Settings) -> GraphParams:
    params = graph_input(raw, settings)
    negative = params.graph.negative_edges()
    if negative:
        edge = negative[0]
        raise ConstraintViolation(
            "graph",
            f"negative weight {edge.weight} on {edge.source}->{edge.target}; "
            f"Dijkstra requires non-negative weights",
        )
    return params


def dag_input(raw: Mapping[str, Any], settings: Settings) -> GraphParams:
    """Whole-graph input; topological order is only defined for directed graphs."""
    if _flag(raw, "undirected"):
        raise ConstraintViolation("undirected", "topological sort needs a directed graph")
    return GraphParams(graph=_graph(raw))


# ---------------------------------------------------------------------------
# Knapsack
# ---------------------------------------------------------------------------
def knapsack_input(raw: Mapping[str, Any], settings: Settings) -> KnapsackParams:
    weights = parse_number_list(_present(raw, "weights"), "weights", settings)
    values  = parse_number_list(_present(raw, "values"), "values", settings)
    if len(weights) != len(values):
        raise LengthMismatch(
            "values",
            f"{len(weights)} weights but {len(values)} values; each item needs one of each",
        )
    for w in weights:
        if not isinstance(w, int):
            raise ConstraintViolation("weights", f"weights must be whole numbers, got {w}")
        if w <= 0:
            raise ConstraintViolation("weights", f"weights must be positive, got {w}")
    for v in values:
        if v < 0:
            raise ConstraintViolation("values", f"values must not be negative, got {v}")
    capacity = parse_int(_present(raw, "capacity"), "capacity")
    if capacity < 0:
        raise ConstraintViolation("capacity", f"capacity must not be negative, got {capacity}")
    if capacity > settings.max_capacity:
        raise ConstraintViolation("capacity", f"capacity {capacity} exceeds the limit of {settings.max_capacity}")
    return KnapsackParams(weights=weights, values=values, capacity=capacity)


# ---------------------------------------------------------------------------
# Union-find
# ---------------------------------------------------------------------------
def _pairs(value: Any) -> List[Tuple[Any, Any]]:
    if isinstance(value, (list, tuple)):
        out = []
        for entry in value:
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise MalformedStructure("unions", f"each union must be a pair, got {entry!r}")
            out.append((entry[0], entry[1]))
        return out
    out = []
    for chunk in _PAIR_SPLIT.split(str(value)):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = [p for p in re.split(r"[\s\-:]+", chunk) if p]
        if len(parts) != 2:
            raise MalformedStructure("unions", f"expected a pair like '0-1', got {chunk!r}")
        out.append((parts[0], parts[1]))
    return out


def union_find_input(raw: Mapping[str, Any], settings: Settings) -> UnionFindParams:
    size = parse_int(_present(raw, "size"), "size")
    if size < 1:
        raise ConstraintViolation("size", f"size must be at least 1, got {size}")
    if size > settings.max_items:
        raise ConstraintViolation("size", f"size {size} exceeds the limit of {settings.max_items}")
    pairs = _pairs(_present(raw, "unions"))
    if not pairs:
        raise EmptyInput("unions", "'unions' must list at least one pair")
    unions = []
    for a_raw, b_raw in pairs:
        a, b = parse_int(a_raw, "unions"), parse_int(b_raw, "unions")
        for x in (a, b):
            if not 0 <= x < size:
                raise OutOfBounds("unions", f"element {x} is outside 0..{size - 1}")
        unions.append((a, b))
    return UnionFindParams(size=size, unions=tuple(unions))


# ---------------------------------------------------------------------------
# Hashing
# ---------------------------------------------------------------------------
def hashing_input(raw: Mapping[str, Any], settings: Settings) -> HashingParams:
    keys = parse_number_list(_present(raw, "keys"), "keys", settings)
    for k in keys:
        if not isinstance(k, int):
            raise ConstraintViolation("keys", f"keys must be whole numbers, got {k}")
    buckets = parse_int(_present(raw, "buckets"), "buckets")
    if buckets < 1:
        raise ConstraintViolation("buckets", f"bucket count must be at least 1, got {buckets}")
    if buckets > settings.max_items:
        raise ConstraintViolation("buckets", f"bucket count {buckets} exceeds the limit of {settings.max_items}")
    return HashingParams(keys=keys, bucket_count=buckets)
