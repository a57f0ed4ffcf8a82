"""
validation/
-----------
InputValidator: raw form input → typed, frozen algorithm parameters.

    from validation import validate, ValidationErrorKind
"""

from validation.errors import (
    ConstraintViolation,
    EmptyInput,
    InputError,
    LengthMismatch,
    MalformedStructure,
    NotANumber,
    OutOfBounds,
    Result,
    ValidationError,
    ValidationErrorKind,
)
from validation.params import (
    ArrayParams,
    GraphParams,
    HashingParams,
    KnapsackParams,
    UnionFindParams,
)
from validation.validators import (
    array_input,
    dag_input,
    graph_input,
    hashing_input,
    knapsack_input,
    non_negative_graph_input,
    sorted_search_input,
    union_find_input,
    validate,
    window_input,
)

__all__ = [
    "ValidationError",
    "ValidationErrorKind",
    "Result",
    "InputError",
    "EmptyInput",
    "NotANumber",
    "LengthMismatch",
    "OutOfBounds",
    "MalformedStructure",
    "ConstraintViolation",
    "ArrayParams",
    "GraphParams",
    "KnapsackParams",
    "UnionFindParams",
    "HashingParams",
    "validate",
    "array_input",
    "sorted_search_input",
    "window_input",
    "graph_input",
    "non_negative_graph_input",
    "dag_input",
    "knapsack_input",
    "union_find_input",
    "hashing_input",
]
