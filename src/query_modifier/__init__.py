"""Query-string operators ($limit, $sort, $page, ...) -> fluent query builder calls."""

from __future__ import annotations

from .coercion import is_sequence, to_number
from .exceptions import (
    InvalidOperatorError,
    InvalidOperatorValueError,
    QueryModifierError,
    UnknownRelationError,
)
from .extraction import extract_operators, split_operators
from .modifier import (
    BUILTIN_STEPS,
    OPERATORS_ATTRIBUTE,
    QueryModifier,
    get_query_modifier,
    identity,
)
from .operators import SIGIL, VALID_OPERATORS, QueryOperator, method_name
from .options import ModifierOptions
from .registry import CustomOperator, FunctionOperator, OperatorRegistry

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "get_query_modifier",
    "extract_operators",
    "split_operators",
    "QueryModifier",
    "identity",
    # Operators
    "QueryOperator",
    "VALID_OPERATORS",
    "SIGIL",
    "BUILTIN_STEPS",
    "OPERATORS_ATTRIBUTE",
    "method_name",
    # Configuration
    "ModifierOptions",
    # Extensions
    "CustomOperator",
    "FunctionOperator",
    "OperatorRegistry",
    # Exceptions
    "QueryModifierError",
    "InvalidOperatorError",
    "InvalidOperatorValueError",
    "UnknownRelationError",
    # Utilities
    "is_sequence",
    "to_number",
]
