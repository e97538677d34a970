"""Built-in query operators and sigil handling."""

from __future__ import annotations

from enum import Enum

SIGIL = "$"


class QueryOperator(str, Enum):
    """Operators recognized without any configuration."""

    LIMIT = "$limit"
    SORT = "$sort"
    PAGE = "$page"
    SKIP = "$skip"
    SELECT = "$select"
    POPULATE = "$populate"


# Extraction order.
VALID_OPERATORS: tuple[str, ...] = (
    QueryOperator.LIMIT.value,
    QueryOperator.SORT.value,
    QueryOperator.PAGE.value,
    QueryOperator.SKIP.value,
    QueryOperator.SELECT.value,
    QueryOperator.POPULATE.value,
)


def method_name(operator: str, sigil: str = SIGIL) -> str:
    """Return the builder method name for *operator*.

    >>> method_name("$custom")
    'custom'
    """
    if sigil and operator.startswith(sigil):
        return operator[len(sigil) :]
    return operator


def is_builtin(operator: str) -> bool:
    return operator in VALID_OPERATORS
