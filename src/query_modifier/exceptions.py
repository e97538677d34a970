"""Query modifier exceptions."""

from __future__ import annotations


class QueryModifierError(Exception):
    """Root exception for the query-modifier package."""


class InvalidOperatorError(QueryModifierError):
    """Raised when an allowed operator has no matching builder method.

    Carries the offending operator name (sigil included).
    """

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"Invalid operator {operator}")


class UnknownRelationError(QueryModifierError):
    """Raised when ``populate`` names a relation with no configured lookup."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No lookup configured for relation {path!r}")


class InvalidOperatorValueError(QueryModifierError):
    """Raised when a registered operator rejects the extracted value."""

    def __init__(self, operator: str, value: object) -> None:
        self.operator = operator
        self.value = value
        super().__init__(f"Invalid value {value!r} for operator {operator}")
