"""
Custom operator strategies.

Built-in operators are dispatched statically by ``QueryModifier``. Anything
else goes through an ``OperatorRegistry``: each entry validates the
extracted value and applies it to the builder. Operators that are merely
allowed (not registered) fall back to calling the builder method named by
the operator without its sigil.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidOperatorValueError

if TYPE_CHECKING:
    from collections.abc import Callable


class CustomOperator(ABC):
    """Strategy interface for a non built-in operator."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Operator name as it appears in the parameters, sigil included."""
        ...

    def validate(self, value: Any) -> None:
        """Raise ``InvalidOperatorValueError`` if *value* is unusable."""

    @abstractmethod
    def apply(self, builder: Any, value: Any) -> Any:
        """
        Apply *value* to *builder*.

        Returns:
            The builder to continue with, or ``None`` to keep *builder*.
        """
        ...


class FunctionOperator(CustomOperator):
    """``CustomOperator`` built from plain callables."""

    def __init__(
        self,
        name: str,
        applier: Callable[[Any, Any], Any],
        validator: Callable[[Any], bool] | None = None,
    ) -> None:
        self._name = name
        self._applier = applier
        self._validator = validator

    @property
    def name(self) -> str:
        return self._name

    def validate(self, value: Any) -> None:
        if self._validator is not None and not self._validator(value):
            raise InvalidOperatorValueError(self._name, value)

    def apply(self, builder: Any, value: Any) -> Any:
        return self._applier(builder, value)

    def __repr__(self) -> str:
        return f"FunctionOperator({self._name!r})"


class OperatorRegistry:
    """
    Registry of ``CustomOperator`` instances keyed by operator name.

    Usage::

        registry = OperatorRegistry()
        registry.register_func(
            "$hint",
            lambda query, index: query.hint(index),
            validator=lambda index: isinstance(index, str),
        )

        modifier = get_query_modifier(params, registry=registry)

    Registered names are extracted as if they were listed in
    ``ModifierOptions.allow``.
    """

    def __init__(self) -> None:
        self._operators: dict[str, CustomOperator] = {}

    # -- registration --------------------------------------------------------

    def register(self, operator: CustomOperator) -> None:
        """Register an operator strategy instance."""
        self._operators[operator.name] = operator

    def register_all(self, *operators: CustomOperator) -> None:
        """Register multiple operator strategy instances at once."""
        for op in operators:
            self.register(op)

    def register_func(
        self,
        name: str,
        applier: Callable[[Any, Any], Any],
        validator: Callable[[Any], bool] | None = None,
    ) -> CustomOperator:
        """Wrap *applier* (and *validator*) and register the result."""
        operator = FunctionOperator(name, applier, validator)
        self.register(operator)
        return operator

    def unregister(self, name: str) -> None:
        """Remove an operator from the registry."""
        self._operators.pop(name, None)

    # -- look-up -------------------------------------------------------------

    def get(self, name: str) -> CustomOperator | None:
        """Return the registered operator or ``None``."""
        return self._operators.get(name)

    def has(self, name: str) -> bool:
        return name in self._operators

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._operators)

    def __len__(self) -> int:
        return len(self._operators)
