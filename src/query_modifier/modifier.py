"""
QueryModifier: apply extracted operators to a fluent query builder.

``get_query_modifier`` reads the operators out of a query-string mapping and
returns a callable which, given a builder (a Motor cursor, a
``MongoFindQuery``, or anything exposing ``sort``/``skip``/``limit``/
``select``/``populate``), calls the matching builder methods and returns the
resulting builder::

    params = dict(request.query_params)
    modifier = get_query_modifier(params)
    query = modifier(MongoFindQuery(collection, params))

Note that ``get_query_modifier`` is not pure: it deletes the operators from
*params* after reading them. Use ``split_operators`` for a copy-based
variant.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar

from .coercion import is_sequence, to_number
from .exceptions import InvalidOperatorError
from .extraction import extract_operators
from .operators import QueryOperator, is_builtin, method_name
from .options import ModifierOptions

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, MutableMapping

    from .registry import OperatorRegistry

logger = logging.getLogger(__name__)

B = TypeVar("B")

OPERATORS_ATTRIBUTE = "operators"

_LIMIT = QueryOperator.LIMIT.value
_SORT = QueryOperator.SORT.value
_PAGE = QueryOperator.PAGE.value
_SKIP = QueryOperator.SKIP.value
_SELECT = QueryOperator.SELECT.value
_POPULATE = QueryOperator.POPULATE.value


def identity(x: B) -> B:
    return x


# ---------------------------------------------------------------------------
# Built-in steps
# ---------------------------------------------------------------------------


def _apply_sort(builder: Any, ops: dict[str, Any], options: ModifierOptions) -> Any:
    value = ops[_SORT]
    if is_sequence(value):
        for item in value:
            builder = builder.sort(item)
        return builder
    return builder.sort(value)


def _apply_skip(builder: Any, ops: dict[str, Any], options: ModifierOptions) -> Any:
    return builder.skip(to_number(ops[_SKIP]))


def _apply_page(builder: Any, ops: dict[str, Any], options: ModifierOptions) -> Any:
    if not ops.get(_LIMIT):
        ops[_LIMIT] = options.default_limit
    if not options.page_overrides_skip and ops.get(_SKIP):
        logger.debug("Explicit %s kept; %s contributes no skip", _SKIP, _PAGE)
        return builder
    return builder.skip(to_number(ops[_PAGE]) * to_number(ops[_LIMIT]))


def _apply_limit(builder: Any, ops: dict[str, Any], options: ModifierOptions) -> Any:
    return builder.limit(to_number(ops[_LIMIT]))


def _apply_select(builder: Any, ops: dict[str, Any], options: ModifierOptions) -> Any:
    value = ops[_SELECT]
    if is_sequence(value):
        value = ops[_SELECT] = " ".join("" if v is None else str(v) for v in value)
    return builder.select(value)


def _apply_populate(builder: Any, ops: dict[str, Any], options: ModifierOptions) -> Any:
    value = ops[_POPULATE]
    if is_sequence(value):
        for item in value:
            builder = builder.populate(item)
        return builder
    return builder.populate(value)


# Application order; each step runs only when its operator value is truthy.
BUILTIN_STEPS: tuple[
    tuple[str, Callable[[Any, dict[str, Any], ModifierOptions], Any]], ...
] = (
    (_SORT, _apply_sort),
    (_SKIP, _apply_skip),
    (_PAGE, _apply_page),
    (_LIMIT, _apply_limit),
    (_SELECT, _apply_select),
    (_POPULATE, _apply_populate),
)


# ---------------------------------------------------------------------------
# Modifier
# ---------------------------------------------------------------------------


class QueryModifier:
    """Callable applying a captured set of operators to query builders.

    The captured mapping is never changed; every call resolves a fresh copy
    (defaulted ``$limit``, joined ``$select``) and attaches it to the builder
    as ``builder.operators`` when the builder accepts new attributes.
    """

    def __init__(
        self,
        operators: Mapping[str, Any],
        options: ModifierOptions | None = None,
        registry: OperatorRegistry | None = None,
    ) -> None:
        self._operators = dict(operators)
        self._options = options or ModifierOptions()
        self._registry = registry

    @property
    def operators(self) -> Mapping[str, Any]:
        """Read-only view of the extracted operators."""
        return MappingProxyType(self._operators)

    @property
    def options(self) -> ModifierOptions:
        return self._options

    def __call__(self, builder: B) -> B:
        ops = dict(self._operators)
        query: Any = builder

        for name, step in BUILTIN_STEPS:
            if ops.get(name):
                logger.debug("Applying %s=%r", name, ops[name])
                query = step(query, ops, self._options)

        query = self._apply_custom(query, ops)

        try:
            setattr(query, OPERATORS_ATTRIBUTE, ops)
        except AttributeError:
            logger.debug(
                "%s does not accept an %r attribute",
                type(query).__name__,
                OPERATORS_ATTRIBUTE,
            )
        return query

    def _custom_names(self) -> list[str]:
        names = list(self._options.custom_operators)
        if self._registry is not None:
            names.extend(
                n
                for n in self._registry.names
                if n not in names and not is_builtin(n)
            )
        return names

    def _apply_custom(self, query: Any, ops: dict[str, Any]) -> Any:
        for name in self._custom_names():
            value = ops.get(name)
            if not value:
                continue

            registered = (
                self._registry.get(name) if self._registry is not None else None
            )
            if registered is not None:
                registered.validate(value)
                ret = registered.apply(query, value)
            else:
                method = getattr(query, method_name(name), None)
                if not callable(method):
                    raise InvalidOperatorError(name)
                ret = method(value)

            logger.debug("Applied custom operator %s=%r", name, value)
            if ret is not None:
                query = ret
        return query

    def __repr__(self) -> str:
        present = {k: v for k, v in self._operators.items() if v is not None}
        return f"QueryModifier({present!r})"


def get_query_modifier(
    params: MutableMapping[str, Any] | None,
    options: ModifierOptions | Mapping[str, Any] | None = None,
    registry: OperatorRegistry | None = None,
) -> Callable[[Any], Any]:
    """
    Extract the operators from *params* and return a builder modifier.

    *params* is modified in place: every recognized operator is deleted from
    it, so what remains can be used as the query filter.

    Args:
        params: Query-string representation, e.g. ``{"$limit": "10"}``.
            ``None`` yields ``identity``.
        options: ``ModifierOptions`` or a mapping of its fields.
        registry: Custom operators; their names are implicitly allowed.

    Returns:
        A ``QueryModifier``, or ``identity`` when *params* is ``None``.

    Example:
        ```python
        params = {"name": "Ann", "$sort": "-created_at", "$limit": "5"}
        modifier = get_query_modifier(params)
        cursor = modifier(MongoFindQuery(db.users, params)).cursor()
        ```
    """
    if params is None:
        return identity

    opts = ModifierOptions.coerce(options)
    if registry is not None:
        opts = opts.with_allowed(registry.names)

    operators = extract_operators(params, opts)
    return QueryModifier(operators, opts, registry)
