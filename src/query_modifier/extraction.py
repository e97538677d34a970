"""Operator extraction from query parameter mappings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .options import ModifierOptions

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping

logger = logging.getLogger(__name__)


def split_operators(
    params: Mapping[str, Any],
    options: ModifierOptions | Mapping[str, Any] | None = None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Separate operators from ordinary parameters without touching *params*.

    Returns:
        ``(remaining, operators)``: a copy of *params* without the consumed
        keys, and the extracted operator values keyed by operator name.
    """
    remaining = dict(params)
    operators = extract_operators(remaining, options)
    return remaining, operators


def extract_operators(
    params: MutableMapping[str, Any],
    options: ModifierOptions | Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Pop every recognized operator out of *params*, in place.

    Every recognized, non-ignored operator key is deleted whether or not it
    held a value. Ignored operators are deleted only when
    ``options.delete_ignored`` is set. A missing or ``None`` value falls back
    to ``options.defaults``.

    Returns:
        The extracted operators, one entry per non-ignored operator name.
    """
    opts = ModifierOptions.coerce(options)
    operators: dict[str, Any] = {}

    for name in opts.valid_operators:
        if opts.is_ignored(name):
            if opts.delete_ignored:
                params.pop(name, None)
            continue

        value = params.pop(name, None)
        if value is None and opts.defaults.get(name) is not None:
            value = opts.defaults[name]
        operators[name] = value

    logger.debug(
        "Extracted operators %s",
        {k: v for k, v in operators.items() if v is not None},
    )
    return operators
