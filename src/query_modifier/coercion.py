"""
Value coercion helpers shared by the modifier and the adapters.

These are pure-Python helpers with no framework dependencies.
"""

from __future__ import annotations

import math
import re
from typing import Any

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_PREFIXED_RE = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")


def is_sequence(value: Any) -> bool:
    """True for list-like operator values; strings are scalars."""
    return isinstance(value, list | tuple)


def to_number(value: Any) -> int | float:
    """
    Coerce an operator value to a number, best effort.

    - ``None`` and the empty string become ``0``
    - booleans become ``0``/``1``
    - whole floats become ``int``
    - decimal, exponent and ``0x``/``0o``/``0b`` strings are parsed
    - an empty sequence becomes ``0``; a single-element one is coerced
      through its element (``?$limit[]=5`` parses to ``["5"]``)
    - anything else becomes ``math.nan``; callers pass it on unchanged
    """
    if is_sequence(value):
        if not value:
            return 0
        if len(value) == 1:
            return to_number(value[0])
        return math.nan
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _normalize(value)
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if _PREFIXED_RE.match(text):
            return int(text, 0)
        if _DECIMAL_RE.match(text):
            return _normalize(float(text))
    return math.nan


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _normalize(number: float) -> int | float:
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number
