"""Starlette query parameters -> mutable operator-friendly dict."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from starlette.datastructures import QueryParams

ARRAY_SUFFIX = "[]"


def query_params_to_dict(query_params: QueryParams) -> dict[str, Any]:
    """
    Convert immutable query parameters into a plain dict.

    Repeated keys (``?$sort=a&$sort=-b``) and bracketed keys
    (``?$select[]=a&$select[]=b``) become lists; single keys stay scalars.
    """
    out: dict[str, Any] = {}
    for raw_key, value in query_params.multi_items():
        is_array = raw_key.endswith(ARRAY_SUFFIX)
        key = raw_key[: -len(ARRAY_SUFFIX)] if is_array else raw_key
        if key not in out:
            out[key] = [value] if is_array else value
            continue
        current = out[key]
        if isinstance(current, list):
            current.append(value)
        else:
            out[key] = [current, value]
    return out
