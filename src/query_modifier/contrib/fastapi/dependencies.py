"""FastAPI dependencies for query modifiers.

Usable with or without ``QueryModifierMiddleware``; when the middleware ran,
its modifier and remaining parameters are reused.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from fastapi import Request

from ...modifier import get_query_modifier
from ...options import ModifierOptions
from .middleware import MODIFIER_STATE_KEY, PARAMS_STATE_KEY
from .params import query_params_to_dict

if TYPE_CHECKING:
    from ...registry import OperatorRegistry


def query_modifier_dependency(
    options: ModifierOptions | Mapping[str, Any] | None = None,
    registry: OperatorRegistry | None = None,
) -> Callable[[Request], Callable[[Any], Any]]:
    """Create a dependency returning the request's query modifier.

    Args:
        options: Options used when the middleware has not run.
        registry: Custom operators used when the middleware has not run.

    Example:
        ```python
        modifier_dep = query_modifier_dependency({"allow": ["$hint"]})

        @router.get("/orders")
        async def list_orders(
            modifier=Depends(modifier_dep),
            params=Depends(get_query_params),
        ):
            return await modifier(MongoFindQuery(db.orders, params)).to_list()
        ```
    """
    opts = ModifierOptions.coerce(options)

    def _dependency(request: Request) -> Callable[[Any], Any]:
        existing = getattr(request.state, MODIFIER_STATE_KEY, None)
        if existing is not None:
            return existing  # type: ignore[no-any-return]
        params = query_params_to_dict(request.query_params)
        modifier = get_query_modifier(params, opts, registry)
        setattr(request.state, MODIFIER_STATE_KEY, modifier)
        setattr(request.state, PARAMS_STATE_KEY, params)
        return modifier

    return _dependency


def get_query_params(request: Request) -> dict[str, Any]:
    """Query parameters left after operator extraction.

    Falls back to all parameters when no modifier was built for the request.
    """
    params = getattr(request.state, PARAMS_STATE_KEY, None)
    if params is None:
        return query_params_to_dict(request.query_params)
    return params  # type: ignore[no-any-return]
