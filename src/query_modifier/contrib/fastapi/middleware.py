"""FastAPI/Starlette middleware attaching a query modifier to each request."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from ...exceptions import QueryModifierError
from ...modifier import get_query_modifier
from ...options import ModifierOptions
from .params import query_params_to_dict

if TYPE_CHECKING:
    from collections.abc import Mapping

    from starlette.requests import Request

    from ...registry import OperatorRegistry

logger = logging.getLogger(__name__)

MODIFIER_STATE_KEY = "query_modifier"
PARAMS_STATE_KEY = "query_params"


def error_response(exc: QueryModifierError) -> JSONResponse:
    """400 response describing a query modifier failure."""
    content: dict[str, Any] = {"error": "invalid_query", "message": str(exc)}
    operator = getattr(exc, "operator", None)
    if operator is not None:
        content["operator"] = operator
    return JSONResponse(status_code=400, content=content)


async def query_modifier_exception_handler(
    request: Request, exc: Exception
) -> Response:
    """Exception handler for ``app.add_exception_handler(QueryModifierError, ...)``."""
    return error_response(cast("QueryModifierError", exc))


class QueryModifierMiddleware(BaseHTTPMiddleware):
    """Extract query operators before the route handler runs.

    Order of Operations:
    1. Conversion: query parameters become a mutable dict (lists for
       repeated keys).
    2. Extraction: ``get_query_modifier`` pops the operators out of it.
    3. Context: the modifier is stored on ``request.state.query_modifier``
       and the remaining parameters on ``request.state.query_params``.
    4. Errors: ``QueryModifierError`` raised downstream becomes a 400.

    Example:
        ```python
        app = FastAPI()
        app.add_middleware(
            QueryModifierMiddleware,
            options={"allow": ["$hint"], "ignore": {"$populate": True}},
        )

        @app.get("/orders")
        async def list_orders(request: Request):
            params = request.state.query_params
            query = request.state.query_modifier(MongoFindQuery(db.orders, params))
            return await query.to_list()
        ```
    """

    def __init__(
        self,
        app: Any,
        *,
        options: ModifierOptions | Mapping[str, Any] | None = None,
        registry: OperatorRegistry | None = None,
    ) -> None:
        super().__init__(app)
        self.options = ModifierOptions.coerce(options)
        self.registry = registry

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        params = query_params_to_dict(request.query_params)
        modifier = get_query_modifier(params, self.options, self.registry)
        setattr(request.state, MODIFIER_STATE_KEY, modifier)
        setattr(request.state, PARAMS_STATE_KEY, params)

        try:
            return cast("Response", await call_next(request))
        except QueryModifierError as e:
            logger.info(
                "Rejected query on %s (operator=%s): %s",
                request.url.path,
                getattr(e, "operator", None),
                e,
            )
            return error_response(e)
