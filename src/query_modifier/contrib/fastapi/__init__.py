"""FastAPI integration for query-modifier."""

from .dependencies import get_query_params, query_modifier_dependency
from .middleware import (
    QueryModifierMiddleware,
    error_response,
    query_modifier_exception_handler,
)
from .params import query_params_to_dict

__all__: list[str] = [
    # Middleware
    "QueryModifierMiddleware",
    # Dependencies
    "query_modifier_dependency",
    "get_query_params",
    # Errors
    "error_response",
    "query_modifier_exception_handler",
    # Helpers
    "query_params_to_dict",
]
