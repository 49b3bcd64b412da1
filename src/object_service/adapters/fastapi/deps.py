"""FastAPI adapter – reusable dependency functions.

* FindOptionsDep / find_options_dep – ``start``/``size``/``sort``/``order`` query parameters
* RepositoryDep / CompilerDep       – collaborators stored on ``app.state``
* require_scope(action)             – route scope guard
* error_responses(*codes)           – OpenAPI error response documentation
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import IntEnum
from typing import Annotated, Literal

from fastapi import Depends, Query, Request

from object_service.application.objects import FindOptions, ObjectRepository, SortDirection
from object_service.application.query import QueryCompiler
from object_service.kernel.errors import ConnectionError, UnauthorizedError
from object_service.kernel.security import Principal, ScopeAction, ScopePolicy, SecurityContext


class ResponseFormat(IntEnum):
    """Shape of insert/replace responses: the whole object, or only its id."""

    ENTIRE_OBJECT = 0
    ONLY_ID = 1


# ---------------------------------------------------------------------------
# Find options dependency
# ---------------------------------------------------------------------------

async def find_options_dep(
    start: int = Query(default=0, ge=0, description="Offset of the first object returned"),
    size: int = Query(default=-1, ge=-1, description="Maximum number of objects returned, -1 for all"),
    sort: str | None = Query(default=None, description="Field to sort by"),
    order: Literal["asc", "desc"] = Query(default="asc", description="Sort direction"),
) -> FindOptions:
    """Extract and validate pagination and sort parameters from the query string."""
    return FindOptions(
        start=start,
        limit=size,
        sort_field=sort or None,
        sort_direction=SortDirection.parse(order),
    )


FindOptionsDep = Annotated[FindOptions, Depends(find_options_dep)]


# ---------------------------------------------------------------------------
# app.state collaborators
# ---------------------------------------------------------------------------

def get_repository(request: Request) -> ObjectRepository:
    repository: ObjectRepository | None = getattr(request.app.state, "repository", None)
    if repository is None:
        raise ConnectionError("mongodb", "Object repository is not initialised")
    return repository


def get_compiler(request: Request) -> QueryCompiler:
    return getattr(request.app.state, "compiler", None) or QueryCompiler()


RepositoryDep = Annotated[ObjectRepository, Depends(get_repository)]
CompilerDep = Annotated[QueryCompiler, Depends(get_compiler)]


# ---------------------------------------------------------------------------
# Scope guard
# ---------------------------------------------------------------------------

def require_scope(action: ScopeAction) -> Callable[..., Awaitable[Principal | None]]:
    """Return a dependency enforcing ``{system}.{service}.{db}.{collection}.{action}``.

    When the app has no scope policy (auth disabled) every request passes.
    """

    async def scope_dependency(request: Request, db: str, collection: str) -> Principal | None:
        principal = SecurityContext.get_current()
        policy: ScopePolicy | None = getattr(request.app.state, "scope_policy", None)
        if policy is None:
            return principal
        if principal is None:
            raise UnauthorizedError("Missing or invalid credentials")
        return policy.authorize(principal, db, collection, action)

    scope_dependency.__name__ = f"require_{action.value}_scope"
    return scope_dependency


# ---------------------------------------------------------------------------
# OpenAPI error responses
# ---------------------------------------------------------------------------

_ERROR_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "code": {"type": "string"},
        "message": {"type": "string"},
        "detail": {"type": "object"},
        "correlation_id": {"type": "string", "nullable": True},
    },
    "required": ["code", "message"],
}

_DEFAULT_STATUS_DESCRIPTIONS: dict[int, str] = {
    400: "Client error, such as invalid inputs or malformed JSON",
    401: "HTTP header lacks a valid OAuth2 token",
    403: "HTTP header has a valid OAuth2 token but lacks the scope for this route",
    404: "The specified object or collection could not be found",
    422: "Domain rule violated",
    500: "Internal server error",
    503: "Service unavailable",
}

_CODES_FOR_STATUS: dict[int, str] = {
    400: "validation_error",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    422: "domain_error",
    500: "internal_error",
    503: "connection_error",
}


def error_responses(*codes: int) -> dict[int | str, dict[str, object]]:
    """Build a route ``responses`` dict documenting the given HTTP error codes.

    Usage::

        @router.get("/{db}/{collection}/{id}", responses=error_responses(400, 404))
        async def get_object(...): ...
    """
    result: dict[int | str, dict[str, object]] = {}
    for code in codes:
        description = _DEFAULT_STATUS_DESCRIPTIONS.get(code, "Error")
        result[code] = {
            "description": description,
            "content": {
                "application/json": {
                    "schema": _ERROR_SCHEMA,
                    "example": {
                        "code": _CODES_FOR_STATUS.get(code, "error"),
                        "message": description,
                        "detail": {},
                        "correlation_id": "00000000-0000-0000-0000-000000000000",
                    },
                }
            },
        }
    return result


__all__ = [
    "CompilerDep",
    "FindOptionsDep",
    "RepositoryDep",
    "ResponseFormat",
    "error_responses",
    "find_options_dep",
    "get_compiler",
    "get_repository",
    "require_scope",
]
