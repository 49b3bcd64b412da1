"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from object_service.kernel.errors import (
    BaseError,
    DomainError,
    ForbiddenError,
    ImmutableCollectionError,
    InfrastructureError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from object_service.observability.correlation import CorrelationContext
from object_service.observability.logging import get_logger

_log = get_logger(__name__)


def _correlation_id() -> str | None:
    ctx = CorrelationContext.get()
    return ctx.correlation_id if ctx is not None else None


class FastAPIExceptionMapper:
    """Register kernel error → HTTP status-code mappings on a FastAPI app.

    Error body schema::

        {"code": "not_found", "message": "...", "detail": {...}, "correlation_id": "..."}

    Mappings
    --------
    ``ValidationError``          → 400
    ``ImmutableCollectionError`` → 400
    ``RequestValidationError``   → 400
    ``UnauthorizedError``        → 401
    ``ForbiddenError``           → 403
    ``NotFoundError``            → 404
    ``DomainError``              → 422
    ``InfrastructureError``      → 503
    anything else                → 500
    """

    def __init__(self) -> None:
        self._map: list[tuple[type[Exception], int]] = [
            (ValidationError, 400),
            (ImmutableCollectionError, 400),
            (NotFoundError, 404),
            (UnauthorizedError, 401),
            (ForbiddenError, 403),
            (InfrastructureError, 503),
            (DomainError, 422),
        ]

    @property
    def mappings(self) -> dict[type[Exception], int]:
        return dict(self._map)

    def status_for(self, exc: BaseException) -> int:
        """Return the HTTP status mapped to *exc* (most specific mapping wins)."""
        for exc_type, status in self._map:
            if isinstance(exc, exc_type):
                return status
        return 500

    def register(self, app: FastAPI) -> None:
        """Register all error handlers on a ``FastAPI`` app."""

        def make_handler(code: int) -> Callable[[Request, Exception], Any]:
            def handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: ARG001
                assert isinstance(exc, BaseError)
                if code >= 500:
                    _log.error("request_failed", code=exc.code, exc_info=exc)
                body = exc.to_dict()
                body.pop("cause", None)
                body["correlation_id"] = _correlation_id()
                return JSONResponse(status_code=code, content=body)

            return handler

        for exc_type, status in self._map:
            app.add_exception_handler(exc_type, make_handler(status))

        app.add_exception_handler(RequestValidationError, self._request_validation)
        app.add_exception_handler(BaseError, make_handler(500))
        app.add_exception_handler(Exception, self._unhandled)

    @staticmethod
    def _request_validation(request: Request, exc: Exception) -> JSONResponse:  # noqa: ARG004
        assert isinstance(exc, RequestValidationError)
        errors = [
            {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={
                "code": "validation_error",
                "message": "Request validation failed",
                "detail": {},
                "errors": errors,
                "correlation_id": _correlation_id(),
            },
        )

    @staticmethod
    def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        _log.error(
            "unhandled_exception",
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "code": "internal_error",
                "message": "An unexpected error occurred",
                "detail": {},
                "correlation_id": _correlation_id(),
            },
        )


__all__ = ["FastAPIExceptionMapper"]
