"""Application-layer errors — cross-cutting concerns at request level."""

from __future__ import annotations

from typing import Any

from object_service.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnauthorizedError(ApplicationError):
    """Missing or invalid credentials."""

    default_code = "unauthorized"


class ForbiddenError(ApplicationError):
    """Authenticated principal lacks the required scope."""

    default_code = "forbidden"

    def __init__(
        self,
        message: str = "Access denied",
        *,
        scope: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.scope = scope


__all__ = [
    "ApplicationError",
    "ForbiddenError",
    "UnauthorizedError",
]
