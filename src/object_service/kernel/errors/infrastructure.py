"""Infrastructure errors — document-store and upstream I/O failures."""

from __future__ import annotations

from typing import Any

from object_service.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a client mistake."""

    default_code = "infrastructure_error"


class ConnectionError(InfrastructureError):  # noqa: A001
    """Failed to reach an external resource (MongoDB, token service, …)."""

    default_code = "connection_error"

    def __init__(
        self,
        resource: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Could not connect to '{resource}'", **kwargs)
        self.resource = resource


__all__ = [
    "ConnectionError",
    "InfrastructureError",
]
