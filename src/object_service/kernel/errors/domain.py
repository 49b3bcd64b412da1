"""Domain errors — rule violations on stored objects and client input."""

from __future__ import annotations

from typing import Any

from object_service.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a document-store rule is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class NotFoundError(DomainError):
    """The requested object or collection does not exist."""

    default_code = "not_found"

    def __init__(
        self,
        resource: str,
        identifier: Any = None,
        *,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(message or msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ImmutableCollectionError(DomainError):
    """A write was attempted on a collection configured as immutable."""

    default_code = "immutable_collection"

    def __init__(self, database: str, collection: str, action: str, **kwargs: Any) -> None:
        super().__init__(
            f"Collection {collection} in database {database} is immutable. "
            f"No items may be {action}.",
            detail={"database": database, "collection": collection},
            **kwargs,
        )
        self.database = database
        self.collection = collection


__all__ = [
    "DomainError",
    "ImmutableCollectionError",
    "NotFoundError",
    "ValidationError",
]
