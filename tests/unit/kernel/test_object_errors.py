"""Unit tests for the kernel error hierarchy."""
from __future__ import annotations

import json

import pytest

from object_service.kernel.errors import (
    ApplicationError,
    BaseError,
    ConnectionError,
    DomainError,
    ForbiddenError,
    ImmutableCollectionError,
    InfrastructureError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls, parent",
        [
            (ValidationError, DomainError),
            (NotFoundError, DomainError),
            (ImmutableCollectionError, DomainError),
            (UnauthorizedError, ApplicationError),
            (ForbiddenError, ApplicationError),
            (ConnectionError, InfrastructureError),
            (DomainError, BaseError),
            (ApplicationError, BaseError),
            (InfrastructureError, BaseError),
        ],
    )
    def test_subclassing(self, cls: type, parent: type) -> None:
        assert issubclass(cls, parent)


class TestBaseError:
    def test_default_code_and_detail(self) -> None:
        err = DomainError("boom")
        assert err.code == "domain_error"
        assert err.detail == {}
        assert err.message == "boom"

    def test_code_override(self) -> None:
        assert ValidationError("dup", code="duplicate_key").code == "duplicate_key"

    def test_cause_chained(self) -> None:
        cause = KeyError("x")
        err = InfrastructureError("failed", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == repr(cause)

    def test_str_is_json(self) -> None:
        payload = json.loads(str(NotFoundError("Object", "1", detail={"id": "1"})))
        assert payload == {"code": "not_found", "message": "Object '1' not found", "detail": {"id": "1"}}

    def test_repr(self) -> None:
        assert repr(UnauthorizedError("no")) == "UnauthorizedError(code='unauthorized', message='no')"


class TestSpecificErrors:
    def test_validation_error_lists_errors(self) -> None:
        err = ValidationError("bad", errors=[{"field": "start", "message": "must be >= 0"}])
        assert err.to_dict()["errors"] == [{"field": "start", "message": "must be >= 0"}]

    def test_not_found_message(self) -> None:
        assert NotFoundError("Object", "42").message == "Object '42' not found"
        assert NotFoundError("Collection").message == "Collection not found"
        assert NotFoundError("Object", "1", message="custom").message == "custom"

    def test_immutable_collection_error(self) -> None:
        err = ImmutableCollectionError("audit", "events", "inserted")
        assert err.message == "Collection events in database audit is immutable. No items may be inserted."
        assert err.detail == {"database": "audit", "collection": "events"}

    def test_forbidden_carries_scope(self) -> None:
        err = ForbiddenError(scope="fdns.object.db.col.read")
        assert err.message == "Access denied"
        assert err.scope == "fdns.object.db.col.read"

    def test_connection_error_default_message(self) -> None:
        err = ConnectionError("mongodb")
        assert err.message == "Could not connect to 'mongodb'"
        assert err.resource == "mongodb"
