"""Application objects – ObjectRepository port.

The HTTP layer only talks to this interface; the motor-backed
implementation lives in :mod:`object_service.adapters.mongodb` and an
in-memory fake in :mod:`object_service.testing.fakes`.
"""
from __future__ import annotations

import abc
from collections.abc import Mapping, Sequence
from typing import Any

from object_service.application.objects.options import FindOptions

Document = dict[str, Any]


class ObjectRepository(abc.ABC):
    """Schemaless document storage addressed by database and collection name.

    Implementations raise kernel errors only: ``ValidationError`` for bad
    input or rejected writes, ``ImmutableCollectionError`` for writes to
    immutable collections, ``ConnectionError`` when the store is unreachable.
    """

    @abc.abstractmethod
    async def get(self, database: str, collection: str, object_id: Any) -> Document | None:
        """Return the document whose ``_id`` matches, or ``None``."""

    @abc.abstractmethod
    async def get_all(self, database: str, collection: str) -> list[Document]: ...

    @abc.abstractmethod
    async def insert(
        self,
        database: str,
        collection: str,
        object_id: Any | None,
        document: Mapping[str, Any],
    ) -> Document:
        """Insert *document* and return it as stored.

        A non-``None`` *object_id* overwrites any ``_id`` in the payload.
        """

    @abc.abstractmethod
    async def insert_many(
        self,
        database: str,
        collection: str,
        documents: Sequence[Mapping[str, Any]],
    ) -> list[str]:
        """Insert all *documents*; return their ids as strings, in order."""

    @abc.abstractmethod
    async def replace(
        self,
        database: str,
        collection: str,
        object_id: Any,
        document: Mapping[str, Any],
    ) -> Document | None:
        """Replace the document with ``_id`` *object_id*; ``None`` when absent."""

    @abc.abstractmethod
    async def delete(self, database: str, collection: str, object_id: Any) -> bool: ...

    @abc.abstractmethod
    async def delete_collection(self, database: str, collection: str) -> bool: ...

    @abc.abstractmethod
    async def collection_exists(self, database: str, collection: str) -> bool: ...

    @abc.abstractmethod
    async def find(
        self,
        database: str,
        collection: str,
        filter: Mapping[str, Any],
        options: FindOptions | None = None,
    ) -> list[Document]: ...

    @abc.abstractmethod
    async def count(self, database: str, collection: str, filter: Mapping[str, Any]) -> int: ...

    @abc.abstractmethod
    async def distinct(
        self,
        database: str,
        collection: str,
        field: str,
        filter: Mapping[str, Any] | None = None,
    ) -> list[Any]: ...

    @abc.abstractmethod
    async def aggregate(
        self,
        database: str,
        collection: str,
        pipeline: Sequence[Mapping[str, Any]],
    ) -> list[Document]: ...

    @abc.abstractmethod
    async def ping(self) -> bool:
        """Return ``True`` when the store answers; never raises."""


__all__ = ["Document", "ObjectRepository"]
