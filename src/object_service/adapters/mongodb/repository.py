"""MongoDB adapter — MongoObjectRepository.

Every operation addresses ``client[database][collection]`` directly, so
databases and collections spring into existence on first insert, as
MongoDB itself does.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    OperationFailure,
    PyMongoError,
)

from object_service.adapters.mongodb.serialization import id_filter
from object_service.application.objects import (
    Document,
    FindOptions,
    ImmutableCollections,
    ObjectRepository,
)
from object_service.kernel.errors import (
    BaseError,
    ConnectionError,
    InfrastructureError,
    ValidationError,
)
from object_service.observability.logging import get_logger

_log = get_logger(__name__)


def _require_name(label: str, value: str) -> str:
    if not value or not value.strip():
        raise ValidationError(
            f"{label} must not be empty",
            errors=[{"field": label, "message": "must not be empty"}],
        )
    return value


class MongoObjectRepository(ObjectRepository):
    """:class:`ObjectRepository` backed by a motor ``AsyncIOMotorClient``.

    Usage::

        client = AsyncIOMotorClient("mongodb://localhost:27017")
        repo = MongoObjectRepository(client, ImmutableCollections.parse("audit/events"))
        await repo.insert("bookstore", "books", "1", {"title": "Dune"})
    """

    def __init__(self, client: Any, immutable: ImmutableCollections | None = None) -> None:
        self._client = client
        self._immutable = immutable or ImmutableCollections()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _collection(self, database: str, collection: str) -> Any:
        _require_name("database", database)
        _require_name("collection", collection)
        return self._client[database][collection]

    @contextlib.contextmanager
    def _failures(self, operation: str, database: str, collection: str, object_id: Any = None) -> Iterator[None]:
        """Log failures and translate driver exceptions into kernel errors."""
        target = f"{database}/{collection}"
        if object_id is not None:
            target = f"{target}/{object_id}"
        try:
            yield
        except BaseError:
            _log.error(f"{operation} failed on {target}", exc_info=True)
            raise
        except DuplicateKeyError as exc:
            _log.error(f"{operation} failed on {target}", exc_info=True)
            raise ValidationError(
                f"An object with this id already exists in {database}/{collection}",
                code="duplicate_key",
                cause=exc,
            ) from exc
        except OperationFailure as exc:
            _log.error(f"{operation} failed on {target}", exc_info=True)
            raise ValidationError(str(exc), code="operation_failure", cause=exc) from exc
        except ConnectionFailure as exc:
            _log.error(f"{operation} failed on {target}", exc_info=True)
            raise ConnectionError("mongodb", f"MongoDB is unreachable: {exc}", cause=exc) from exc
        except PyMongoError as exc:
            _log.error(f"{operation} failed on {target}", exc_info=True)
            raise InfrastructureError(str(exc), cause=exc) from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, database: str, collection: str, object_id: Any) -> Document | None:
        with self._failures("Get", database, collection, object_id):
            col = self._collection(database, collection)
            return await col.find_one(id_filter(object_id))

    async def get_all(self, database: str, collection: str) -> list[Document]:
        with self._failures("Get all", database, collection):
            col = self._collection(database, collection)
            return await col.find({}).to_list(length=None)

    async def find(
        self,
        database: str,
        collection: str,
        filter: Mapping[str, Any],
        options: FindOptions | None = None,
    ) -> list[Document]:
        options = options or FindOptions()
        with self._failures("Find", database, collection):
            col = self._collection(database, collection)
            cursor = col.find(dict(filter)).skip(options.start)
            if options.has_limit:
                cursor = cursor.limit(options.limit)
            if options.sort_field:
                cursor = cursor.sort(options.sort_field, options.sort_direction.pymongo)
            return await cursor.to_list(length=None)

    async def count(self, database: str, collection: str, filter: Mapping[str, Any]) -> int:
        with self._failures("Count", database, collection):
            col = self._collection(database, collection)
            return await col.count_documents(dict(filter))

    async def distinct(
        self,
        database: str,
        collection: str,
        field: str,
        filter: Mapping[str, Any] | None = None,
    ) -> list[Any]:
        with self._failures("Distinct", database, collection):
            _require_name("field", field)
            col = self._collection(database, collection)
            return await col.distinct(field, dict(filter or {}))

    async def aggregate(
        self,
        database: str,
        collection: str,
        pipeline: Sequence[Mapping[str, Any]],
    ) -> list[Document]:
        with self._failures("Aggregate", database, collection):
            col = self._collection(database, collection)
            return await col.aggregate([dict(stage) for stage in pipeline]).to_list(length=None)

    async def collection_exists(self, database: str, collection: str) -> bool:
        with self._failures("Collection lookup", database, collection):
            _require_name("database", database)
            _require_name("collection", collection)
            names = await self._client[database].list_collection_names(filter={"name": collection})
            return collection in names

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(
        self,
        database: str,
        collection: str,
        object_id: Any | None,
        document: Mapping[str, Any],
    ) -> Document:
        with self._failures("Insert", database, collection, object_id):
            self._immutable.check(database, collection, "insert")
            col = self._collection(database, collection)
            payload = dict(document)
            if object_id is not None:
                payload["_id"] = object_id
            result = await col.insert_one(payload)
            stored = await col.find_one({"_id": result.inserted_id})
            return stored if stored is not None else payload

    async def insert_many(
        self,
        database: str,
        collection: str,
        documents: Sequence[Mapping[str, Any]],
    ) -> list[str]:
        with self._failures("Insert many", database, collection):
            self._immutable.check(database, collection, "insert")
            if not documents:
                raise ValidationError("No objects to insert")
            col = self._collection(database, collection)
            result = await col.insert_many([dict(d) for d in documents], ordered=True)
            return [str(i) for i in result.inserted_ids]

    async def replace(
        self,
        database: str,
        collection: str,
        object_id: Any,
        document: Mapping[str, Any],
    ) -> Document | None:
        with self._failures("Update", database, collection, object_id):
            self._immutable.check(database, collection, "replace")
            col = self._collection(database, collection)
            existing = await col.find_one(id_filter(object_id), projection={"_id": 1})
            if existing is None:
                return None
            stored_id = existing["_id"]
            payload = dict(document)
            payload["_id"] = stored_id
            result = await col.replace_one({"_id": stored_id}, payload)
            if result.matched_count == 0:
                return None
            return await col.find_one({"_id": stored_id})

    async def delete(self, database: str, collection: str, object_id: Any) -> bool:
        with self._failures("Delete", database, collection, object_id):
            self._immutable.check(database, collection, "delete")
            col = self._collection(database, collection)
            result = await col.delete_one(id_filter(object_id))
            return result.deleted_count == 1

    async def delete_collection(self, database: str, collection: str) -> bool:
        with self._failures("Delete collection", database, collection):
            self._immutable.check(database, collection, "delete")
            if not await self.collection_exists(database, collection):
                return False
            await self._client[database].drop_collection(collection)
            return True

    # ------------------------------------------------------------------
    # Connectivity
    # ------------------------------------------------------------------

    async def ping(self) -> bool:
        try:
            await self._client.admin.command("ping")
        except PyMongoError:
            _log.warning("mongodb_ping_failed", exc_info=True)
            return False
        return True


__all__ = ["MongoObjectRepository"]
