"""Testing fakes – InMemoryObjectRepository.

Evaluates the filter subset the search compiler produces (equality,
``$gt``/``$gte``/``$lt``/``$lte``/``$ne``) plus ``$in``/``$nin``/``$exists``,
``$and``/``$or``, and a minimal aggregation pipeline
(``$match``/``$sort``/``$skip``/``$limit``/``$count``).
"""
from __future__ import annotations

import copy
import datetime as dt
from collections.abc import Mapping, Sequence
from typing import Any

from bson import ObjectId

from object_service.application.objects import (
    Document,
    FindOptions,
    ImmutableCollections,
    ObjectRepository,
    SortDirection,
)
from object_service.kernel.errors import ValidationError

_MISSING = object()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _comparable(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return True
    return type(left) is type(right) and not isinstance(left, bool)


def _lookup(document: Mapping[str, Any], path: str) -> Any:
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _value_matches(value: Any, expected: Any) -> bool:
    if isinstance(value, list):
        return any(_equals(v, expected) for v in value) or _equals(value, expected)
    return _equals(value, expected)


def _operator_matches(value: Any, op: str, operand: Any) -> bool:  # noqa: PLR0911
    if op == "$eq":
        return value is not _MISSING and _value_matches(value, operand)
    if op == "$ne":
        return value is _MISSING or not _value_matches(value, operand)
    if op == "$in":
        return value is not _MISSING and any(_value_matches(value, o) for o in operand)
    if op == "$nin":
        return value is _MISSING or not any(_value_matches(value, o) for o in operand)
    if op == "$exists":
        return (value is not _MISSING) == bool(operand)
    if op in ("$gt", "$gte", "$lt", "$lte"):
        if value is _MISSING or not _comparable(value, operand):
            return False
        if op == "$gt":
            return value > operand
        if op == "$gte":
            return value >= operand
        if op == "$lt":
            return value < operand
        return value <= operand
    raise ValidationError(f"Unsupported query operator {op!r}")


def matches(document: Mapping[str, Any], filter: Mapping[str, Any]) -> bool:
    """Return ``True`` when *document* satisfies *filter*."""
    for key, condition in filter.items():
        if key == "$and":
            if not all(matches(document, sub) for sub in condition):
                return False
            continue
        if key == "$or":
            if not any(matches(document, sub) for sub in condition):
                return False
            continue
        value = _lookup(document, key)
        if isinstance(condition, Mapping) and condition and all(k.startswith("$") for k in condition):
            if not all(_operator_matches(value, op, operand) for op, operand in condition.items()):
                return False
        elif value is _MISSING or not _value_matches(value, condition):
            return False
    return True


# BSON comparison order: null < numbers < strings < objects < arrays
# < binary < ObjectId < booleans < dates < anything else.
def _type_rank(value: Any) -> int:
    if value is _MISSING or value is None:
        return 0
    if isinstance(value, bool):
        return 7
    if _is_number(value):
        return 1
    if isinstance(value, str):
        return 2
    if isinstance(value, Mapping):
        return 3
    if isinstance(value, list):
        return 4
    if isinstance(value, bytes):
        return 5
    if isinstance(value, ObjectId):
        return 6
    if isinstance(value, dt.datetime):
        return 8
    return 9


def _sort_key(field: str) -> Any:
    def key(document: Mapping[str, Any]) -> tuple[int, Any]:
        value = _lookup(document, field)
        rank = _type_rank(value)
        if rank == 0:
            return (rank, 0)
        if rank in (3, 4, 9):
            return (rank, repr(value))
        return (rank, value)

    return key


class InMemoryObjectRepository(ObjectRepository):
    """Dict-backed object repository for tests.

    Documents are deep-copied on the way in and out, so callers never share
    state with the store.
    """

    def __init__(self, immutable: ImmutableCollections | None = None) -> None:
        self._collections: dict[tuple[str, str], dict[Any, Document]] = {}
        self._immutable = immutable or ImmutableCollections()
        self.available = True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require(database: str, collection: str) -> None:
        if not database or not collection:
            raise ValidationError("database and collection must not be empty")

    def _docs(self, database: str, collection: str) -> dict[Any, Document]:
        self._require(database, collection)
        return self._collections.get((database, collection), {})

    def _key_for(self, database: str, collection: str, object_id: Any) -> Any:
        docs = self._docs(database, collection)
        if object_id in docs:
            return object_id
        if isinstance(object_id, str) and len(object_id) == 24 and ObjectId.is_valid(object_id):
            oid = ObjectId(object_id)
            if oid in docs:
                return oid
        return _MISSING

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, database: str, collection: str, object_id: Any) -> Document | None:
        key = self._key_for(database, collection, object_id)
        if key is _MISSING:
            return None
        return copy.deepcopy(self._docs(database, collection)[key])

    async def get_all(self, database: str, collection: str) -> list[Document]:
        return copy.deepcopy(list(self._docs(database, collection).values()))

    async def find(
        self,
        database: str,
        collection: str,
        filter: Mapping[str, Any],
        options: FindOptions | None = None,
    ) -> list[Document]:
        options = options or FindOptions()
        found = [d for d in self._docs(database, collection).values() if matches(d, filter)]
        if options.sort_field:
            found.sort(
                key=_sort_key(options.sort_field),
                reverse=options.sort_direction is SortDirection.DESC,
            )
        found = found[options.start:]
        if options.has_limit:
            found = found[: options.limit]
        return copy.deepcopy(found)

    async def count(self, database: str, collection: str, filter: Mapping[str, Any]) -> int:
        return sum(1 for d in self._docs(database, collection).values() if matches(d, filter))

    async def distinct(
        self,
        database: str,
        collection: str,
        field: str,
        filter: Mapping[str, Any] | None = None,
    ) -> list[Any]:
        values: list[Any] = []
        for document in self._docs(database, collection).values():
            if not matches(document, filter or {}):
                continue
            value = _lookup(document, field)
            if value is _MISSING:
                continue
            for item in value if isinstance(value, list) else [value]:
                if not any(_equals(item, seen) for seen in values):
                    values.append(item)
        return copy.deepcopy(values)

    async def aggregate(
        self,
        database: str,
        collection: str,
        pipeline: Sequence[Mapping[str, Any]],
    ) -> list[Document]:
        documents = list(self._docs(database, collection).values())
        for stage in pipeline:
            if len(stage) != 1:
                raise ValidationError("A pipeline stage must have exactly one operator")
            (name, spec), = stage.items()
            if name == "$match":
                documents = [d for d in documents if matches(d, spec)]
            elif name == "$sort":
                for field, direction in reversed(list(spec.items())):
                    documents.sort(key=_sort_key(field), reverse=direction == -1)
            elif name == "$skip":
                documents = documents[int(spec):]
            elif name == "$limit":
                documents = documents[: int(spec)]
            elif name == "$count":
                documents = [{spec: len(documents)}]
            else:
                raise ValidationError(f"Unsupported pipeline stage {name!r}")
        return copy.deepcopy(documents)

    async def collection_exists(self, database: str, collection: str) -> bool:
        self._require(database, collection)
        return (database, collection) in self._collections

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _store(self, database: str, collection: str, document: Document) -> Document:
        docs = self._collections.setdefault((database, collection), {})
        if document["_id"] in docs:
            raise ValidationError(
                f"An object with this id already exists in {database}/{collection}",
                code="duplicate_key",
            )
        docs[document["_id"]] = document
        return document

    async def insert(
        self,
        database: str,
        collection: str,
        object_id: Any | None,
        document: Mapping[str, Any],
    ) -> Document:
        self._require(database, collection)
        self._immutable.check(database, collection, "insert")
        payload = copy.deepcopy(dict(document))
        if object_id is not None:
            payload["_id"] = object_id
        payload.setdefault("_id", ObjectId())
        return copy.deepcopy(self._store(database, collection, payload))

    async def insert_many(
        self,
        database: str,
        collection: str,
        documents: Sequence[Mapping[str, Any]],
    ) -> list[str]:
        self._require(database, collection)
        self._immutable.check(database, collection, "insert")
        if not documents:
            raise ValidationError("No objects to insert")
        ids: list[str] = []
        for document in documents:
            payload = copy.deepcopy(dict(document))
            payload.setdefault("_id", ObjectId())
            ids.append(str(self._store(database, collection, payload)["_id"]))
        return ids

    async def replace(
        self,
        database: str,
        collection: str,
        object_id: Any,
        document: Mapping[str, Any],
    ) -> Document | None:
        self._require(database, collection)
        self._immutable.check(database, collection, "replace")
        key = self._key_for(database, collection, object_id)
        if key is _MISSING:
            return None
        payload = copy.deepcopy(dict(document))
        payload["_id"] = key
        self._collections[(database, collection)][key] = payload
        return copy.deepcopy(payload)

    async def delete(self, database: str, collection: str, object_id: Any) -> bool:
        self._require(database, collection)
        self._immutable.check(database, collection, "delete")
        key = self._key_for(database, collection, object_id)
        if key is _MISSING:
            return False
        del self._collections[(database, collection)][key]
        return True

    async def delete_collection(self, database: str, collection: str) -> bool:
        self._require(database, collection)
        self._immutable.check(database, collection, "delete")
        return self._collections.pop((database, collection), None) is not None

    async def ping(self) -> bool:
        return self.available


__all__ = ["InMemoryObjectRepository", "matches"]
