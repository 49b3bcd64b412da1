"""FastAPI adapter – object routes under ``/api/1.0``.

Registration order matters: the literal segments (``multi``, ``bulk``,
``find``, ``search`` …) are registered before the generic ``{id}`` routes
so they are never captured as an object id.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile

from object_service.adapters.fastapi.deps import (
    CompilerDep,
    FindOptionsDep,
    RepositoryDep,
    ResponseFormat,
    error_responses,
    require_scope,
)
from object_service.adapters.fastapi.responses import BsonJSONResponse
from object_service.adapters.mongodb.serialization import (
    parse_document,
    parse_documents,
    parse_filter,
    parse_pipeline,
)
from object_service.application.objects import rows_from_csv
from object_service.kernel.errors import NotFoundError, ValidationError
from object_service.kernel.security import ScopeAction
from object_service.observability.logging import get_logger

_log = get_logger(__name__)

API_PREFIX = "/api/1.0"

_read = Depends(require_scope(ScopeAction.READ))
_insert = Depends(require_scope(ScopeAction.INSERT))
_update = Depends(require_scope(ScopeAction.UPDATE))
_delete = Depends(require_scope(ScopeAction.DELETE))


def _object_not_found(object_id: str, collection: str) -> NotFoundError:
    return NotFoundError(
        "Object",
        object_id,
        message=f"Object with id '{object_id}' could not be found in collection '{collection}'",
        detail={"id": object_id, "collection": collection},
    )


def _collection_not_found(collection: str) -> NotFoundError:
    return NotFoundError(
        "Collection",
        collection,
        message=f"Collection '{collection}' could not be found",
        detail={"collection": collection},
    )


def _summary(verb: str, ids: list[str]) -> dict[str, Any]:
    return {verb: len(ids), "ids": ids}


def _document_id(document: dict[str, Any]) -> str:
    return str(document.get("_id", ""))


def ObjectRouter() -> APIRouter:
    """Return the object CRUD, query and aggregation router."""
    router = APIRouter(
        prefix=API_PREFIX,
        tags=["objects"],
        default_response_class=BsonJSONResponse,
        responses=error_responses(400, 401, 403),
    )

    # ------------------------------------------------------------------
    # Multi-object inserts
    # ------------------------------------------------------------------

    @router.post("/multi/{db}/{collection}", dependencies=[_insert])
    async def insert_many_objects(
        db: str, collection: str, request: Request, repository: RepositoryDep
    ) -> Any:
        """Insert every object of a JSON array; returns the count and generated ids."""
        documents = parse_documents(await request.body())
        ids = await repository.insert_many(db, collection, documents)
        return BsonJSONResponse(_summary("inserted", ids))

    @router.post("/bulk/{db}/{collection}", dependencies=[_insert])
    async def insert_objects_from_csv(
        db: str,
        collection: str,
        repository: RepositoryDep,
        csv: UploadFile = File(..., description="CSV file whose first line is the header"),
    ) -> Any:
        """Insert one object per CSV row; every value is stored as a string."""
        content = await csv.read()
        if not content:
            raise ValidationError("Csv file has no data")
        rows = rows_from_csv(content)
        ids = await repository.insert_many(db, collection, rows)
        return BsonJSONResponse(_summary("inserted", ids))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @router.post("/{db}/{collection}/find", dependencies=[_read])
    async def find_objects(
        db: str,
        collection: str,
        request: Request,
        repository: RepositoryDep,
        options: FindOptionsDep,
    ) -> Any:
        """Find with a MongoDB find expression sent as the raw request body."""
        find_filter = parse_filter(await request.body())
        return BsonJSONResponse(await repository.find(db, collection, find_filter, options))

    @router.get("/{db}/{collection}/search", dependencies=[_read])
    async def search_objects(
        db: str,
        collection: str,
        repository: RepositoryDep,
        compiler: CompilerDep,
        options: FindOptionsDep,
        qs: str | None = Query(default=None, description="Search string, e.g. 'status:A weight>=50'"),
    ) -> Any:
        """Find with a plain-text search string compiled into a MongoDB filter."""
        result = compiler.compile_with_diagnostics(qs)
        if not result.ok:
            _log.debug(
                "search_string_partially_compiled",
                db=db,
                collection=collection,
                skipped=[s.term for s in result.skipped if s.term],
            )
        documents = await repository.find(db, collection, result.filter.to_mongo(), options)
        return BsonJSONResponse(documents)

    @router.post("/{db}/{collection}/count", dependencies=[_read])
    async def count_objects(
        db: str, collection: str, request: Request, repository: RepositoryDep
    ) -> Any:
        """Count the objects matching the find expression in the request body."""
        count_filter = parse_filter(await request.body())
        return BsonJSONResponse(await repository.count(db, collection, count_filter))

    @router.post("/{db}/{collection}/distinct/{field}", dependencies=[_read])
    async def distinct_values(
        db: str, collection: str, field: str, request: Request, repository: RepositoryDep
    ) -> Any:
        """Distinct values of *field*, optionally filtered by the request body."""
        distinct_filter = parse_filter(await request.body())
        return BsonJSONResponse(await repository.distinct(db, collection, field, distinct_filter))

    @router.post("/{db}/{collection}/aggregate", dependencies=[_read])
    async def aggregate_objects(
        db: str, collection: str, request: Request, repository: RepositoryDep
    ) -> Any:
        """Run an aggregation pipeline (JSON array of stages) from the request body."""
        pipeline = parse_pipeline(await request.body())
        return BsonJSONResponse(await repository.aggregate(db, collection, pipeline))

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    @router.get("/{db}/{collection}", dependencies=[_read], responses=error_responses(404))
    async def get_all_objects(db: str, collection: str, repository: RepositoryDep) -> Any:
        if not await repository.collection_exists(db, collection):
            raise _collection_not_found(collection)
        return BsonJSONResponse(await repository.get_all(db, collection))

    @router.post("/{db}/{collection}", status_code=201, dependencies=[_insert])
    async def insert_object_without_id(
        db: str,
        collection: str,
        request: Request,
        repository: RepositoryDep,
        response_format: int = Query(default=ResponseFormat.ENTIRE_OBJECT, ge=0, le=1),
    ) -> Any:
        """Insert an object; its id comes from the payload or is generated."""
        document = parse_document(await request.body())
        stored = await repository.insert(db, collection, None, document)
        object_id = _document_id(stored)
        content: Any = stored
        if response_format == ResponseFormat.ONLY_ID:
            content = _summary("inserted", [object_id])
        location = request.url_for("get_object", db=db, collection=collection, id=object_id)
        return BsonJSONResponse(content, status_code=201, headers={"Location": str(location)})

    @router.delete("/{db}/{collection}", dependencies=[_delete], responses=error_responses(404))
    async def delete_collection(db: str, collection: str, repository: RepositoryDep) -> Response:
        if not await repository.collection_exists(db, collection):
            raise _collection_not_found(collection)
        if not await repository.delete_collection(db, collection):
            raise _collection_not_found(collection)
        return Response(status_code=200)

    # ------------------------------------------------------------------
    # Single objects
    # ------------------------------------------------------------------

    @router.get("/{db}/{collection}/{id}", dependencies=[_read], responses=error_responses(404))
    async def get_object(db: str, collection: str, id: str, repository: RepositoryDep) -> Any:  # noqa: A002
        document = await repository.get(db, collection, id)
        if document is None:
            raise _object_not_found(id, collection)
        return BsonJSONResponse(document)

    @router.post("/{db}/{collection}/{id}", status_code=201, dependencies=[_insert])
    async def insert_object(
        db: str,
        collection: str,
        id: str,  # noqa: A002
        request: Request,
        repository: RepositoryDep,
        response_format: int = Query(default=ResponseFormat.ENTIRE_OBJECT, ge=0, le=1),
    ) -> Any:
        """Insert an object under the route id, overwriting any ``_id`` in the payload."""
        document = parse_document(await request.body())
        stored = await repository.insert(db, collection, id, document)
        content: Any = stored
        if response_format == ResponseFormat.ONLY_ID:
            content = _summary("inserted", [id])
        location = request.url_for("get_object", db=db, collection=collection, id=id)
        return BsonJSONResponse(content, status_code=201, headers={"Location": str(location)})

    @router.put("/{db}/{collection}/{id}", dependencies=[_update], responses=error_responses(404))
    async def replace_object(
        db: str,
        collection: str,
        id: str,  # noqa: A002
        request: Request,
        repository: RepositoryDep,
        response_format: int = Query(default=ResponseFormat.ENTIRE_OBJECT, ge=0, le=1),
    ) -> Any:
        """Replace the object stored under the route id."""
        document = parse_document(await request.body())
        stored = await repository.replace(db, collection, id, document)
        if stored is None:
            raise _object_not_found(id, collection)
        if response_format == ResponseFormat.ONLY_ID:
            return BsonJSONResponse(_summary("updated", [_document_id(stored)]))
        return BsonJSONResponse(stored)

    @router.delete("/{db}/{collection}/{id}", dependencies=[_delete], responses=error_responses(404))
    async def delete_object(db: str, collection: str, id: str, repository: RepositoryDep) -> Response:  # noqa: A002
        if not await repository.delete(db, collection, id):
            raise _object_not_found(id, collection)
        return Response(status_code=200)

    return router


__all__ = ["API_PREFIX", "ObjectRouter"]
