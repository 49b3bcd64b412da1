"""MongoDB adapter — motor-backed ObjectRepository, extended-JSON codec, health probe."""

from object_service.adapters.mongodb.health import ObjectDatabaseHealthCheck
from object_service.adapters.mongodb.repository import MongoObjectRepository
from object_service.adapters.mongodb.serialization import (
    dumps,
    id_filter,
    parse_document,
    parse_documents,
    parse_filter,
    parse_pipeline,
)

__all__ = [
    "MongoObjectRepository",
    "ObjectDatabaseHealthCheck",
    "dumps",
    "id_filter",
    "parse_document",
    "parse_documents",
    "parse_filter",
    "parse_pipeline",
]
