"""MongoDB adapter — extended-JSON request parsing and response rendering.

Request bodies may use MongoDB extended JSON (``{"$oid": ...}``,
``{"$date": ...}``), so they are parsed with :mod:`bson.json_util` instead
of :mod:`json`.  Responses are rendered in relaxed extended JSON.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId, json_util
from bson.errors import BSONError
from bson.json_util import RELAXED_JSON_OPTIONS

from object_service.kernel.errors import ValidationError

__all__ = [
    "dumps",
    "id_filter",
    "parse_document",
    "parse_documents",
    "parse_filter",
    "parse_pipeline",
]


def _loads(raw: str | bytes, what: str) -> Any:
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json_util.loads(raw)
    except (ValueError, TypeError, BSONError) as exc:
        raise ValidationError(f"Malformed {what}: {exc}", cause=exc) from exc


def parse_document(raw: str | bytes) -> dict[str, Any]:
    """Parse a single JSON object."""
    value = _loads(raw, "JSON document")
    if not isinstance(value, dict):
        raise ValidationError("Expected a JSON object")
    return value


def parse_documents(raw: str | bytes) -> list[dict[str, Any]]:
    """Parse a JSON array of objects (multi insert payload)."""
    value = _loads(raw, "JSON array")
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise ValidationError("Expected a JSON array of objects")
    return value


def parse_filter(raw: str | bytes | None) -> dict[str, Any]:
    """Parse a find expression; an empty body matches everything."""
    if raw is None or not raw.strip():
        return {}
    value = _loads(raw, "find expression")
    if not isinstance(value, dict):
        raise ValidationError("A find expression must be a JSON object")
    return value


def parse_pipeline(raw: str | bytes) -> list[dict[str, Any]]:
    """Parse an aggregation pipeline: a JSON array of stage objects."""
    value = _loads(raw, "aggregation pipeline")
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise ValidationError("An aggregation pipeline must be a JSON array of stage objects")
    return value


def dumps(value: Any) -> str:
    """Render *value* as relaxed extended JSON (ObjectId → ``{"$oid": ...}``)."""
    return json_util.dumps(value, json_options=RELAXED_JSON_OPTIONS)


def id_filter(object_id: Any) -> dict[str, Any]:
    """Filter matching ``_id``; a 24-hex string matches the ObjectId or the string."""
    if isinstance(object_id, str) and len(object_id) == 24 and ObjectId.is_valid(object_id):
        return {"_id": {"$in": [ObjectId(object_id), object_id]}}
    return {"_id": object_id}
