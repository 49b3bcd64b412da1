"""FastAPI adapter – BsonJSONResponse."""
from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from object_service.adapters.mongodb.serialization import dumps


class BsonJSONResponse(JSONResponse):
    """JSON response rendered with MongoDB relaxed extended JSON.

    Stored documents may hold ObjectIds, datetimes or Decimal128 values that
    the standard encoder cannot serialise.
    """

    def render(self, content: Any) -> bytes:
        return dumps(content).encode("utf-8")


__all__ = ["BsonJSONResponse"]
