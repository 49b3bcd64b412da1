"""MongoDB adapter — round-trip health probe for the object database."""

from __future__ import annotations

import asyncio
import time

from object_service.application.objects import ObjectRepository
from object_service.observability.health import HealthCheck, HealthStatus

__all__ = ["ObjectDatabaseHealthCheck"]

_PROBE_ID = 1
_PROBE_DOCUMENT = {"name": "the nameless ones"}


class ObjectDatabaseHealthCheck(HealthCheck):
    """Deletes, inserts and reads back probe object ``1`` in a dedicated collection.

    The check is *degraded* when the round trip exceeds
    ``degradation_ms`` and *unhealthy* when it raises or exceeds
    ``timeout_ms``.
    """

    def __init__(
        self,
        repository: ObjectRepository,
        database: str = "_healthcheckdatabase_",
        collection: str = "_healthcheckcollection_",
        degradation_ms: int = 1000,
        timeout_ms: int = 2000,
        description: str = "Object database",
    ) -> None:
        if not database or not collection:
            raise ValueError("database and collection must not be empty")
        if degradation_ms < 0 or timeout_ms < 0:
            raise ValueError("thresholds must not be negative")
        if timeout_ms < degradation_ms:
            raise ValueError("timeout_ms cannot be less than degradation_ms")
        self._repository = repository
        self._database = database
        self._collection = collection
        self._degradation_ms = degradation_ms
        self._timeout_ms = timeout_ms
        self._description = description

    @property
    def name(self) -> str:
        return "object_database"

    async def _probe(self) -> None:
        await self._repository.delete(self._database, self._collection, _PROBE_ID)
        await self._repository.insert(self._database, self._collection, _PROBE_ID, _PROBE_DOCUMENT)
        await self._repository.get(self._database, self._collection, _PROBE_ID)

    async def check(self) -> HealthStatus:
        start = time.monotonic()
        try:
            await asyncio.wait_for(self._probe(), timeout=self._timeout_ms / 1000)
        except asyncio.TimeoutError:
            return HealthStatus(
                healthy=False,
                detail=f"{self._description} check timed out after {self._timeout_ms} milliseconds",
            )
        except Exception as exc:  # noqa: BLE001
            return HealthStatus(
                healthy=False,
                detail=f"{self._description} check failed due to {type(exc).__name__}",
            )
        elapsed = (time.monotonic() - start) * 1000
        if elapsed > self._degradation_ms:
            return HealthStatus(
                healthy=True,
                degraded=True,
                detail=f"{self._description} check took more than {self._degradation_ms} milliseconds",
            )
        return HealthStatus(
            healthy=True,
            detail=f"{self._description} check completed in {elapsed:.0f} milliseconds",
        )
