from __future__ import annotations

from collections.abc import Awaitable, Callable

import httpx

from object_service.observability.health.check import HealthCheck, HealthStatus

__all__ = ["HttpEndpointHealthCheck", "LambdaHealthCheck"]


class LambdaHealthCheck(HealthCheck):
    """Simple health check backed by a callable, useful in tests."""

    def __init__(self, name_: str, fn: Callable[[], Awaitable[HealthStatus]]) -> None:
        self._name = name_
        self._fn = fn

    @property
    def name(self) -> str:
        return self._name

    async def check(self) -> HealthStatus:
        return await self._fn()


class HttpEndpointHealthCheck(HealthCheck):
    """Checks an upstream HTTP endpoint (e.g. the token verifier) with a GET."""

    def __init__(
        self,
        url: str,
        expected_status: int = 200,
        timeout: float = 5.0,
        name: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._expected = expected_status
        self._timeout = timeout
        self._name = name or f"http:{url}"
        self._transport = transport

    @property
    def name(self) -> str:
        return self._name

    async def check(self) -> HealthStatus:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(self._url)
        except httpx.HTTPError as exc:
            return HealthStatus(healthy=False, detail=f"{type(exc).__name__}: {exc}")
        if resp.status_code == self._expected:
            return HealthStatus(healthy=True)
        return HealthStatus(healthy=False, detail=f"status={resp.status_code}")
