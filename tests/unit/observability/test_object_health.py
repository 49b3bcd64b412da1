"""Unit tests for health checks, the health registry and the database probe."""
from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from object_service.adapters.mongodb import ObjectDatabaseHealthCheck
from object_service.observability.health import (
    HealthCheck,
    HealthRegistry,
    HealthReport,
    HealthStatus,
    HttpEndpointHealthCheck,
    LambdaHealthCheck,
)
from object_service.testing.fakes import InMemoryObjectRepository


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


async def _healthy() -> HealthStatus:
    return HealthStatus(healthy=True, detail="all good")


async def _degraded() -> HealthStatus:
    return HealthStatus(healthy=True, degraded=True, detail="slow")


async def _unhealthy() -> HealthStatus:
    return HealthStatus(healthy=False, detail="down")


class _BoomCheck(HealthCheck):
    @property
    def name(self) -> str:
        return "boom"

    async def check(self) -> HealthStatus:
        raise RuntimeError("unexpected crash")


class _SlowRepository(InMemoryObjectRepository):
    def __init__(self, delay: float) -> None:
        super().__init__()
        self._delay = delay

    async def delete(self, database: str, collection: str, object_id: Any) -> bool:
        await asyncio.sleep(self._delay)
        return await super().delete(database, collection, object_id)


class _BrokenRepository(InMemoryObjectRepository):
    async def insert(self, *args: Any, **kwargs: Any) -> Any:
        raise RuntimeError("write refused")


# ---------------------------------------------------------------------------
# HealthStatus / HealthReport / HealthRegistry
# ---------------------------------------------------------------------------


class TestHealthStatus:
    def test_states(self) -> None:
        assert HealthStatus(healthy=True).state == "healthy"
        assert HealthStatus(healthy=True, degraded=True).state == "degraded"
        assert HealthStatus(healthy=False, degraded=True).state == "unhealthy"


class TestHealthRegistry:
    def test_all_healthy(self) -> None:
        registry = HealthRegistry()
        registry.register(LambdaHealthCheck("a", _healthy))
        report = _run(registry.run_all())
        assert report.overall is True
        assert report.status == "healthy"

    def test_degraded_is_still_overall_healthy(self) -> None:
        registry = HealthRegistry()
        registry.register(LambdaHealthCheck("a", _healthy))
        registry.register(LambdaHealthCheck("b", _degraded))
        report = _run(registry.run_all())
        assert report.overall is True
        assert report.status == "degraded"

    def test_unhealthy_wins_over_degraded(self) -> None:
        registry = HealthRegistry()
        registry.register(LambdaHealthCheck("b", _degraded))
        registry.register(LambdaHealthCheck("c", _unhealthy))
        assert _run(registry.run_all()).status == "unhealthy"

    def test_exception_captured_as_failure(self) -> None:
        registry = HealthRegistry()
        registry.register(_BoomCheck())
        report = _run(registry.run_all())
        assert report.overall is False
        assert "unexpected crash" in (report.results["boom"].detail or "")

    def test_checks_returns_copy(self) -> None:
        registry = HealthRegistry()
        registry.register(LambdaHealthCheck("a", _healthy))
        registry.checks.clear()
        assert len(registry.checks) == 1

    def test_register_replaces_check_with_same_name(self) -> None:
        registry = HealthRegistry()
        registry.register(LambdaHealthCheck("db", _unhealthy))
        registry.register(LambdaHealthCheck("other", _healthy))
        registry.register(LambdaHealthCheck("db", _healthy))
        assert [c.name for c in registry.checks] == ["other", "db"]
        assert _run(registry.run_all()).overall is True

    def test_report_to_dict(self) -> None:
        report = HealthReport(results={"db": HealthStatus(healthy=True, detail="ok", latency_ms=1.234)})
        assert report.to_dict() == {
            "status": "healthy",
            "healthy": True,
            "checks": {"db": {"status": "healthy", "detail": "ok", "latency_ms": 1.23}},
        }

    def test_empty_registry_is_healthy(self) -> None:
        assert _run(HealthRegistry().run_all()).overall is True


# ---------------------------------------------------------------------------
# HttpEndpointHealthCheck
# ---------------------------------------------------------------------------


class TestHttpEndpointHealthCheck:
    def _transport(self, status: int) -> httpx.MockTransport:
        return httpx.MockTransport(lambda request: httpx.Response(status))

    def test_expected_status_is_healthy(self) -> None:
        check = HttpEndpointHealthCheck("http://tokens/ready", transport=self._transport(200))
        assert _run(check.check()).healthy is True

    def test_unexpected_status_is_unhealthy(self) -> None:
        check = HttpEndpointHealthCheck("http://tokens/ready", transport=self._transport(503))
        status = _run(check.check())
        assert status.healthy is False
        assert status.detail == "status=503"

    def test_transport_error_is_unhealthy(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        check = HttpEndpointHealthCheck("http://tokens/ready", transport=httpx.MockTransport(refuse))
        status = _run(check.check())
        assert status.healthy is False
        assert "ConnectError" in (status.detail or "")

    def test_default_and_custom_name(self) -> None:
        assert HttpEndpointHealthCheck("http://x").name == "http:http://x"
        assert HttpEndpointHealthCheck("http://x", name="token_service").name == "token_service"


# ---------------------------------------------------------------------------
# ObjectDatabaseHealthCheck
# ---------------------------------------------------------------------------


class TestObjectDatabaseHealthCheck:
    def test_round_trip_is_healthy(self) -> None:
        repository = InMemoryObjectRepository()
        check = ObjectDatabaseHealthCheck(repository, "hcdb", "hccol")
        status = _run(check.check())
        assert status.healthy is True
        assert status.degraded is False
        assert "completed in" in (status.detail or "")
        stored = _run(repository.get("hcdb", "hccol", 1))
        assert stored == {"_id": 1, "name": "the nameless ones"}

    def test_repeated_probes_replace_probe_object(self) -> None:
        repository = InMemoryObjectRepository()
        check = ObjectDatabaseHealthCheck(repository, "hcdb", "hccol")
        _run(check.check())
        assert _run(check.check()).healthy is True
        assert len(_run(repository.get_all("hcdb", "hccol"))) == 1

    def test_slow_round_trip_is_degraded(self) -> None:
        check = ObjectDatabaseHealthCheck(
            _SlowRepository(0.05), "hcdb", "hccol", degradation_ms=10, timeout_ms=2000
        )
        status = _run(check.check())
        assert status.healthy is True
        assert status.degraded is True
        assert status.detail == "Object database check took more than 10 milliseconds"

    def test_timeout_is_unhealthy(self) -> None:
        check = ObjectDatabaseHealthCheck(
            _SlowRepository(1.0), "hcdb", "hccol", degradation_ms=10, timeout_ms=50
        )
        status = _run(check.check())
        assert status.healthy is False
        assert status.detail == "Object database check timed out after 50 milliseconds"

    def test_failure_names_exception_type(self) -> None:
        check = ObjectDatabaseHealthCheck(_BrokenRepository(), "hcdb", "hccol")
        status = _run(check.check())
        assert status.healthy is False
        assert status.detail == "Object database check failed due to RuntimeError"

    def test_name(self) -> None:
        assert ObjectDatabaseHealthCheck(InMemoryObjectRepository()).name == "object_database"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"database": ""},
            {"collection": ""},
            {"degradation_ms": -1},
            {"degradation_ms": 3000, "timeout_ms": 2000},
        ],
    )
    def test_invalid_arguments(self, kwargs: dict[str, Any]) -> None:
        with pytest.raises(ValueError):
            ObjectDatabaseHealthCheck(InMemoryObjectRepository(), **kwargs)
