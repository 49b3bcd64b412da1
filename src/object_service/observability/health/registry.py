from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from object_service.observability.health.check import HealthCheck, HealthStatus
from object_service.observability.logging import get_logger

__all__ = ["HealthReport", "HealthRegistry"]

_log = get_logger(__name__)


@dataclass
class HealthReport:
    results: dict[str, HealthStatus] = field(default_factory=dict)

    @property
    def overall(self) -> bool:
        return all(s.healthy for s in self.results.values())

    @property
    def status(self) -> str:
        if not self.overall:
            return "unhealthy"
        if any(s.degraded for s in self.results.values()):
            return "degraded"
        return "healthy"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "healthy": self.overall,
            "checks": {
                name: {
                    "status": s.state,
                    "detail": s.detail,
                    "latency_ms": round(s.latency_ms, 2),
                }
                for name, s in self.results.items()
            },
        }


class HealthRegistry:
    """Runs registered health checks and aggregates results."""

    def __init__(self) -> None:
        self._checks: list[HealthCheck] = []

    def register(self, check: HealthCheck) -> None:
        """Add *check*, replacing any registered check with the same name."""
        self._checks = [c for c in self._checks if c.name != check.name]
        self._checks.append(check)

    @property
    def checks(self) -> list[HealthCheck]:
        return list(self._checks)

    async def run_all(self) -> HealthReport:
        report = HealthReport()
        for check in self._checks:
            try:
                status = await check.timed_check()
            except Exception as exc:  # noqa: BLE001
                _log.warning("health_check_raised", check=check.name, exc_info=True)
                status = HealthStatus(healthy=False, detail=f"exception: {exc}")
            report.results[check.name] = status
        return report
