"""FastAPI adapter – health router."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from object_service.observability.health import HealthRegistry


def FastAPIHealthRouter(
    registry: HealthRegistry,
    path: str = "/health",
    tags: list[str] | None = None,
) -> APIRouter:
    """Return a liveness + readiness health-check router.

    Parameters
    ----------
    registry:
        Checks run by the readiness endpoint.  All must be healthy (a
        degraded check still counts as healthy) for a 200; otherwise 503.
    path:
        Base path prefix.  Liveness is at ``{path}/live``, readiness at
        ``{path}/ready``.
    tags:
        OpenAPI tags for the generated routes.
    """
    router = APIRouter(tags=tags or ["ops"])

    @router.get(f"{path}/live")
    async def liveness() -> dict[str, str]:
        """Liveness probe – always 200 OK when the process is up."""
        return {"status": "ok"}

    @router.get(f"{path}/ready")
    async def readiness() -> Any:
        """Readiness probe – runs all registered health checks."""
        report = await registry.run_all()
        return JSONResponse(
            status_code=200 if report.overall else 503,
            content=report.to_dict(),
        )

    return router


__all__ = ["FastAPIHealthRouter"]
