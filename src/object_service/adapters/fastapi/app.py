"""FastAPI adapter – application factory."""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

from object_service import __version__
from object_service.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from object_service.adapters.fastapi.middleware import (
    FastAPICorrelationIdMiddleware,
    FastAPISecurityHeadersMiddleware,
    FastAPISecurityMiddleware,
    TokenVerifier,
)
from object_service.adapters.fastapi.routers import FastAPIHealthRouter
from object_service.adapters.fastapi.routes import ObjectRouter
from object_service.adapters.mongodb import MongoObjectRepository, ObjectDatabaseHealthCheck
from object_service.application.objects import ImmutableCollections, ObjectRepository
from object_service.application.query import QueryCompiler
from object_service.config.settings import ObjectServiceSettings
from object_service.config.validation import ConfigError
from object_service.kernel.security import ScopePolicy
from object_service.observability.health import HealthRegistry, HttpEndpointHealthCheck
from object_service.observability.logging import get_logger

_log = get_logger(__name__)


def _database_check(repository: ObjectRepository, settings: ObjectServiceSettings) -> ObjectDatabaseHealthCheck:
    return ObjectDatabaseHealthCheck(
        repository,
        database=settings.health_check_database_name,
        collection=settings.health_check_collection_name,
        degradation_ms=settings.health_degradation_ms,
        timeout_ms=settings.health_timeout_ms,
    )


def create_app(
    settings: ObjectServiceSettings | None = None,
    *,
    repository: ObjectRepository | None = None,
    verifier: TokenVerifier | None = None,
    compiler: QueryCompiler | None = None,
) -> FastAPI:
    """Build the object service application.

    Parameters
    ----------
    settings:
        Service settings; defaults are used when omitted.
    repository:
        Object store to use.  When omitted a motor client is opened on
        startup from ``settings.mongo_connection_string`` and closed on
        shutdown.
    verifier:
        ``async (token) -> Principal | None``.  Required when
        ``settings.require_auth`` is enabled.
    compiler:
        Search string compiler for the ``/search`` route.
    """
    settings = settings or ObjectServiceSettings()
    if settings.require_auth and verifier is None:
        raise ConfigError("require_auth is enabled but no token verifier was supplied")

    immutable = ImmutableCollections.parse(settings.immutable)
    registry = HealthRegistry()
    if settings.readiness_url:
        registry.register(HttpEndpointHealthCheck(settings.readiness_url, name="token_service"))
    if repository is not None:
        registry.register(_database_check(repository, settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        client = None
        if app.state.repository is None:
            client = AsyncIOMotorClient(
                settings.mongo_connection_string,
                tls=settings.mongo_use_ssl,
                uuidRepresentation="standard",
            )
            app.state.repository = MongoObjectRepository(client, immutable)
            registry.register(_database_check(app.state.repository, settings))
        _log.info(
            "object_service_started",
            require_auth=settings.require_auth,
            immutable_collections=len(immutable),
        )
        try:
            yield
        finally:
            if client is not None:
                client.close()
                app.state.repository = None
            _log.info("object_service_stopped")

    app = FastAPI(
        title="Object service",
        version=__version__,
        description="Schemaless JSON object storage over MongoDB.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository
    app.state.compiler = compiler or QueryCompiler()
    app.state.health_registry = registry
    app.state.scope_policy = (
        ScopePolicy(settings.system_name, settings.service_name) if settings.require_auth else None
    )

    FastAPIExceptionMapper().register(app)
    app.include_router(FastAPIHealthRouter(registry))
    app.include_router(ObjectRouter())

    # Outermost last: headers → correlation → CORS → authentication.
    app.add_middleware(
        FastAPISecurityMiddleware,
        verifier=verifier,
        require_auth=settings.require_auth,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(FastAPICorrelationIdMiddleware)
    app.add_middleware(FastAPISecurityHeadersMiddleware)
    return app


__all__ = ["create_app"]
