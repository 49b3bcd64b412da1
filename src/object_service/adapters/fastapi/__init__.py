"""FastAPI adapter – app factory, object routes, middleware, exception mapper, health router."""
from object_service.adapters.fastapi.app import create_app
from object_service.adapters.fastapi.deps import ResponseFormat, error_responses, require_scope
from object_service.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from object_service.adapters.fastapi.middleware import (
    FastAPICorrelationIdMiddleware,
    FastAPISecurityHeadersMiddleware,
    FastAPISecurityMiddleware,
    TokenVerifier,
)
from object_service.adapters.fastapi.responses import BsonJSONResponse
from object_service.adapters.fastapi.routers import FastAPIHealthRouter
from object_service.adapters.fastapi.routes import API_PREFIX, ObjectRouter

__all__ = [
    "API_PREFIX",
    "BsonJSONResponse",
    "FastAPICorrelationIdMiddleware",
    "FastAPIExceptionMapper",
    "FastAPIHealthRouter",
    "FastAPISecurityHeadersMiddleware",
    "FastAPISecurityMiddleware",
    "ObjectRouter",
    "ResponseFormat",
    "TokenVerifier",
    "create_app",
    "error_responses",
    "require_scope",
]
