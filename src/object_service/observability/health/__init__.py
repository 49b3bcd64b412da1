"""Observability – Health Checks."""
from object_service.observability.health.builtin import HttpEndpointHealthCheck, LambdaHealthCheck
from object_service.observability.health.check import HealthCheck, HealthStatus
from object_service.observability.health.registry import HealthRegistry, HealthReport

__all__ = [
    "HealthCheck",
    "HealthRegistry",
    "HealthReport",
    "HealthStatus",
    "HttpEndpointHealthCheck",
    "LambdaHealthCheck",
]
