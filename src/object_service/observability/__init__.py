"""Observability – structured logging, correlation context and health checks."""
