"""Observability – RequestContext, CorrelationContext."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from contextvars import ContextVar, Token
from uuid import uuid4

CORRELATION_HEADER = "X-Correlation-ID"


@dataclasses.dataclass(frozen=True)
class RequestContext:
    """Ambient context for a single HTTP request."""
    correlation_id: str
    trace_id: str | None = None

    @classmethod
    def new(cls) -> "RequestContext":
        return cls(correlation_id=str(uuid4()))


_CTX_VAR: ContextVar[RequestContext | None] = ContextVar("_object_request_ctx", default=None)


class CorrelationContext:
    """Ambient correlation context stored in a ``ContextVar``."""

    @staticmethod
    def set(ctx: RequestContext) -> Token[RequestContext | None]:
        return _CTX_VAR.set(ctx)

    @staticmethod
    def get() -> RequestContext | None:
        return _CTX_VAR.get()

    @staticmethod
    def reset(token: Token[RequestContext | None]) -> None:
        _CTX_VAR.reset(token)

    @staticmethod
    def get_or_new() -> RequestContext:
        ctx = _CTX_VAR.get()
        if ctx is None:
            ctx = RequestContext.new()
            _CTX_VAR.set(ctx)
        return ctx

    @staticmethod
    def clear() -> None:
        _CTX_VAR.set(None)

    @staticmethod
    def from_headers(headers: Mapping[str, str]) -> RequestContext:
        """Build a context from HTTP headers without storing it.

        Correlation ID priority: ``X-Correlation-ID`` → ``X-Request-ID`` →
        generated UUID.  The W3C ``traceparent`` header
        (``ver-trace_id-parent_id-flags``) populates ``trace_id``.
        Header names are matched case-insensitively.
        """
        norm = {k.lower(): v for k, v in headers.items()}
        correlation_id = (
            norm.get("x-correlation-id")
            or norm.get("x-request-id")
            or str(uuid4())
        )

        trace_id: str | None = None
        traceparent = norm.get("traceparent")
        if traceparent:
            parts = traceparent.split("-")
            if len(parts) >= 2 and parts[1]:
                trace_id = parts[1]

        return RequestContext(correlation_id=correlation_id, trace_id=trace_id)


__all__ = ["CORRELATION_HEADER", "CorrelationContext", "RequestContext"]
