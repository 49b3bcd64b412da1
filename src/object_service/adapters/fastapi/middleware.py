"""FastAPI adapter – ASGI middleware implementations.

* FastAPICorrelationIdMiddleware   – correlation id in, correlation id out
* FastAPISecurityMiddleware        – Bearer token → :class:`SecurityContext`
* FastAPISecurityHeadersMiddleware – hardening and no-store headers on every response
"""
from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import structlog

from object_service.kernel.security import Principal, SecurityContext
from object_service.observability.correlation import CorrelationContext
from object_service.observability.correlation.context import CORRELATION_HEADER
from object_service.observability.logging import get_logger

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

TokenVerifier = Callable[[str], Awaitable[Principal | None]]

_log = get_logger(__name__)

SECURITY_HEADERS: dict[str, str] = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}


# ---------------------------------------------------------------------------
# Correlation-ID middleware
# ---------------------------------------------------------------------------

class FastAPICorrelationIdMiddleware:
    """Extract the correlation ID from request headers and echo it on the response.

    Resolution order: ``X-Correlation-ID``, ``X-Request-ID``, generated UUID v4.
    The id is also bound into structlog's contextvars for the request.
    """

    def __init__(self, app: "ASGIApp", header_name: str = CORRELATION_HEADER) -> None:
        self.app = app
        self._response_header = header_name.lower().encode()

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        headers = {
            k.decode("latin-1"): v.decode("latin-1").strip()
            for k, v in scope.get("headers", [])
        }
        ctx = CorrelationContext.from_headers(headers)
        token = CorrelationContext.set(ctx)
        structlog.contextvars.bind_contextvars(correlation_id=ctx.correlation_id)

        response_header = self._response_header
        encoded_id = ctx.correlation_id.encode("latin-1")

        async def send_with_header(message: Any) -> None:
            if message["type"] == "http.response.start":
                headers_list: list[tuple[bytes, bytes]] = list(message.get("headers", []))
                headers_list.append((response_header, encoded_id))
                message = {**message, "headers": headers_list}
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            structlog.contextvars.unbind_contextvars("correlation_id")
            CorrelationContext.reset(token)


# ---------------------------------------------------------------------------
# Security (Bearer token) middleware
# ---------------------------------------------------------------------------

class FastAPISecurityMiddleware:
    """Extract a Bearer token, verify it, and populate :class:`SecurityContext`.

    Parameters
    ----------
    app:
        The inner ASGI application.
    verifier:
        Any callable ``async (token: str) -> Principal | None``.  Token
        validation itself (JWT, introspection) lives behind this callable.
    require_auth:
        When ``True`` requests without a valid token receive 401, except for
        paths starting with one of *public_paths*.
    public_paths:
        Path prefixes reachable without credentials (health probes, docs).
    """

    def __init__(
        self,
        app: "ASGIApp",
        verifier: TokenVerifier | None = None,
        require_auth: bool = False,
        public_paths: tuple[str, ...] = ("/health", "/docs", "/openapi.json"),
    ) -> None:
        self.app = app
        self._verifier = verifier
        self._require_auth = require_auth
        self._public_paths = public_paths

    async def _authenticate(self, auth_value: str) -> Principal | None:
        if not auth_value.lower().startswith("bearer "):
            return None
        token = auth_value[7:].strip()
        if self._verifier is None or not token:
            return None
        try:
            return await self._verifier(token)
        except Exception:  # noqa: BLE001
            _log.warning("token_verification_failed", exc_info=True)
            return None

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        auth_value = headers.get(b"authorization", b"").decode("latin-1").strip()
        principal = await self._authenticate(auth_value)

        path: str = scope.get("path", "")
        is_public = scope.get("method") == "OPTIONS" or path.startswith(self._public_paths)
        if principal is None and self._require_auth and not is_public:
            await self._reject(send)
            return

        token = SecurityContext.set_current(principal)
        try:
            await self.app(scope, receive, send)
        finally:
            SecurityContext.reset(token)

    @staticmethod
    async def _reject(send: "Send") -> None:
        ctx = CorrelationContext.get()
        body = json.dumps({
            "code": "unauthorized",
            "message": "Missing or invalid credentials",
            "detail": {},
            "correlation_id": ctx.correlation_id if ctx is not None else None,
        }).encode()
        await send({"type": "http.response.start", "status": 401, "headers": [
            (b"content-type", b"application/json"),
            (b"content-length", str(len(body)).encode()),
            (b"www-authenticate", b"Bearer"),
        ]})
        await send({"type": "http.response.body", "body": body})


# ---------------------------------------------------------------------------
# Security headers middleware
# ---------------------------------------------------------------------------

class FastAPISecurityHeadersMiddleware:
    """Add :data:`SECURITY_HEADERS` to every HTTP response, replacing existing values."""

    def __init__(self, app: "ASGIApp", headers: dict[str, str] | None = None) -> None:
        self.app = app
        source = SECURITY_HEADERS if headers is None else headers
        self._headers = [(k.lower().encode(), v.encode()) for k, v in source.items()]
        self._names = {name for name, _ in self._headers}

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Any) -> None:
            if message["type"] == "http.response.start":
                headers_list = [
                    (k, v) for k, v in message.get("headers", []) if k.lower() not in self._names
                ]
                headers_list.extend(self._headers)
                message = {**message, "headers": headers_list}
            await send(message)

        await self.app(scope, receive, send_with_headers)


__all__ = [
    "SECURITY_HEADERS",
    "FastAPICorrelationIdMiddleware",
    "FastAPISecurityHeadersMiddleware",
    "FastAPISecurityMiddleware",
    "TokenVerifier",
]
