"""Kernel security — route-derived OAuth2 scope policy.

Every object route is guarded by a scope built from the route itself::

    {system}.{service}.{database}.{collection}.{action}

e.g. ``fdns.object.bookstore.books.read``.  A principal passes when the
exact scope string is among the scopes granted to it.

Key pieces:
* :class:`ScopeAction` — the four route actions (read/insert/update/delete).
* :class:`ScopePolicy` — builds the required scope and evaluates a principal.
* :class:`ScopeResult` — outcome of an evaluation, falsy when denied.
"""

from __future__ import annotations

import dataclasses
import re
from enum import Enum

from object_service.kernel.errors.application import ForbiddenError
from object_service.kernel.security.principal import Principal

_NAME_RE = re.compile(r"^[a-zA-Z0-9_\.]*$")


class ScopeAction(str, Enum):
    READ = "read"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


def _validate_name(label: str, value: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} must not be empty")
    if not _NAME_RE.match(value):
        raise ValueError(f"{label} may only contain letters, digits, '_' and '.'")
    return value


# ---------------------------------------------------------------------------
# ScopeResult
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class ScopeResult:
    """Result of a :class:`ScopePolicy` evaluation."""

    allowed: bool
    required_scope: str
    principal: Principal | None = None

    @property
    def reason(self) -> str | None:
        if self.allowed:
            return None
        subject = self.principal.subject if self.principal is not None else "anonymous"
        return f"principal {subject!r} lacks scope {self.required_scope!r}"

    def __bool__(self) -> bool:
        return self.allowed


# ---------------------------------------------------------------------------
# ScopePolicy
# ---------------------------------------------------------------------------


class ScopePolicy:
    """Evaluates route scopes for a configured system and service name.

    Example::

        policy = ScopePolicy("fdns")
        result = policy.evaluate(principal, "bookstore", "books", ScopeAction.READ)
        if not result:
            raise ForbiddenError(result.reason)
    """

    def __init__(self, system_name: str, service_name: str = "object") -> None:
        self.system_name = _validate_name("system_name", system_name)
        self.service_name = _validate_name("service_name", service_name)

    def required_scope(self, database: str, collection: str, action: ScopeAction | str) -> str:
        action_value = action.value if isinstance(action, ScopeAction) else action
        return f"{self.system_name}.{self.service_name}.{database}.{collection}.{action_value}"

    def evaluate(
        self,
        principal: Principal | None,
        database: str,
        collection: str,
        action: ScopeAction | str,
    ) -> ScopeResult:
        scope = self.required_scope(database, collection, action)
        allowed = principal is not None and principal.has_scope(scope)
        return ScopeResult(allowed=allowed, required_scope=scope, principal=principal)

    def authorize(
        self,
        principal: Principal | None,
        database: str,
        collection: str,
        action: ScopeAction | str,
    ) -> Principal | None:
        """Return *principal* when allowed, raise :class:`ForbiddenError` otherwise."""
        result = self.evaluate(principal, database, collection, action)
        if not result.allowed:
            raise ForbiddenError(result.reason or "forbidden", scope=result.required_scope)
        return principal


__all__ = ["ScopeAction", "ScopePolicy", "ScopeResult"]
