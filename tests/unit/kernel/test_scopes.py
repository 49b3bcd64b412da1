"""Unit tests for kernel security – principal, security context, scope policy."""
from __future__ import annotations

import asyncio

import pytest

from object_service.kernel.errors import ForbiddenError, UnauthorizedError
from object_service.kernel.security import (
    Principal,
    ScopeAction,
    ScopePolicy,
    SecurityContext,
)


class TestPrincipal:
    def test_from_claims_splits_scope_string(self) -> None:
        principal = Principal.from_claims({"sub": "alice", "scope": "a.read  b.write"})
        assert principal.subject == "alice"
        assert principal.scopes == frozenset({"a.read", "b.write"})
        assert principal.has_scope("a.read")
        assert not principal.has_scope("a")

    def test_from_claims_custom_claim_and_missing_scope(self) -> None:
        assert Principal.from_claims({"sub": "x", "scp": "s"}, scope_claim="scp").scopes == {"s"}
        assert Principal.from_claims({"sub": "x"}).scopes == frozenset()


class TestSecurityContext:
    def setup_method(self) -> None:
        SecurityContext.clear()

    def test_set_and_reset(self) -> None:
        principal = Principal("bob")
        token = SecurityContext.set_current(principal)
        assert SecurityContext.get_current() is principal
        SecurityContext.reset(token)
        assert SecurityContext.get_current() is None

    def test_require_raises_without_principal(self) -> None:
        with pytest.raises(UnauthorizedError):
            SecurityContext.require()

    def test_isolated_per_task(self) -> None:
        async def worker(name: str) -> str | None:
            SecurityContext.set_current(Principal(name))
            await asyncio.sleep(0)
            current = SecurityContext.get_current()
            return current.subject if current else None

        async def run() -> list[str | None]:
            return list(await asyncio.gather(worker("a"), worker("b")))

        assert asyncio.run(run()) == ["a", "b"]


class TestScopePolicy:
    def setup_method(self) -> None:
        self.policy = ScopePolicy("fdns")

    def test_required_scope_format(self) -> None:
        assert (
            self.policy.required_scope("bookstore", "books", ScopeAction.READ)
            == "fdns.object.bookstore.books.read"
        )

    def test_custom_service_name(self) -> None:
        policy = ScopePolicy("sys", service_name="storage")
        assert policy.required_scope("d", "c", "delete") == "sys.storage.d.c.delete"

    def test_exact_scope_allows(self) -> None:
        principal = Principal("u", frozenset({"fdns.object.bookstore.books.insert"}))
        result = self.policy.evaluate(principal, "bookstore", "books", ScopeAction.INSERT)
        assert result
        assert result.reason is None

    def test_other_action_denied(self) -> None:
        principal = Principal("u", frozenset({"fdns.object.bookstore.books.read"}))
        result = self.policy.evaluate(principal, "bookstore", "books", ScopeAction.DELETE)
        assert not result
        assert result.required_scope == "fdns.object.bookstore.books.delete"
        assert "lacks scope" in (result.reason or "")

    def test_anonymous_denied(self) -> None:
        assert not self.policy.evaluate(None, "d", "c", ScopeAction.READ)

    def test_authorize_raises_forbidden(self) -> None:
        with pytest.raises(ForbiddenError) as exc_info:
            self.policy.authorize(Principal("u"), "d", "c", ScopeAction.UPDATE)
        assert exc_info.value.scope == "fdns.object.d.c.update"

    def test_authorize_returns_principal(self) -> None:
        principal = Principal("u", frozenset({"fdns.object.d.c.update"}))
        assert self.policy.authorize(principal, "d", "c", ScopeAction.UPDATE) is principal

    @pytest.mark.parametrize("name", ["", "  ", "bad-name", "has space", "x/y"])
    def test_invalid_system_name_rejected(self, name: str) -> None:
        with pytest.raises(ValueError):
            ScopePolicy(name)

    def test_dotted_system_name_allowed(self) -> None:
        assert ScopePolicy("org.fdns").system_name == "org.fdns"
