"""Kernel security – Principal."""
from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class Principal:
    """Authenticated identity and the OAuth2 scopes granted to it."""
    subject: str
    scopes: frozenset[str] = frozenset()
    claims: dict[str, Any] = dataclasses.field(default_factory=dict)

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes

    @classmethod
    def from_claims(cls, claims: dict[str, Any], scope_claim: str = "scope") -> "Principal":
        """Build a principal from decoded token claims.

        The scope claim is a space-separated string, as issued by OAuth2
        authorization servers.
        """
        raw: str = claims.get(scope_claim, "") or ""
        return cls(
            subject=str(claims.get("sub", "")),
            scopes=frozenset(s for s in raw.split() if s),
            claims=dict(claims),
        )


__all__ = ["Principal"]
