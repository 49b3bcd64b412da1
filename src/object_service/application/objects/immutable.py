"""Application objects – ImmutableCollections write policy."""
from __future__ import annotations

from collections.abc import Iterable

from object_service.kernel.errors import ImmutableCollectionError
from object_service.observability.logging import get_logger

_log = get_logger(__name__)

# Past-tense verbs used in the rejection message, keyed by write operation.
_ACTIONS = {
    "insert": "inserted",
    "replace": "replaced",
    "delete": "deleted",
}


class ImmutableCollections:
    """Set of ``(database, collection)`` pairs that reject every write.

    Configured as ``"db1/col1;db2/col2"``::

        policy = ImmutableCollections.parse("audit/events;bookstore/ledger")
        policy.check("audit", "events", "insert")   # raises ImmutableCollectionError
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        self._pairs: frozenset[tuple[str, str]] = frozenset(pairs)

    @classmethod
    def parse(cls, raw: str | None) -> "ImmutableCollections":
        """Parse ``db/col`` entries separated by ``;``.

        Entries that are not exactly ``db/col`` are ignored with a warning.
        """
        pairs: list[tuple[str, str]] = []
        for entry in (raw or "").split(";"):
            entry = entry.strip()
            if not entry:
                continue
            parts = entry.split("/")
            if len(parts) != 2 or not parts[0] or not parts[1]:
                _log.warning("immutable_entry_ignored", entry=entry)
                continue
            pairs.append((parts[0], parts[1]))
        return cls(pairs)

    def is_immutable(self, database: str, collection: str) -> bool:
        return (database, collection) in self._pairs

    def check(self, database: str, collection: str, operation: str) -> None:
        """Raise :class:`ImmutableCollectionError` if *operation* targets an immutable collection."""
        if self.is_immutable(database, collection):
            raise ImmutableCollectionError(
                database, collection, _ACTIONS.get(operation, operation)
            )

    def __contains__(self, pair: object) -> bool:
        return pair in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        entries = ";".join(f"{d}/{c}" for d, c in sorted(self._pairs))
        return f"ImmutableCollections({entries!r})"


__all__ = ["ImmutableCollections"]
