"""Application objects – FindOptions, SortDirection."""
from __future__ import annotations

import dataclasses
from enum import Enum

from object_service.kernel.errors import ValidationError


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: str | None) -> "SortDirection":
        """Accept ``asc``/``desc`` (any case) and ``1``/``-1``; ``None`` is ascending."""
        if value is None or value == "":
            return cls.ASC
        lowered = value.strip().lower()
        if lowered in ("asc", "ascending", "1"):
            return cls.ASC
        if lowered in ("desc", "descending", "-1"):
            return cls.DESC
        raise ValidationError(
            f"Invalid sort order {value!r}",
            errors=[{"field": "order", "message": "expected 'asc' or 'desc'"}],
        )

    @property
    def pymongo(self) -> int:
        return 1 if self is SortDirection.ASC else -1


@dataclasses.dataclass(frozen=True)
class FindOptions:
    """Offset pagination and optional single-field sort for a find.

    ``limit <= 0`` means no limit.
    """
    start: int = 0
    limit: int = -1
    sort_field: str | None = None
    sort_direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValidationError(
                "start must be >= 0",
                errors=[{"field": "start", "message": "must be >= 0"}],
            )

    @property
    def has_limit(self) -> bool:
        return self.limit > 0


__all__ = ["FindOptions", "SortDirection"]
