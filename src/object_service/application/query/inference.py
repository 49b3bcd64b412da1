"""Application query – raw value type inference.

Search values are typed by sniffing: number first, then boolean, else the
raw string.  :class:`LenientTypeInference` (the default) sniffs with
*unanchored* patterns, so ``"truest"`` reads as a boolean and ``"5x"`` as a
number; :class:`StrictTypeInference` only accepts whole-value matches.
"""
from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod

_NUMBER = re.compile(r"-?\d+(\.\d+)?")
_BOOLEAN = re.compile(r"true|false")
_FLOAT_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class TypeInference(ABC):
    """Strategy deciding how a raw search value is typed."""

    @abstractmethod
    def looks_numeric(self, raw: str) -> bool: ...

    @abstractmethod
    def looks_boolean(self, raw: str) -> bool: ...

    @abstractmethod
    def parse_boolean(self, raw: str) -> bool: ...

    def parse_number(self, raw: str) -> float | None:
        """Return *raw* as a float, or ``None`` when it is not a numeric literal."""
        if not _FLOAT_LITERAL.fullmatch(raw):
            return None
        number = float(raw)
        return number if math.isfinite(number) else None


class LenientTypeInference(TypeInference):
    """Unanchored sniffing: a value *containing* a number or boolean word counts."""

    def looks_numeric(self, raw: str) -> bool:
        return _NUMBER.search(raw) is not None

    def looks_boolean(self, raw: str) -> bool:
        return _BOOLEAN.search(raw) is not None

    def parse_boolean(self, raw: str) -> bool:
        match = _BOOLEAN.search(raw)
        return match is not None and match.group() == "true"


class StrictTypeInference(TypeInference):
    """Anchored sniffing: the whole value must be a number or ``true``/``false``."""

    def looks_numeric(self, raw: str) -> bool:
        return _NUMBER.fullmatch(raw) is not None

    def looks_boolean(self, raw: str) -> bool:
        return raw in ("true", "false")

    def parse_boolean(self, raw: str) -> bool:
        return raw == "true"


__all__ = ["LenientTypeInference", "StrictTypeInference", "TypeInference"]
