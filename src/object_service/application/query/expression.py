"""Application query – FilterExpression value object.

A filter expression maps each field to either a literal (equality) or a
:class:`ComparisonSet` holding one value per comparison operator::

    {"status": "A", "weight": ComparisonSet({GTE: 50.0, LTE: 80.0})}

renders as the MongoDB filter ``{"status":"A","weight":{"$gte":50,"$lte":80}}``.
"""
from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

LiteralValue = Union[float, bool, str]


class ComparisonOp(str, Enum):
    """Canonical comparison operator tags."""

    GTE = "gte"
    LTE = "lte"
    GT = "gt"
    LT = "lt"
    NE = "ne"

    @property
    def mongo(self) -> str:
        """MongoDB spelling of the operator (``$gte`` …)."""
        return f"${self.value}"


@dataclass
class ComparisonSet:
    """All comparisons applied to a single field, in first-seen order."""

    operators: dict[ComparisonOp, LiteralValue] = field(default_factory=dict)

    def set(self, op: ComparisonOp, value: LiteralValue) -> None:
        """Add *op*; a repeated operator keeps its position and takes the new value."""
        self.operators[op] = value

    def as_dict(self) -> dict[str, LiteralValue]:
        return {op.value: value for op, value in self.operators.items()}

    def to_mongo(self) -> dict[str, LiteralValue]:
        return {op.mongo: value for op, value in self.operators.items()}


FieldValue = Union[LiteralValue, ComparisonSet]


class FilterExpression:
    """Ordered field → literal / comparison-set mapping built by the compiler.

    Field order is the order in which a field first appeared in the search
    string; later terms on the same field update the value in place.
    """

    def __init__(self) -> None:
        self._fields: dict[str, FieldValue] = {}

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def assign(self, field_name: str, value: LiteralValue) -> None:
        """Equality: *field_name* maps directly to *value* (last write wins)."""
        self._fields[field_name] = value

    def compare(self, field_name: str, op: ComparisonOp, value: LiteralValue) -> None:
        """Merge ``{op: value}`` into the comparisons already held for *field_name*.

        A literal previously assigned to the field is replaced.
        """
        existing = self._fields.get(field_name)
        if isinstance(existing, ComparisonSet):
            existing.set(op, value)
        else:
            self._fields[field_name] = ComparisonSet({op: value})

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, field_name: str) -> FieldValue:
        return self._fields[field_name]

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __bool__(self) -> bool:
        return bool(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterExpression):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        return f"FilterExpression({self.as_dict()!r})"

    @property
    def fields(self) -> list[str]:
        return list(self._fields)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def as_dict(self) -> dict[str, Any]:
        """Plain dict using canonical operator tags (``{"age": {"gte": 5.0}}``)."""
        return {
            name: value.as_dict() if isinstance(value, ComparisonSet) else value
            for name, value in self._fields.items()
        }

    def to_mongo(self) -> dict[str, Any]:
        """MongoDB filter document (``{"age": {"$gte": 5.0}}``)."""
        return {
            name: value.to_mongo() if isinstance(value, ComparisonSet) else value
            for name, value in self._fields.items()
        }

    def to_json(self) -> str:
        """Compact MongoDB filter text, e.g. ``{"status":"A","weight":{"$gte":50}}``."""
        return json.dumps(
            _integral_floats_as_int(self.to_mongo()),
            separators=(",", ":"),
            ensure_ascii=False,
        )


def _integral_floats_as_int(node: Any) -> Any:
    if isinstance(node, dict):
        return {key: _integral_floats_as_int(value) for key, value in node.items()}
    if isinstance(node, float) and node.is_integer():
        return int(node)
    return node


__all__ = [
    "ComparisonOp",
    "ComparisonSet",
    "FieldValue",
    "FilterExpression",
    "LiteralValue",
]
