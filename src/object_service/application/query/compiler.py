"""Application query – search string compiler.

Turns a space-separated search string into a MongoDB filter::

    >>> build_query("status:A weight>=50 weight<=80")
    '{"status":"A","weight":{"$gte":50,"$lte":80}}'

Grammar of a single term is ``<field><op><value>`` where ``op`` is one of
``>=``, ``<=``, ``>``, ``<``, ``!:`` or ``:``.  Operators are tried in that
order, so ``a>=5`` is a ``>=`` term and never a ``>`` term with value ``=5``.
The term is split on the *first* occurrence of the operator.

Terms that cannot be compiled are dropped, never raised.  Use
:func:`compile_with_diagnostics` to see what was dropped and why.
"""
from __future__ import annotations

import dataclasses
from enum import Enum

from object_service.application.query.expression import (
    ComparisonOp,
    FilterExpression,
    LiteralValue,
)
from object_service.application.query.inference import LenientTypeInference, TypeInference
from object_service.observability.logging import get_logger

_log = get_logger(__name__)

# Longest operators first: ">=" must win over ">", "!:" over ":".
_OPERATORS: tuple[tuple[str, ComparisonOp | None], ...] = (
    (">=", ComparisonOp.GTE),
    ("<=", ComparisonOp.LTE),
    (">", ComparisonOp.GT),
    ("<", ComparisonOp.LT),
    ("!:", ComparisonOp.NE),
    (":", None),
)


class SkipReason(str, Enum):
    EMPTY_TERM = "empty_term"
    NO_OPERATOR = "no_operator"
    EMPTY_FIELD = "empty_field"
    NON_NUMERIC_OPERAND = "non_numeric_operand"
    MALFORMED_NUMBER = "malformed_number"


@dataclasses.dataclass(frozen=True)
class SkippedTerm:
    term: str
    reason: SkipReason


@dataclasses.dataclass(frozen=True)
class CompileResult:
    """Filter plus the terms that were dropped while compiling it."""

    filter: FilterExpression
    skipped: tuple[SkippedTerm, ...] = ()

    @property
    def ok(self) -> bool:
        """``True`` when no non-empty term was dropped."""
        return all(s.reason is SkipReason.EMPTY_TERM for s in self.skipped)


class _Skip(Exception):
    def __init__(self, reason: SkipReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


class QueryCompiler:
    """Compile search strings using a pluggable :class:`TypeInference`.

    The default inference is :class:`LenientTypeInference`.
    """

    def __init__(self, inference: TypeInference | None = None) -> None:
        self._inference = inference or LenientTypeInference()

    @property
    def inference(self) -> TypeInference:
        return self._inference

    def compile(self, search: str | None) -> FilterExpression:
        return self.compile_with_diagnostics(search).filter

    def build_query(self, search: str | None) -> str:
        """Compile *search* and render it as compact MongoDB filter text."""
        return self.compile(search).to_json()

    def compile_with_diagnostics(self, search: str | None) -> CompileResult:
        expression = FilterExpression()
        if not search:
            return CompileResult(expression)

        skipped: list[SkippedTerm] = []
        for term in search.split(" "):
            try:
                self._apply(expression, term)
            except _Skip as exc:
                skipped.append(SkippedTerm(term, exc.reason))

        dropped = [s for s in skipped if s.reason is not SkipReason.EMPTY_TERM]
        if dropped:
            _log.debug(
                "search_terms_skipped",
                skipped=[{"term": s.term, "reason": s.reason.value} for s in dropped],
            )
        return CompileResult(expression, tuple(skipped))

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------

    def _apply(self, expression: FilterExpression, term: str) -> None:
        if not term:
            raise _Skip(SkipReason.EMPTY_TERM)
        symbol, op = self._match_operator(term)
        field_name, _, raw = term.partition(symbol)
        if not field_name:
            raise _Skip(SkipReason.EMPTY_FIELD)

        if op is None:
            expression.assign(field_name, self._literal(raw))
        elif self._inference.looks_numeric(raw):
            expression.compare(field_name, op, self._number(raw))
        elif op is ComparisonOp.NE:
            expression.compare(field_name, op, raw)
        else:
            raise _Skip(SkipReason.NON_NUMERIC_OPERAND)

    @staticmethod
    def _match_operator(term: str) -> tuple[str, ComparisonOp | None]:
        for symbol, op in _OPERATORS:
            if symbol in term:
                return symbol, op
        raise _Skip(SkipReason.NO_OPERATOR)

    def _literal(self, raw: str) -> LiteralValue:
        if self._inference.looks_numeric(raw):
            return self._number(raw)
        if self._inference.looks_boolean(raw):
            return self._inference.parse_boolean(raw)
        return raw

    def _number(self, raw: str) -> float:
        number = self._inference.parse_number(raw)
        if number is None:
            raise _Skip(SkipReason.MALFORMED_NUMBER)
        return number


# ---------------------------------------------------------------------------
# Module-level helpers using the default (lenient) compiler
# ---------------------------------------------------------------------------

_default = QueryCompiler()


def compile_query(search: str | None) -> FilterExpression:
    """Compile *search* into a :class:`FilterExpression`."""
    return _default.compile(search)


def compile_with_diagnostics(search: str | None) -> CompileResult:
    return _default.compile_with_diagnostics(search)


def build_query(search: str | None) -> str:
    """Compile *search* into compact MongoDB filter JSON text."""
    return _default.build_query(search)


__all__ = [
    "CompileResult",
    "QueryCompiler",
    "SkipReason",
    "SkippedTerm",
    "build_query",
    "compile_query",
    "compile_with_diagnostics",
]
