"""Application query – search string to MongoDB filter compilation."""
from object_service.application.query.compiler import (
    CompileResult,
    QueryCompiler,
    SkippedTerm,
    SkipReason,
    build_query,
    compile_query,
    compile_with_diagnostics,
)
from object_service.application.query.expression import (
    ComparisonOp,
    ComparisonSet,
    FieldValue,
    FilterExpression,
    LiteralValue,
)
from object_service.application.query.inference import (
    LenientTypeInference,
    StrictTypeInference,
    TypeInference,
)

__all__ = [
    "ComparisonOp",
    "ComparisonSet",
    "CompileResult",
    "FieldValue",
    "FilterExpression",
    "LenientTypeInference",
    "LiteralValue",
    "QueryCompiler",
    "SkipReason",
    "SkippedTerm",
    "StrictTypeInference",
    "TypeInference",
    "build_query",
    "compile_query",
    "compile_with_diagnostics",
]
