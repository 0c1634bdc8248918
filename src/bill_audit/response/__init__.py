"""Response handling: extraction, parsing, normalizing and sanitizing."""

from .extraction import extract_json_object, strip_code_fences
from .parsing import parse_json_object, parse_model_text
from .sanitizer import sanitize_analysis, sanitize_metrics
from .types import (
    BillAnalysis,
    BillMetrics,
    BillType,
    Comparison,
    ErrorAnalysis,
    Issue,
    JsonValue,
    RegionalComparison,
    SavingsTip,
    Verdict,
)

__all__ = [  # noqa: RUF022
    # Pipeline steps
    "extract_json_object",
    "strip_code_fences",
    "parse_json_object",
    "parse_model_text",
    "sanitize_analysis",
    "sanitize_metrics",
    # Records
    "BillAnalysis",
    "BillMetrics",
    "ErrorAnalysis",
    "Issue",
    "RegionalComparison",
    "SavingsTip",
    # Value types
    "BillType",
    "Comparison",
    "JsonValue",
    "Verdict",
]
