"""Utility-bill auditing on top of Gemini, with a repair-retry response layer."""

import importlib.metadata
import logging

from bill_audit.client import GeminiAdapter, GenerationAdapter, ScriptedAdapter, create_adapter
from bill_audit.config import FrozenConfig, config_override, config_scope, resolve_config
from bill_audit.core.types import Document, Failure, Result, Success
from bill_audit.exceptions import (
    BillAuditError,
    ConfigurationError,
    DocumentError,
    ExtractionError,
    InvalidTransitionError,
    MissingKeyError,
    ParseError,
    ResponseFormatError,
    TerminalAnalysisError,
    TransportError,
    UnsupportedContentError,
)
from bill_audit.frontdoor import (
    analyze_bill,
    analyze_document,
    extract_bill_metrics,
    extract_document_metrics,
)
from bill_audit.pipeline import AttemptPhase, MetricsExtractor, RepairRetryOrchestrator
from bill_audit.presentation import (
    DisputeEmail,
    Pin,
    build_dispute_email,
    build_pins,
    page_for_pin,
    pins_on_page,
)
from bill_audit.response import BillAnalysis, BillMetrics, sanitize_analysis, sanitize_metrics
from bill_audit.session import AnalysisSession, FailureKind, SessionState
from bill_audit.telemetry import TelemetryContext, TelemetryReporter

# Version handling
try:
    __version__ = importlib.metadata.version("bill-audit")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [  # noqa: RUF022
    # Entry points
    "analyze_bill",
    "analyze_document",
    "extract_bill_metrics",
    "extract_document_metrics",
    # Pipeline
    "AnalysisSession",
    "SessionState",
    "FailureKind",
    "RepairRetryOrchestrator",
    "AttemptPhase",
    "MetricsExtractor",
    "sanitize_analysis",
    "sanitize_metrics",
    # Adapters
    "GenerationAdapter",
    "GeminiAdapter",
    "ScriptedAdapter",
    "create_adapter",
    # Configuration
    "resolve_config",
    "config_scope",
    "config_override",
    "FrozenConfig",
    # Telemetry (extension points)
    "TelemetryContext",
    "TelemetryReporter",
    # Core Types & Data Models
    "Document",
    "BillAnalysis",
    "BillMetrics",
    "Result",
    "Success",
    "Failure",
    # Presentation helpers
    "Pin",
    "DisputeEmail",
    "build_pins",
    "pins_on_page",
    "page_for_pin",
    "build_dispute_email",
    # Exceptions
    "BillAuditError",
    "ConfigurationError",
    "MissingKeyError",
    "DocumentError",
    "UnsupportedContentError",
    "ResponseFormatError",
    "ExtractionError",
    "ParseError",
    "TerminalAnalysisError",
    "TransportError",
    "InvalidTransitionError",
]
