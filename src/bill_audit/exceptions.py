"""Exceptions raised by the bill-audit package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class BillAuditError(Exception):
    """Base exception for bill-audit errors."""


class ConfigurationError(BillAuditError):
    """Raised when settings cannot be resolved or fail validation."""


class MissingKeyError(ConfigurationError):
    """Raised when the API key is required but not configured."""


class DocumentError(BillAuditError):
    """Raised when an uploaded document cannot be used."""


class UnsupportedContentError(DocumentError):
    """Raised when the document MIME type is not supported."""


class ResponseFormatError(BillAuditError):
    """Base for model responses that do not yield a JSON object.

    These are the only errors that trigger the repair attempt.
    """

    def __init__(self, message: str, *, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ExtractionError(ResponseFormatError):
    """Raised when no brace-delimited region exists in the model text."""


class ParseError(ResponseFormatError):
    """Raised when the extracted region is not a valid JSON object."""


class TransportError(BillAuditError):
    """Raised when calling the model fails (network, auth, quota, timeout)."""


class TerminalAnalysisError(BillAuditError):
    """Raised when the repair attempt also fails to produce a JSON object.

    Attributes:
        raw_text: The offending text returned by the repair attempt.
        errors: The format errors of every attempt, in order.
    """

    def __init__(
        self,
        message: str,
        *,
        raw_text: str,
        errors: Sequence[ResponseFormatError] = (),
    ) -> None:
        super().__init__(message)
        self.raw_text = raw_text
        self.errors = tuple(errors)


class InvalidTransitionError(BillAuditError):
    """Raised when an analysis session is driven through an illegal transition."""
