"""Core data types that flow through the analysis pipeline.

`Document` is the immutable input to every model call; `Success` and
`Failure` make the outcome of a single attempt an explicit value instead of
an exception flowing through the orchestrator.
"""

from __future__ import annotations

import base64
import binascii
import dataclasses
import mimetypes
from pathlib import Path

from bill_audit.constants import SUPPORTED_MIME_TYPES
from bill_audit.exceptions import DocumentError, UnsupportedContentError


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Result type for per-attempt outcomes ---


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful outcome."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure: Exception]:
    """A failed outcome, containing the error."""

    error: TFailure


type Result[TSuccess, TFailure: Exception] = Success[TSuccess] | Failure[TFailure]


# --- Document input ---


@dataclasses.dataclass(frozen=True, slots=True)
class Document:
    """An uploaded bill held in memory.

    Attributes:
        data: Raw document bytes.
        mime_type: One of the supported PDF/image MIME types.
        name: Optional display name (usually the original filename).
    """

    data: bytes
    mime_type: str
    name: str | None = None

    def __post_init__(self) -> None:
        """Validate document invariants."""
        _require(
            condition=isinstance(self.data, bytes),
            message="must be bytes",
            field_name="data",
            exc=TypeError,
        )
        _require(
            condition=len(self.data) > 0,
            message="document is empty",
            field_name="data",
            exc=DocumentError,
        )
        _require(
            condition=isinstance(self.mime_type, str)
            and self.mime_type.strip().lower() in SUPPORTED_MIME_TYPES,
            message=(
                f"unsupported MIME type {self.mime_type!r}; expected one of "
                f"{sorted(SUPPORTED_MIME_TYPES)}"
            ),
            field_name="mime_type",
            exc=UnsupportedContentError,
        )

    @property
    def size_bytes(self) -> int:
        """Size of the document payload in bytes."""
        return len(self.data)

    @property
    def normalized_mime_type(self) -> str:
        """Lower-cased MIME type as sent to the model."""
        return self.mime_type.strip().lower()

    def check_size(self, max_bytes: int) -> None:
        """Raise `DocumentError` when the payload exceeds ``max_bytes``."""
        _require(
            condition=self.size_bytes <= max_bytes,
            message=f"document is {self.size_bytes} bytes; limit is {max_bytes}",
            field_name="data",
            exc=DocumentError,
        )

    def to_base64(self) -> str:
        """Return the payload as plain base64 without a data-URL header."""
        return base64.b64encode(self.data).decode("ascii")

    @classmethod
    def from_base64(
        cls, payload: str, mime_type: str, *, name: str | None = None
    ) -> Document:
        """Create a document from a base64 payload.

        A data-URL header such as ``data:application/pdf;base64,`` is stripped
        first: everything up to and including the first comma is discarded.

        Raises:
            DocumentError: If the payload is not valid base64 or is empty.
        """
        _require(
            condition=isinstance(payload, str),
            message="must be str",
            field_name="payload",
            exc=TypeError,
        )
        encoded = payload.split(",", 1)[1] if "," in payload else payload
        try:
            data = base64.b64decode(encoded.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise DocumentError(f"payload is not valid base64: {e}") from e
        return cls(data=data, mime_type=mime_type, name=name)

    @classmethod
    def from_file(cls, path: str | Path) -> Document:
        """Create a document from a local file, guessing its MIME type.

        Raises:
            DocumentError: If the path is not an existing file.
            UnsupportedContentError: If the extension maps to no supported type.
        """
        file_path = Path(path)
        _require(
            condition=file_path.is_file(),
            message="path must point to an existing file",
            field_name="path",
            exc=DocumentError,
        )
        mime_type, _ = mimetypes.guess_type(str(file_path))
        return cls(
            data=file_path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
            name=file_path.name,
        )
