"""Configuration data types for bill-audit.

Configuration is resolved once into a `ResolvedConfig` (values plus the
origin of each value) and then frozen into a `FrozenConfig` that the
pipeline reads.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

# Display order for audits and summaries
CONFIG_FIELDS = (
    "api_key",
    "model",
    "use_real_api",
    "request_timeout_s",
    "max_document_bytes",
)


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing."""

    api_key: str | None
    model: str
    use_real_api: bool
    request_timeout_s: float
    max_document_bytes: int

    # Where each field value came from
    origin: SourceMap

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"ResolvedConfig(api_key={api_key_display!r}, model={self.model!r}, "
            f"use_real_api={self.use_real_api!r}, "
            f"request_timeout_s={self.request_timeout_s!r}, "
            f"max_document_bytes={self.max_document_bytes!r}, "
            f"origin={dict(self.origin)!r})"
        )

    def __repr__(self) -> str:
        """Repr with redacted API key for safe debugging."""
        return self.__str__()

    def to_frozen(self) -> "FrozenConfig":
        """Drop audit metadata and return the immutable pipeline config."""
        return FrozenConfig(
            api_key=self.api_key,
            model=self.model,
            use_real_api=self.use_real_api,
            request_timeout_s=self.request_timeout_s,
            max_document_bytes=self.max_document_bytes,
        )

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Return a copy with programmatic overrides applied.

        Unknown fields are ignored. Overridden fields are marked as
        ``programmatic`` in the origin map.
        """
        new_values = self._asdict()
        new_origin = dict(self.origin)
        for field, value in overrides.items():
            if field in CONFIG_FIELDS:
                new_values[field] = value
                new_origin[field] = "programmatic"
        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Return a redacted, human-readable report of each field's origin."""
        from .audit import generate_redacted_audit

        values = {field: getattr(self, field) for field in CONFIG_FIELDS}
        return generate_redacted_audit(values, self.origin)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration handed to adapters and the orchestrator."""

    api_key: str | None
    model: str
    use_real_api: bool
    request_timeout_s: float
    max_document_bytes: int

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"FrozenConfig(api_key={api_key_display!r}, model={self.model!r}, "
            f"use_real_api={self.use_real_api!r}, "
            f"request_timeout_s={self.request_timeout_s!r}, "
            f"max_document_bytes={self.max_document_bytes!r})"
        )

    def __repr__(self) -> str:
        """Representation with redacted API key for safe debugging."""
        return self.__str__()
