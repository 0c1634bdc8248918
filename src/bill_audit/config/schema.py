"""Settings schema using Pydantic.

Validates and coerces configuration values gathered from the environment,
`pyproject.toml` and programmatic overrides.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bill_audit.constants import DEFAULT_MODEL, DEFAULT_REQUEST_TIMEOUT, MAX_DOCUMENT_SIZE


class BillAuditSettings(BaseSettings):
    """Pydantic settings schema for bill-audit configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BILL_AUDIT_",
        env_file=None,  # .env loading is explicit, see env_loader
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Gemini model identifier",
        min_length=1,
    )

    use_real_api: bool = Field(
        default=False,
        description="Call Gemini instead of the built-in scripted adapter",
    )

    request_timeout_s: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        description="Upper bound for a single model call, in seconds",
        gt=0,
    )

    max_document_bytes: int = Field(
        default=MAX_DOCUMENT_SIZE,
        description="Largest accepted upload, in bytes",
        ge=1,
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v: Any) -> Any:
        """Treat an empty or whitespace-only key as not configured."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        """Return schema defaults without reading the environment."""
        return {name: field.default for name, field in cls.model_fields.items()}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary keyed by field name."""
        return {
            "api_key": self.api_key,
            "model": self.model,
            "use_real_api": self.use_real_api,
            "request_timeout_s": self.request_timeout_s,
            "max_document_bytes": self.max_document_bytes,
        }
