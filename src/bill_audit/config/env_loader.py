"""Environment variable configuration loading.

Reads ``BILL_AUDIT_*`` variables, plus ``GEMINI_API_KEY`` and
``GEMINI_MODEL`` as fallbacks, optionally loading a ``.env`` file first.
"""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from .schema import BillAuditSettings

# Earlier entries win when several variables map to the same field
ENV_VARS: tuple[tuple[str, str], ...] = (
    ("BILL_AUDIT_API_KEY", "api_key"),
    ("GEMINI_API_KEY", "api_key"),
    ("BILL_AUDIT_MODEL", "model"),
    ("GEMINI_MODEL", "model"),
    ("BILL_AUDIT_USE_REAL_API", "use_real_api"),
    ("BILL_AUDIT_REQUEST_TIMEOUT_S", "request_timeout_s"),
    ("BILL_AUDIT_MAX_DOCUMENT_BYTES", "max_document_bytes"),
)


class EnvironmentConfigLoader:
    """Loads configuration values that are set in the environment."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Return the fields that are explicitly set in the environment.

        Args:
            env_file: Optional ``.env`` file loaded before reading variables.
                Variables already present in the environment are not replaced.

        Raises:
            FileNotFoundError: If ``env_file`` does not exist.
            ValueError: If a variable holds a value the schema rejects.
        """
        if env_file:
            env_path = Path(env_file)
            if not env_path.is_file():
                raise FileNotFoundError(f"Environment file not found: {env_path}")
            load_dotenv(env_path, override=False)

        env_values: dict[str, str] = {}
        used_vars: list[str] = []
        for env_var, field_name in ENV_VARS:
            if field_name in env_values or env_var not in os.environ:
                continue
            env_values[field_name] = os.environ[env_var]
            used_vars.append(env_var)

        if not env_values:
            return {}

        try:
            settings = BillAuditSettings(**env_values)
        except ValidationError as e:
            raise ValueError(
                f"Invalid environment variable values in {', '.join(used_vars)}: {e}"
            ) from e

        return {field_name: getattr(settings, field_name) for field_name in env_values}

    def get_env_summary(self) -> dict[str, str]:
        """Return the recognised variables that are set, with secrets redacted."""
        summary = {}
        for env_var, _ in ENV_VARS:
            if env_var in os.environ:
                summary[env_var] = (
                    "<redacted>" if "API_KEY" in env_var else os.environ[env_var]
                )
        return summary
