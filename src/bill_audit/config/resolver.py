"""Configuration resolution with precedence handling.

Precedence: Programmatic > Environment > Project file > Defaults.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bill_audit.exceptions import ConfigurationError, MissingKeyError

from .audit import SourceTracker
from .env_loader import EnvironmentConfigLoader
from .file_loader import ConfigFileError, FileConfigLoader
from .schema import BillAuditSettings
from .types import ResolvedConfig

log = logging.getLogger(__name__)


class ConfigResolver:
    """Merges configuration from all sources and validates the result."""

    def __init__(self) -> None:
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources.

        Args:
            programmatic: Overrides with the highest precedence. Unknown keys
                are ignored.
            use_env_file: Optional ``.env`` file to load first.
            project_root: Directory to search for ``pyproject.toml``.

        Returns:
            ResolvedConfig with merged values and source tracking.

        Raises:
            ConfigurationError: If a source is malformed or validation fails.
            MissingKeyError: If ``use_real_api`` is set without an API key.
        """
        source_tracker = SourceTracker()
        merged_config = BillAuditSettings.defaults()
        source_tracker.set_multiple(merged_config, "default")

        try:
            project_config = self.file_loader.load_project_config(project_root)
        except ConfigFileError as e:
            raise ConfigurationError(str(e)) from e
        self._apply(merged_config, project_config, source_tracker, "file")

        try:
            env_config = self.env_loader.load_env_config(env_file=use_env_file)
        except (ValueError, FileNotFoundError) as e:
            raise ConfigurationError(f"Environment configuration error: {e}") from e
        self._apply(merged_config, env_config, source_tracker, "env")

        self._apply(merged_config, programmatic or {}, source_tracker, "programmatic")

        try:
            validated = BillAuditSettings(**merged_config)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        if validated.use_real_api and not validated.api_key:
            raise MissingKeyError(
                "API key required when use_real_api is enabled. Set GEMINI_API_KEY "
                "or BILL_AUDIT_API_KEY, add it to [tool.bill_audit], or pass it "
                "programmatically."
            )

        final_config = validated.to_dict()
        origin = source_tracker.get_source_map()
        log.debug("Resolved configuration origins: %s", dict(origin))
        return ResolvedConfig(**final_config, origin=origin)

    @staticmethod
    def _apply(
        merged: dict[str, Any],
        values: dict[str, Any],
        tracker: SourceTracker,
        origin: Any,
    ) -> None:
        for field, value in values.items():
            if field in merged:  # Only override known fields
                merged[field] = value
                tracker.set_origin(field, origin)
