"""Public entry points of the configuration system."""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .scope import get_ambient_resolved_config
from .types import ResolvedConfig

_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Inside a `config_scope`, the scoped configuration is the base and
    ``programmatic`` overrides are applied on top of it.

    Args:
        programmatic: Programmatic overrides (highest precedence).
        use_env_file: Optional path to a ``.env`` file.
        project_root: Directory to search for ``pyproject.toml``.

    Raises:
        ConfigurationError: If configuration sources are malformed or invalid.

    Example:
        config = resolve_config({"use_real_api": True, "api_key": "..."})
        frozen = config.to_frozen()
    """
    ambient_config = get_ambient_resolved_config()
    if ambient_config is not None:
        if programmatic:
            return ambient_config.with_overrides(**programmatic)
        return ambient_config

    return _resolver.resolve(
        programmatic=programmatic,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def check_environment() -> dict[str, str]:
    """Return the recognised configuration variables that are set (redacted)."""
    return _resolver.env_loader.get_env_summary()
