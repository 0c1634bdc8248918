"""Configuration for bill-audit.

Resolve once, freeze, then pass the `FrozenConfig` down:

- ResolvedConfig: merged values plus the origin of each value
- FrozenConfig: immutable values read by adapters and the orchestrator
- config_scope / config_override: ambient overrides for resolution
"""

from .api import check_environment, resolve_config
from .audit import SourceTracker, generate_origin_summary, generate_redacted_audit
from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import BillAuditSettings
from .scope import config_override, config_scope, get_ambient_resolved_config
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [  # noqa: RUF022
    # Main API
    "resolve_config",
    "check_environment",
    # Scoping
    "config_scope",
    "config_override",
    "get_ambient_resolved_config",
    # Core types
    "ResolvedConfig",
    "FrozenConfig",
    "SourceMap",
    "ConfigOrigin",
    # Advanced usage
    "BillAuditSettings",
    "ConfigResolver",
    "FileConfigLoader",
    "ConfigFileError",
    "SourceTracker",
    "generate_redacted_audit",
    "generate_origin_summary",
]
