"""Source tracking and redacted audit output for resolved configuration."""

from typing import Any

from .types import CONFIG_FIELDS, ConfigOrigin, SourceMap

SENSITIVE_FIELDS = frozenset({"api_key"})


class SourceTracker:
    """Records where each configuration value came from during resolution."""

    def __init__(self) -> None:
        self._origins: dict[str, ConfigOrigin] = {}

    def set_origin(self, field: str, origin: ConfigOrigin) -> None:
        self._origins[field] = origin

    def set_multiple(self, fields: dict[str, Any], origin: ConfigOrigin) -> None:
        for field in fields:
            self._origins[field] = origin

    def get_source_map(self) -> SourceMap:
        """Return a copy of the recorded origins."""
        return dict(self._origins)


def generate_redacted_audit(config_dict: dict[str, Any], source_map: SourceMap) -> str:
    """Render one ``field: origin:value`` line per field, hiding secrets.

    Args:
        config_dict: The configuration values.
        source_map: The origin of each field.

    Returns:
        The audit report as a string.
    """
    lines = []
    for field in CONFIG_FIELDS:
        if field not in source_map:
            continue
        origin = source_map[field]
        value = config_dict.get(field, "<missing>")
        if field in SENSITIVE_FIELDS:
            value_display = "None" if value is None else "<redacted>"
        else:
            value_display = str(value)
        lines.append(f"{field}: {origin}:{value_display}")
    return "\n".join(lines)


def generate_origin_summary(source_map: SourceMap) -> dict[str, int]:
    """Count fields per origin, e.g. ``{"env": 2, "default": 3}``."""
    counts: dict[str, int] = {}
    for origin in source_map.values():
        counts[origin] = counts.get(origin, 0) + 1
    return counts
