"""Project file configuration loading from ``[tool.bill_audit]``."""

from pathlib import Path
import tomllib
from typing import Any


class ConfigFileError(Exception):
    """Raised when a configuration file exists but cannot be used."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


class FileConfigLoader:
    """Loads the ``[tool.bill_audit]`` table of the nearest ``pyproject.toml``."""

    def load_project_config(self, project_root: Path | None = None) -> dict[str, Any]:
        """Return the table's values, or an empty dict when there is none.

        Args:
            project_root: Directory to start searching from. Defaults to the
                current directory; parents are searched upward.

        Raises:
            ConfigFileError: If the file cannot be parsed or the section is
                not a table.
        """
        pyproject_path = self.find_pyproject_toml(project_root)
        if pyproject_path is None:
            return {}

        try:
            with pyproject_path.open(mode="rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(
                pyproject_path, f"Failed to parse TOML: {e}", cause=e
            ) from e

        section = data.get("tool", {}).get("bill_audit", {})
        if not isinstance(section, dict):
            raise ConfigFileError(pyproject_path, "[tool.bill_audit] must be a table")
        return dict(section)

    def find_pyproject_toml(self, start: Path | None = None) -> Path | None:
        current = (start or Path.cwd()).resolve()
        for directory in (current, *current.parents):
            candidate = directory / "pyproject.toml"
            if candidate.is_file():
                return candidate
        return None
