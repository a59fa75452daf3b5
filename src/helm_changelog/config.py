"""
Configuration system for changelog generation.
"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from ..shared_utilities import get_logger, resolve_level
from .errors import ConfigurationError

DEFAULT_CONFIG_FILE = ".helm-changelog.json"

OUTPUT_FORMATS = ("markdown", "json")

# Environment variable -> config field
ENV_VARIABLES = {
    "HELM_CHANGELOG_FILENAME": "filename",
    "HELM_CHANGELOG_DIRECTORY": "directory",
    "HELM_CHANGELOG_VERBOSITY": "verbosity",
    "HELM_CHANGELOG_FORMAT": "output_format",
    "HELM_CHANGELOG_WORKERS": "workers",
    "HELM_CHANGELOG_LOG_FILE": "log_file",
}

_STRING_FIELDS = ("filename", "directory", "verbosity", "output_format", "chart_filename")


@dataclass(frozen=True)
class ChangelogConfig:
    """Configuration for a changelog run."""

    filename: str = "Changelog.md"
    directory: str = "."
    verbosity: str = "warning"
    output_format: str = "markdown"
    workers: int = 1
    log_file: str | None = None
    chart_filename: str = "Chart.yaml"

    def __post_init__(self):
        """Validate field values."""
        for name in _STRING_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigurationError(f"{name} must be a string: {value!r}")
        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ConfigurationError(f"log_file must be a string: {self.log_file!r}")
        if not self.filename or Path(self.filename).name != self.filename:
            raise ConfigurationError(
                f"Changelog filename must be a plain file name: {self.filename!r}"
            )
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unsupported output format: {self.output_format} "
                f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
            )
        if type(self.workers) is not int or self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1: {self.workers!r}")
        try:
            resolve_level(self.verbosity)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e


class ConfigManager:
    """Loads configuration from file, environment and explicit overrides."""

    def __init__(self, config_file: str | Path | None = None):
        """Initialize config manager.

        Args:
            config_file: Path to a JSON configuration file. Defaults to
                .helm-changelog.json in the working directory, which is
                optional; an explicitly given file must exist.
        """
        self.logger = get_logger(__name__)
        self.explicit = config_file is not None
        self.config_file = Path(config_file or DEFAULT_CONFIG_FILE)

    def _load_file(self) -> dict[str, Any]:
        """Load raw settings from the JSON config file."""
        if not self.config_file.exists():
            if self.explicit:
                raise ConfigurationError(f"Config file not found: {self.config_file}")
            return {}

        try:
            with open(self.config_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to read config file {self.config_file}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {self.config_file} must contain a JSON object"
            )

        known = {f.name for f in fields(ChangelogConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            self.logger.warning(
                f"Ignoring unknown config keys in {self.config_file}: "
                f"{', '.join(unknown)}"
            )
        self.logger.debug(f"Loaded config file {self.config_file}")
        return {k: v for k, v in data.items() if k in known}

    def _load_env(self) -> dict[str, Any]:
        """Load settings from HELM_CHANGELOG_* environment variables."""
        values: dict[str, Any] = {}
        for env_name, field_name in ENV_VARIABLES.items():
            raw = os.getenv(env_name)
            if raw is None or raw == "":
                continue
            if field_name == "workers":
                try:
                    values[field_name] = int(raw)
                except ValueError as e:
                    raise ConfigurationError(
                        f"{env_name} must be an integer: {raw!r}"
                    ) from e
            else:
                values[field_name] = raw
        return values

    def load(self, **overrides: Any) -> ChangelogConfig:
        """
        Build the effective configuration.

        Sources are applied in order: defaults, config file, environment,
        then ``overrides`` (None values are ignored).

        Raises:
            ConfigurationError: If any source holds an invalid value
        """
        settings: dict[str, Any] = {}
        settings.update(self._load_file())
        settings.update(self._load_env())
        settings.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return ChangelogConfig(**settings)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
