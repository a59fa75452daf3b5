"""
Historical chart version lookup.
"""

from typing import Any, Protocol

import yaml

from ..shared_utilities import get_logger
from .data_models import ChartSnapshot, Commit
from .errors import GitError


class FileContentReader(Protocol):
    def get_file_content(self, sha: str, path: str) -> str | None: ...


def _scalar(value: Any) -> str | None:
    """Render a YAML scalar as a string; empty or structured values are None."""
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def parse_chart(content: str) -> ChartSnapshot | None:
    """
    Parse Chart.yaml content.

    Returns:
        The snapshot, or None if the document is not a YAML mapping
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict):
        return None

    return ChartSnapshot(
        version=_scalar(data.get("version")),
        app_version=_scalar(data.get("appVersion")),
        api_version=_scalar(data.get("apiVersion")),
    )


class VersionExtractor:
    """
    Reads the declared chart version as of a commit.

    Any failure (file missing at that revision, git error, invalid YAML)
    degrades to an unknown version instead of raising.
    """

    def __init__(self, reader: FileContentReader):
        self.reader = reader
        self.logger = get_logger(__name__)
        self._snapshots: dict[tuple[str, str], ChartSnapshot | None] = {}

    def snapshot_at(self, commit: Commit, chart_file: str) -> ChartSnapshot | None:
        """Return the chart metadata at ``commit``, or None if unavailable."""
        key = (commit.sha, chart_file)
        if key in self._snapshots:
            return self._snapshots[key]

        snapshot = None
        try:
            content = self.reader.get_file_content(commit.sha, chart_file)
        except GitError as e:
            self.logger.debug(f"Could not read {chart_file} at {commit.short_sha}: {e}")
        else:
            if content is None:
                self.logger.debug(f"{chart_file} does not exist at {commit.short_sha}")
            else:
                snapshot = parse_chart(content)
                if snapshot is None:
                    self.logger.debug(
                        f"{chart_file} at {commit.short_sha} is not a valid chart"
                    )

        self._snapshots[key] = snapshot
        return snapshot

    def version_at(self, commit: Commit, chart_file: str) -> str | None:
        """Return the declared version at ``commit``, or None if unknown."""
        snapshot = self.snapshot_at(commit, chart_file)
        return snapshot.version if snapshot else None
