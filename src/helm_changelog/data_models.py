"""
Data models for changelog generation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class Commit:
    """A single commit touching a chart directory."""

    sha: str
    timestamp: datetime  # committer date, timezone-aware
    author: str
    message: str
    author_email: str = ""

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.strip().splitlines()[0] if self.message.strip() else ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True)
class ChartSnapshot:
    """Chart metadata as declared at one commit."""

    version: str | None
    app_version: str | None = None
    api_version: str | None = None


@dataclass(frozen=True)
class Release:
    """A period of chart history sharing one declared version."""

    version: str | None  # None when no commit yielded a parsable version
    release_timestamp: datetime
    changes: tuple[Commit, ...]  # newest first, bump commit included
    app_version: str | None = None
    api_version: str | None = None

    @property
    def display_version(self) -> str:
        return self.version if self.version is not None else UNKNOWN_LABEL

    @property
    def helm_version(self) -> str | None:
        """Helm major version implied by the chart apiVersion."""
        return {"v1": "v2", "v2": "v3"}.get(self.api_version or "")


@dataclass(frozen=True)
class ChartLocation:
    """Paths describing one discovered chart."""

    chart_file: Path  # absolute path of Chart.yaml
    repo_relative_file: str  # chart file relative to the repository root

    @property
    def chart_dir(self) -> Path:
        return self.chart_file.parent

    @property
    def name(self) -> str:
        return self.chart_dir.name


@dataclass
class ChartResult:
    """Outcome of processing one chart."""

    chart: ChartLocation
    output_path: Path | None = None
    release_count: int = 0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    """Outcome of a full changelog run."""

    results: list[ChartResult] = field(default_factory=list)

    @property
    def failed(self) -> list[ChartResult]:
        return [r for r in self.results if not r.succeeded]

    @property
    def succeeded(self) -> list[ChartResult]:
        return [r for r in self.results if r.succeeded]

    @property
    def ok(self) -> bool:
        return not self.failed
