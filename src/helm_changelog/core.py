"""
Release reconstruction and per-chart changelog generation.
"""

from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ..shared_utilities import (
    OutputManager,
    get_logger,
    trace_function,
    trace_operation,
)
from .chart_finder import find_charts
from .config import ChangelogConfig
from .data_models import (
    ChartLocation,
    ChartResult,
    ChartSnapshot,
    Commit,
    Release,
    RunSummary,
)
from .errors import HelmChangelogError, OrderingViolation, OutputWriteError
from .git_client import GitClient
from .output_formatter import ChangelogFormatter
from .version_extractor import VersionExtractor

ProgressCallback = Callable[[int, int, str], None]


def check_order(commits: Sequence[Commit]) -> None:
    """
    Verify that commits are ordered newest-first.

    Equal timestamps are allowed.

    Raises:
        OrderingViolation: At the first commit newer than its predecessor
    """
    for index in range(1, len(commits)):
        previous, current = commits[index - 1], commits[index]
        if current.timestamp > previous.timestamp:
            raise OrderingViolation(
                f"Commit {current.short_sha} ({current.timestamp.isoformat()}) "
                f"is newer than the preceding commit {previous.short_sha} "
                f"({previous.timestamp.isoformat()})",
                index=index,
            )


def _make_release(
    version: str | None, bucket: list[Commit], snapshot: ChartSnapshot | None
) -> Release:
    return Release(
        version=version,
        release_timestamp=bucket[0].timestamp,
        changes=tuple(bucket),
        app_version=snapshot.app_version if snapshot else None,
        api_version=snapshot.api_version if snapshot else None,
    )


def fold_releases(
    entries: Iterable[tuple[Commit, ChartSnapshot | None]],
) -> list[Release]:
    """
    Group newest-first commits into releases.

    A release is closed when a commit declares a known version different
    from the current one; that commit opens the next (older) release. A
    commit with an unknown version stays in the current release. The
    version-bump commit is therefore the newest change of the release it
    introduces. Version strings are compared for equality only, so a
    revert yields a second release with an earlier label.

    Args:
        entries: (commit, snapshot) pairs, newest first; snapshot may be None

    Returns:
        Releases, newest first
    """
    releases: list[Release] = []
    current_version: str | None = None
    bucket: list[Commit] = []
    bucket_snapshot: ChartSnapshot | None = None

    for commit, snapshot in entries:
        version = snapshot.version if snapshot else None

        if current_version is None:
            current_version = version
            bucket.append(commit)
        elif version is not None and version != current_version:
            releases.append(_make_release(current_version, bucket, bucket_snapshot))
            current_version = version
            bucket = [commit]
            bucket_snapshot = None
        else:
            bucket.append(commit)

        if bucket_snapshot is None and version is not None:
            bucket_snapshot = snapshot

    if bucket:
        releases.append(_make_release(current_version, bucket, bucket_snapshot))

    return releases


class ReleaseReconstructor:
    """Reconstructs the release history of one chart from its commits."""

    def __init__(self, extractor: VersionExtractor, workers: int = 1):
        """
        Args:
            extractor: Source of historical chart snapshots
            workers: Threads used to read snapshots ahead of the fold
        """
        self.extractor = extractor
        self.workers = workers
        self.logger = get_logger(__name__)

    def _snapshots(
        self, commits: Sequence[Commit], chart_file: str
    ) -> list[ChartSnapshot | None]:
        if self.workers > 1 and len(commits) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                return list(
                    pool.map(
                        lambda c: self.extractor.snapshot_at(c, chart_file), commits
                    )
                )
        return [self.extractor.snapshot_at(c, chart_file) for c in commits]

    @trace_function("reconstruct_releases")
    def reconstruct(self, commits: Sequence[Commit], chart_file: str) -> list[Release]:
        """
        Build the release list for ``chart_file``.

        Args:
            commits: Commits touching the chart, newest first
            chart_file: Chart file path relative to the repository root

        Returns:
            Releases, newest first; empty for empty history

        Raises:
            OrderingViolation: If ``commits`` is not newest-first
        """
        check_order(commits)
        snapshots = self._snapshots(commits, chart_file)

        unknown = sum(1 for s in snapshots if s is None or s.version is None)
        if unknown:
            self.logger.debug(
                f"{unknown} of {len(commits)} commits have no readable version",
                chart=chart_file,
            )

        releases = fold_releases(zip(commits, snapshots))
        self.logger.debug(
            f"Reconstructed {len(releases)} releases from {len(commits)} commits",
            chart=chart_file,
        )
        return releases


class ChangelogGenerator:
    """
    Generates a changelog for every chart below the configured directory.

    Charts are processed independently: an error in one chart is recorded
    in the run summary and processing continues with the next chart.
    """

    def __init__(
        self,
        config: ChangelogConfig,
        cwd: str | Path | None = None,
        git_client: GitClient | None = None,
        formatter: ChangelogFormatter | None = None,
        output_manager: OutputManager | None = None,
    ):
        """Initialize generator.

        Args:
            config: Effective configuration
            cwd: Working directory the chart directory is relative to
            git_client: Git access (defaults to a client rooted at ``cwd``)
            formatter: Document renderer
            output_manager: Writer for generated documents
        """
        self.config = config
        self.cwd = Path(cwd or Path.cwd()).resolve()
        self.git = git_client or GitClient(self.cwd)
        self.formatter = formatter or ChangelogFormatter()
        self.output_manager = output_manager or OutputManager()
        self.reconstructor = ReleaseReconstructor(
            VersionExtractor(self.git), workers=config.workers
        )
        self.logger = get_logger(__name__)

    def locate(self, chart_file: Path, repo_root: Path) -> ChartLocation:
        """Describe a chart file relative to the repository root."""
        chart_file = chart_file.resolve()
        try:
            relative = chart_file.relative_to(repo_root).as_posix()
        except ValueError as e:
            raise HelmChangelogError(
                f"Chart {chart_file} is outside repository {repo_root}"
            ) from e
        return ChartLocation(chart_file=chart_file, repo_relative_file=relative)

    def process_chart(self, chart: ChartLocation) -> ChartResult:
        """
        Reconstruct and write the changelog for one chart.

        Raises:
            HelmChangelogError: If history retrieval, reconstruction or
                writing fails
        """
        with trace_operation(
            "process_chart", {"chart": chart.repo_relative_file}
        ):
            self.logger.info(f"Handling: {chart.chart_file}")

            commits = self.git.get_all_commits(chart.chart_dir)
            releases = self.reconstructor.reconstruct(
                commits, chart.repo_relative_file
            )
            content = self.formatter.format(
                releases, chart.name, self.config.output_format
            )

            output_path = chart.chart_dir / self.config.filename
            try:
                self.output_manager.save_output(content, output_path)
            except OSError as e:
                raise OutputWriteError(
                    f"Failed to write {output_path}: {e}"
                ) from e

            self.logger.info(
                f"Wrote {len(releases)} releases to {output_path}",
                chart=chart.name,
            )
            return ChartResult(
                chart=chart, output_path=output_path, release_count=len(releases)
            )

    @trace_function("generate_changelogs")
    def run(self, progress_callback: ProgressCallback | None = None) -> RunSummary:
        """
        Generate changelogs for all discovered charts.

        Args:
            progress_callback: Called with (current, total, message) per chart

        Returns:
            Summary of per-chart outcomes

        Raises:
            RepositoryNotFoundError: If the working directory is not in a repository
            ChartDiscoveryError: If the chart directory cannot be scanned
        """
        repo_root = self.git.find_repository_root()
        search_dir = self.cwd / self.config.directory
        chart_files = find_charts(search_dir, self.config.chart_filename)

        summary = RunSummary()
        total = len(chart_files)
        for index, chart_file in enumerate(chart_files, start=1):
            if progress_callback:
                progress_callback(index, total, f"Processing {chart_file}")

            try:
                chart = self.locate(chart_file, repo_root)
                summary.results.append(self.process_chart(chart))
            except HelmChangelogError as e:
                self.logger.error(f"Failed to process {chart_file}: {e}")
                summary.results.append(
                    ChartResult(
                        chart=ChartLocation(
                            chart_file=chart_file, repo_relative_file=str(chart_file)
                        ),
                        error=str(e),
                    )
                )

        self.logger.info(
            f"Processed {total} charts: {len(summary.succeeded)} written, "
            f"{len(summary.failed)} failed"
        )
        return summary
