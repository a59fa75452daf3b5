"""
Main CLI entry point for changelog generation.
"""

import sys

import click
from dotenv import load_dotenv

from ..shared_utilities import (
    configure_logging,
    get_logger,
    get_telemetry_manager,
    trace_operation,
)
from .config import OUTPUT_FORMATS, ConfigManager
from .core import ChangelogGenerator
from .errors import ConfigurationError, HelmChangelogError, RepositoryNotFoundError

# Load environment variables from .env file
load_dotenv()


class ProgressIndicator:
    """Simple progress indicator for CLI operations."""

    def __init__(self, quiet: bool = False):
        """Initialize progress indicator.

        Args:
            quiet: If True, suppress progress output
        """
        self.quiet = quiet

    def update(self, current: int, total: int, message: str) -> None:
        """Update progress display."""
        if self.quiet:
            return
        click.echo(f"[{current}/{total}] {message}", err=True)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-f",
    "--filename",
    help="Filename for changelog  [default: Changelog.md]",
)
@click.option(
    "-v",
    "--verbosity",
    help="Log level (debug, info, warn, error, fatal, panic)  [default: warning]",
)
@click.option(
    "-d",
    "--directory",
    help=(
        "Relative path to directories to search for Helm Charts. "
        "By default scans all subdirectories of working directory."
    ),
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    help="Output format  [default: markdown]",
)
@click.option(
    "-w",
    "--workers",
    type=click.IntRange(min=1),
    help="Threads used to read historical chart versions  [default: 1]",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Also write logs to this file",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    help="JSON configuration file  [default: .helm-changelog.json if present]",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Suppress progress output",
)
def main(
    filename: str | None,
    verbosity: str | None,
    directory: str | None,
    output_format: str | None,
    workers: int | None,
    log_file: str | None,
    config_file: str | None,
    quiet: bool,
) -> None:
    """
    Create changelogs for Helm Charts, based on git history.

    Every Chart.yaml below the search directory gets a changelog written next
    to it, with one section per chart version reconstructed from the commits
    that touched the chart directory.

    Examples:

        # Generate Changelog.md for every chart in the repository
        helm-changelog

        # Only charts below ./charts, with info logging
        helm-changelog -d charts -v info

        # Write JSON instead of Markdown
        helm-changelog --format json -f changelog.json
    """
    # Provisional sinks for messages emitted while loading the configuration
    try:
        configure_logging(verbosity)
    except ValueError:
        configure_logging("warning")

    try:
        config = ConfigManager(config_file).load(
            filename=filename,
            verbosity=verbosity,
            directory=directory,
            output_format=output_format,
            workers=workers,
            log_file=log_file,
        )
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    configure_logging(config.verbosity, config.log_file)
    logger = get_logger(__name__)
    progress = ProgressIndicator(quiet=quiet)

    try:
        with trace_operation("helm_changelog_main", {"directory": config.directory}):
            summary = ChangelogGenerator(config).run(progress_callback=progress.update)
    except RepositoryNotFoundError as e:
        logger.error(f"Could not determine git root directory: {e}")
        click.echo(
            "Error: Could not determine git root directory. "
            "helm-changelog depends largely on git history.",
            err=True,
        )
        raise click.Abort() from e
    except HelmChangelogError as e:
        logger.error(f"Changelog generation failed: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e
    finally:
        get_telemetry_manager().flush()

    for result in summary.succeeded:
        if not quiet:
            click.echo(f"{result.output_path} ({result.release_count} releases)")

    if not summary.ok:
        for result in summary.failed:
            click.echo(f"Error: {result.chart.chart_file}: {result.error}", err=True)
        click.echo(
            f"{len(summary.failed)} of {len(summary.results)} charts failed", err=True
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
