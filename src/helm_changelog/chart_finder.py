"""
Discovery of Helm charts in a directory tree.
"""

import os
from pathlib import Path

from ..shared_utilities import get_logger
from .errors import ChartDiscoveryError

logger = get_logger(__name__)


def find_charts(root: str | Path, chart_filename: str = "Chart.yaml") -> list[Path]:
    """
    Find every chart definition file below ``root``.

    Hidden directories (``.git`` and friends) are not searched.

    Args:
        root: Directory to scan
        chart_filename: Name of the chart definition file

    Returns:
        Absolute paths of the chart files, sorted

    Raises:
        ChartDiscoveryError: If ``root`` is missing or cannot be read
    """
    root = Path(root).resolve()
    if not root.is_dir():
        raise ChartDiscoveryError(f"Chart directory does not exist: {root}")

    def _raise(error: OSError) -> None:
        raise ChartDiscoveryError(f"Failed to scan {error.filename}: {error}") from error

    charts = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        if chart_filename in filenames:
            charts.append(Path(dirpath) / chart_filename)

    logger.info(f"Found {len(charts)} charts below {root}")
    return sorted(charts)
