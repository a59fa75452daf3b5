"""
Helm chart changelog generation.

Reconstructs the release history of each chart from git and renders it as
a changelog document inside the chart directory.
"""

from .config import ChangelogConfig, ConfigManager
from .core import ChangelogGenerator, ReleaseReconstructor, fold_releases
from .data_models import ChartSnapshot, Commit, Release
from .errors import (
    ChartDiscoveryError,
    ConfigurationError,
    GitError,
    HelmChangelogError,
    OrderingViolation,
    OutputWriteError,
    RepositoryNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "ChangelogConfig",
    "ConfigManager",
    "ChangelogGenerator",
    "ReleaseReconstructor",
    "fold_releases",
    "ChartSnapshot",
    "Commit",
    "Release",
    "HelmChangelogError",
    "ConfigurationError",
    "GitError",
    "RepositoryNotFoundError",
    "ChartDiscoveryError",
    "OrderingViolation",
    "OutputWriteError",
]
