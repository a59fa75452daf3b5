"""
Exception hierarchy for helm-changelog.
"""


class HelmChangelogError(Exception):
    """Base exception for changelog generation."""

    pass


class ConfigurationError(HelmChangelogError):
    """Raised when configuration values are invalid."""

    pass


class GitError(HelmChangelogError):
    """Raised when a git command fails."""

    def __init__(self, message: str, command: list[str] | None = None):
        super().__init__(message)
        self.command = command or []


class RepositoryNotFoundError(GitError):
    """Raised when the working directory is not inside a git repository."""

    pass


class ChartDiscoveryError(HelmChangelogError):
    """Raised when the chart search directory cannot be scanned."""

    pass


class OrderingViolation(HelmChangelogError):
    """Raised when commit history is not ordered newest-first."""

    def __init__(self, message: str, index: int):
        super().__init__(message)
        self.index = index


class OutputWriteError(HelmChangelogError):
    """Raised when a changelog document cannot be written."""

    pass
