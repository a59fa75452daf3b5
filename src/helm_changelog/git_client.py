"""
Git history access via subprocess.
"""

import subprocess
from datetime import datetime
from pathlib import Path

from ..shared_utilities import get_logger
from .data_models import Commit
from .errors import GitError, RepositoryNotFoundError

# Field and record separators; neither can appear in git metadata
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"

# sha | committer date (strict ISO 8601) | author name | author email | raw body
_LOG_FORMAT = "%H%x1f%cI%x1f%an%x1f%ae%x1f%B%x1e"

# Stderr fragments git prints when a path is absent at an existing revision
_MISSING_PATH_MARKERS = (
    "does not exist in",
    "exists on disk, but not in",
)


class GitClient:
    """Runs git commands against a working tree."""

    def __init__(self, repo_path: str | Path = ".", timeout: float = 120.0):
        """
        Initialize git client.

        Args:
            repo_path: Any directory inside the repository
            timeout: Seconds to wait for a single git command
        """
        self.repo_path = str(Path(repo_path).resolve())
        self.timeout = timeout
        self.logger = get_logger(__name__)

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        cmd = ["git", "-C", self.repo_path, *args]
        self.logger.debug(f"Running {' '.join(cmd)}")
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found", cmd) from e
        except subprocess.TimeoutExpired as e:
            raise GitError(f"git timed out after {self.timeout}s", cmd) from e

    def find_repository_root(self) -> Path:
        """
        Locate the top-level directory of the repository.

        Raises:
            RepositoryNotFoundError: If ``repo_path`` is not inside a work tree
        """
        args = ["rev-parse", "--show-toplevel"]
        try:
            result = self._run(args)
        except GitError as e:
            raise RepositoryNotFoundError(str(e), e.command) from e

        if result.returncode != 0:
            raise RepositoryNotFoundError(
                f"Not a git repository: {self.repo_path} ({result.stderr.strip()})",
                args,
            )
        return Path(result.stdout.strip()).resolve()

    def get_all_commits(self, directory: str | Path) -> list[Commit]:
        """
        Return every commit touching ``directory``, newest first.

        Raises:
            GitError: If git log fails
        """
        args = [
            "log",
            "--date-order",
            f"--format={_LOG_FORMAT}",
            "--",
            str(directory),
        ]
        result = self._run(args)
        if result.returncode != 0:
            raise GitError(
                f"git log failed for {directory}: {result.stderr.strip()}", args
            )

        commits = self._parse_log(result.stdout)
        self.logger.debug(f"Found {len(commits)} commits for {directory}")
        return commits

    def _parse_log(self, raw: str) -> list[Commit]:
        """Parse the separator-delimited git log output into commits."""
        commits = []
        for record in raw.split(_RECORD_SEP):
            record = record.lstrip("\n")
            if not record:
                continue

            parts = record.split(_FIELD_SEP, 4)
            if len(parts) != 5:
                raise GitError(f"Unexpected git log record: {record[:80]!r}")

            sha, date, author, email, body = parts
            try:
                # Older Pythons reject the "Z" suffix git may emit for UTC
                timestamp = datetime.fromisoformat(date.replace("Z", "+00:00"))
            except ValueError as e:
                raise GitError(f"Invalid commit date {date!r} for {sha}") from e

            commits.append(
                Commit(
                    sha=sha,
                    timestamp=timestamp,
                    author=author,
                    author_email=email,
                    message=body.rstrip("\n"),
                )
            )
        return commits

    def get_file_content(self, sha: str, path: str) -> str | None:
        """
        Read ``path`` (relative to the repository root) as of ``sha``.

        Returns:
            File content, or None if the path does not exist at that commit

        Raises:
            GitError: If git fails for any other reason
        """
        args = ["show", f"{sha}:{path}"]
        result = self._run(args)
        if result.returncode == 0:
            return result.stdout

        stderr = result.stderr.strip()
        path_missing = any(marker in stderr for marker in _MISSING_PATH_MARKERS)
        # git words an unknown revision the same way as a missing path
        if path_missing and self.commit_exists(sha):
            return None
        raise GitError(f"git show failed for {sha}:{path}: {stderr}", args)

    def commit_exists(self, sha: str) -> bool:
        """Return True if ``sha`` names a commit in the repository."""
        result = self._run(["cat-file", "-e", f"{sha}^{{commit}}"])
        return result.returncode == 0
