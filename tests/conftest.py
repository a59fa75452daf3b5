"""
Pytest configuration and shared fixtures.
"""

import os
import shutil
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from loguru import logger

from src.helm_changelog.data_models import ChartSnapshot, Commit

BASE_TIME = datetime(2021, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_commits():
    """Build newest-first commits one hour apart, named c0 (newest) .. cN."""

    def _make(count: int) -> list[Commit]:
        return [
            Commit(
                sha=f"c{i}" + "0" * 39,
                timestamp=BASE_TIME - timedelta(hours=i),
                author="Test Author",
                message=f"Change {i}\n\nDetails for change {i}",
                author_email="author@example.com",
            )
            for i in range(count)
        ]

    return _make


class FakeExtractor:
    """Version extractor returning canned versions by commit position."""

    def __init__(self, commits: list[Commit], versions: list[str | None]):
        self.by_sha = dict(zip((c.sha for c in commits), versions))
        self.calls: list[str] = []

    def snapshot_at(self, commit: Commit, chart_file: str) -> ChartSnapshot | None:
        self.calls.append(commit.sha)
        version = self.by_sha[commit.sha]
        if version is None:
            return None
        return ChartSnapshot(version=version, app_version=f"app-{version}", api_version="v2")

    def version_at(self, commit: Commit, chart_file: str) -> str | None:
        snapshot = self.snapshot_at(commit, chart_file)
        return snapshot.version if snapshot else None


@pytest.fixture
def fake_extractor():
    """Factory for FakeExtractor."""
    return FakeExtractor


class GitRepo:
    """Throwaway git repository with deterministic commit dates."""

    def __init__(self, path: Path):
        self.path = path
        self._tick = 0
        self.git("init", "-q")
        self.git("config", "user.name", "Test Author")
        self.git("config", "user.email", "author@example.com")
        self.git("config", "commit.gpgsign", "false")

    def git(self, *args: str) -> str:
        env = dict(os.environ)
        date = (BASE_TIME + timedelta(minutes=self._tick)).isoformat()
        env.update(GIT_AUTHOR_DATE=date, GIT_COMMITTER_DATE=date)
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            env=env,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def write(self, relative: str, content: str) -> None:
        target = self.path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    def remove(self, relative: str) -> None:
        self.git("rm", "-q", relative)

    def commit(self, message: str, files: dict[str, str] | None = None) -> str:
        """Write ``files`` and commit them one minute after the previous commit."""
        for relative, content in (files or {}).items():
            self.write(relative, content)
        self._tick += 1
        self.git("add", "-A")
        self.git("commit", "-q", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD").strip()


def chart_yaml(version: str, app_version: str = "1.0.0", api_version: str = "v2") -> str:
    return (
        f"apiVersion: {api_version}\n"
        "name: demo\n"
        "description: Demo chart\n"
        f"version: {version}\n"
        f'appVersion: "{app_version}"\n'
    )


@pytest.fixture
def git_repo(tmp_path):
    """Create an empty git repository."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    return GitRepo(repo_dir)


@pytest.fixture(name="chart_yaml")
def chart_yaml_fixture():
    """Render Chart.yaml content."""
    return chart_yaml


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks bound to streams that CliRunner closes after each test."""
    yield
    logger.remove()
