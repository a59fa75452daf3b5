"""Tests for changelog rendering."""

import json
from datetime import datetime, timezone

import pytest

from src.helm_changelog.data_models import Commit, Release
from src.helm_changelog.output_formatter import ChangelogFormatter


@pytest.fixture
def releases():
    """Two releases, newest first."""
    bump = Commit(
        sha="b" * 40,
        timestamp=datetime(2021, 3, 4, 10, 0, tzinfo=timezone.utc),
        author="Alice",
        author_email="alice@example.com",
        message="Bump chart to 0.2.0\n\nAlso updates the image",
    )
    fix = Commit(
        sha="a" * 40,
        timestamp=datetime(2021, 3, 3, 10, 0, tzinfo=timezone.utc),
        author="Bob",
        message="Fix service port",
    )
    initial = Commit(
        sha="9" * 40,
        timestamp=datetime(2021, 2, 1, 8, 30, tzinfo=timezone.utc),
        author="Alice",
        message="Add demo chart",
    )
    return [
        Release(
            version="0.2.0",
            release_timestamp=bump.timestamp,
            changes=(bump, fix),
            app_version="1.16.0",
            api_version="v2",
        ),
        Release(
            version="0.1.0",
            release_timestamp=initial.timestamp,
            changes=(initial,),
            api_version="v1",
        ),
    ]


class TestChangelogFormatter:
    """Test ChangelogFormatter."""

    def test_markdown_layout(self, releases):
        output = ChangelogFormatter().format_markdown(releases)

        assert output.startswith("# Change Log\n\n## 0.2.0\n\n**Release date:** 2021-03-04\n")
        assert (
            "![AppVersion: 1.16.0](https://img.shields.io/static/v1?label=AppVersion"
            "&message=1.16.0&color=success&logo=)" in output
        )
        assert (
            "![Helm: v3](https://img.shields.io/static/v1?label=Helm&message=v3"
            "&color=inactive&logo=helm)" in output
        )
        assert "* Bump chart to 0.2.0 (bbbbbbb)\n* Fix service port (aaaaaaa)\n" in output
        assert "Also updates the image" not in output
        assert output.endswith("* Add demo chart (9999999)\n")

    def test_markdown_release_order_is_preserved(self, releases):
        output = ChangelogFormatter().format_markdown(releases)

        assert output.index("## 0.2.0") < output.index("## 0.1.0")

    def test_markdown_older_helm_and_missing_app_version(self, releases):
        output = ChangelogFormatter().format_markdown(releases[1:])

        assert "![Helm: v2]" in output
        assert "AppVersion" not in output

    def test_markdown_unknown_version(self, releases):
        unknown = Release(
            version=None,
            release_timestamp=releases[1].release_timestamp,
            changes=releases[1].changes,
        )

        output = ChangelogFormatter().format_markdown([unknown])

        assert "## Unknown" in output
        assert "img.shields.io" not in output

    def test_markdown_empty_history(self):
        assert ChangelogFormatter().format_markdown([]) == "# Change Log\n"

    def test_markdown_empty_subject(self, releases):
        silent = Commit(
            sha="c" * 40,
            timestamp=releases[0].release_timestamp,
            author="Alice",
            message="",
        )
        release = Release(version="1", release_timestamp=silent.timestamp, changes=(silent,))

        assert "* (no commit message) (ccccccc)" in ChangelogFormatter().format_markdown([release])

    def test_badge_values_are_escaped(self, releases):
        release = Release(
            version="1",
            release_timestamp=releases[0].release_timestamp,
            changes=releases[0].changes,
            app_version="1.0 beta/2",
        )

        output = ChangelogFormatter().format_markdown([release])

        assert "message=1.0%20beta%2F2" in output

    def test_json_output(self, releases):
        data = json.loads(ChangelogFormatter().format_json(releases, "demo"))

        assert data["chart"] == "demo"
        assert [r["version"] for r in data["releases"]] == ["0.2.0", "0.1.0"]
        newest = data["releases"][0]
        assert newest["release_date"] == "2021-03-04T10:00:00+00:00"
        assert newest["app_version"] == "1.16.0"
        assert [c["subject"] for c in newest["changes"]] == [
            "Bump chart to 0.2.0",
            "Fix service port",
        ]
        assert newest["changes"][0]["sha"] == "b" * 40
        assert newest["changes"][0]["message"].endswith("Also updates the image")

    def test_format_dispatch(self, releases):
        formatter = ChangelogFormatter()

        assert formatter.format(releases, "demo") == formatter.format_markdown(releases)
        assert formatter.format(releases, "demo", "json") == formatter.format_json(
            releases, "demo"
        )
        with pytest.raises(ValueError, match="Unsupported format"):
            formatter.format(releases, "demo", "html")

    def test_rendering_is_deterministic(self, releases):
        formatter = ChangelogFormatter()

        assert formatter.format_markdown(releases) == formatter.format_markdown(
            list(releases)
        )
