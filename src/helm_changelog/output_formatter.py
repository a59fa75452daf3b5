"""
Output formatting for reconstructed chart releases.
"""

import json
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

from .data_models import Commit, Release

BADGE_URL = "https://img.shields.io/static/v1?label={label}&message={message}&color={color}&logo={logo}"


def _badge(label: str, message: str, color: str, logo: str = "") -> str:
    url = BADGE_URL.format(
        label=quote(label, safe=""),
        message=quote(message, safe=""),
        color=color,
        logo=logo,
    )
    return f"![{label}: {message}]({url})"


class ChangelogFormatter:
    """Renders releases as a changelog document."""

    def format(
        self, releases: Sequence[Release], chart_name: str, output_format: str = "markdown"
    ) -> str:
        """Render ``releases`` in the requested format."""
        if output_format == "markdown":
            return self.format_markdown(releases)
        elif output_format == "json":
            return self.format_json(releases, chart_name)
        else:
            raise ValueError(f"Unsupported format: {output_format}")

    def format_markdown(self, releases: Sequence[Release]) -> str:
        """Format releases as Markdown, newest release first."""
        lines = ["# Change Log", ""]

        for release in releases:
            lines.append(f"## {release.display_version}")
            lines.append("")
            lines.append(
                f"**Release date:** {release.release_timestamp.strftime('%Y-%m-%d')}"
            )
            lines.append("")

            badges = []
            if release.app_version:
                badges.append(_badge("AppVersion", release.app_version, "success"))
            if release.helm_version:
                badges.append(
                    _badge("Helm", release.helm_version, "inactive", logo="helm")
                )
            if badges:
                lines.extend(badges)
                lines.append("")

            for commit in release.changes:
                subject = commit.subject or "(no commit message)"
                lines.append(f"* {subject} ({commit.short_sha})")
            lines.append("")

        return "\n".join(lines).rstrip("\n") + "\n"

    def _commit_dict(self, commit: Commit) -> dict[str, Any]:
        return {
            "sha": commit.sha,
            "timestamp": commit.timestamp.isoformat(),
            "author": commit.author,
            "author_email": commit.author_email,
            "subject": commit.subject,
            "message": commit.message,
        }

    def format_json(self, releases: Sequence[Release], chart_name: str) -> str:
        """Format releases as JSON."""
        data = {
            "chart": chart_name,
            "releases": [
                {
                    "version": release.version,
                    "release_date": release.release_timestamp.isoformat(),
                    "app_version": release.app_version,
                    "api_version": release.api_version,
                    "changes": [self._commit_dict(c) for c in release.changes],
                }
                for release in releases
            ],
        }
        return json.dumps(data, indent=2) + "\n"
