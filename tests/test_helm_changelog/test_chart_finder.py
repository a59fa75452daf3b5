"""Tests for chart discovery."""

import pytest

from src.helm_changelog.chart_finder import find_charts
from src.helm_changelog.errors import ChartDiscoveryError


def test_finds_nested_charts_sorted(tmp_path):
    for chart in ["charts/zeta", "charts/alpha", "other/deep/nested"]:
        (tmp_path / chart).mkdir(parents=True)
        (tmp_path / chart / "Chart.yaml").write_text("version: 0.1.0\n")
    (tmp_path / "charts" / "alpha" / "values.yaml").write_text("{}\n")

    charts = find_charts(tmp_path)

    assert charts == [
        tmp_path.resolve() / "charts/alpha/Chart.yaml",
        tmp_path.resolve() / "charts/zeta/Chart.yaml",
        tmp_path.resolve() / "other/deep/nested/Chart.yaml",
    ]


def test_skips_hidden_directories(tmp_path):
    (tmp_path / ".git" / "charts").mkdir(parents=True)
    (tmp_path / ".git" / "charts" / "Chart.yaml").write_text("version: 1\n")
    (tmp_path / "visible").mkdir()
    (tmp_path / "visible" / "Chart.yaml").write_text("version: 1\n")

    assert find_charts(tmp_path) == [tmp_path.resolve() / "visible/Chart.yaml"]


def test_chart_at_root(tmp_path):
    (tmp_path / "Chart.yaml").write_text("version: 1\n")

    assert find_charts(tmp_path) == [tmp_path.resolve() / "Chart.yaml"]


def test_custom_chart_filename(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "Chart.yml").write_text("version: 1\n")
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "Chart.yaml").write_text("version: 1\n")

    assert find_charts(tmp_path, chart_filename="Chart.yml") == [
        tmp_path.resolve() / "a/Chart.yml"
    ]


def test_no_charts(tmp_path):
    assert find_charts(tmp_path) == []


def test_missing_root(tmp_path):
    with pytest.raises(ChartDiscoveryError, match="does not exist"):
        find_charts(tmp_path / "missing")


def test_root_is_a_file(tmp_path):
    target = tmp_path / "Chart.yaml"
    target.write_text("version: 1\n")

    with pytest.raises(ChartDiscoveryError):
        find_charts(target)
