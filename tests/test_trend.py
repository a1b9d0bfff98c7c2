from datetime import datetime, timezone

from driftwatch.model import CompareResult, DiffEntry
from driftwatch.trend import (
    TrendPoint,
    TrendReport,
    append_trend,
    filter_trend,
    format_trend,
    load_trend,
)


def make_trend_results():
    return [
        CompareResult(service="api", diffs=[DiffEntry(key="replicas", expected="3", actual="2")]),
        CompareResult(service="worker", diffs=[]),
    ]


def test_append_and_load_trend(tmp_path):
    path = tmp_path / "trend.json"
    append_trend(path, make_trend_results())
    report = load_trend(path)
    assert len(report.points) == 1
    assert report.points[0].service == "api"
    assert report.points[0].drift_count == 1
    assert report.points[0].max_severity == "high"


def test_append_trend_accumulates(tmp_path):
    path = tmp_path / "trend.json"
    append_trend(path, make_trend_results())
    append_trend(path, make_trend_results())
    assert len(load_trend(path).points) == 2


def test_load_trend_not_found(tmp_path):
    assert load_trend(tmp_path / "missing.json").points == []


def test_filter_trend_by_service(tmp_path):
    path = tmp_path / "trend.json"
    append_trend(
        path,
        [
            CompareResult(service="api", diffs=[DiffEntry(key="x", expected="1", actual="2")]),
            CompareResult(service="db", diffs=[DiffEntry(key="y", expected="a", actual="b")]),
        ],
    )
    report = load_trend(path)
    points = filter_trend(report, "api")
    assert [p.service for p in points] == ["api"]
    assert len(filter_trend(report, "")) == 2


def test_format_trend_empty():
    assert format_trend([]) == "no trend data available\n"


def test_format_trend_contains_service(tmp_path):
    path = tmp_path / "trend.json"
    append_trend(path, make_trend_results())
    out = format_trend(load_trend(path).points)
    assert "api: 1 diffs (max severity: high)" in out


def test_format_trend_exact():
    point = TrendPoint(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc), "api", 2, "high")
    assert format_trend(TrendReport(points=[point]).points) == (
        "[2024-01-02T03:04:05Z] api: 2 diffs (max severity: high)\n"
    )