"""Recorded drift counts over time."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from driftwatch.model import CompareResult
from driftwatch.severity import max_severity

_ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)
_FRACTION = re.compile(r"^(.*T\d\d:\d\d:\d\d)\.(\d+)(.*)$")


def _format_time(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_time(text: str | None) -> datetime:
    if not text:
        return _ZERO_TIME
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    match = _FRACTION.match(text)
    if match:
        text = f"{match.group(1)}.{(match.group(2) + '000000')[:6]}{match.group(3)}"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.replace(microsecond=0).isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


@dataclass
class TrendPoint:
    """Drift count and highest severity of a service at one time."""

    timestamp: datetime
    service: str
    drift_count: int
    max_severity: str


@dataclass
class TrendReport:
    """All recorded trend points, oldest first."""

    points: list[TrendPoint] = field(default_factory=list)


def _point_to_dict(point: TrendPoint) -> dict[str, Any]:
    return {
        "timestamp": _format_time(point.timestamp),
        "service": point.service,
        "drift_count": point.drift_count,
        "max_severity": point.max_severity,
    }


def load_trend(path: str | Path) -> TrendReport:
    """Read the trend report; a missing file yields an empty report."""
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        return TrendReport()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse trend: {exc}") from exc
    raw = raw or {}
    return TrendReport(
        points=[
            TrendPoint(
                timestamp=_parse_time(p.get("timestamp")),
                service=p.get("service", ""),
                drift_count=int(p.get("drift_count", 0) or 0),
                max_severity=p.get("max_severity", "") or "",
            )
            for p in raw.get("points") or []
        ]
    )


def append_trend(path: str | Path, results: Iterable[CompareResult]) -> None:
    """Record a point for every drifted result, stamped with the current time."""
    try:
        report = load_trend(path)
    except (OSError, ValueError):
        report = TrendReport()
    for result in results:
        if not result.diffs:
            continue
        report.points.append(
            TrendPoint(
                timestamp=datetime.now(timezone.utc),
                service=result.service,
                drift_count=len(result.diffs),
                max_severity=str(max_severity(result.diffs)),
            )
        )
    data = {"points": [_point_to_dict(p) for p in report.points]}
    Path(path).write_text(json.dumps(data, indent=2))


def filter_trend(report: TrendReport, service: str) -> list[TrendPoint]:
    """Return the points of a service, or all points when service is empty."""
    return [p for p in report.points if not service or p.service == service]


def format_trend(points: Iterable[TrendPoint]) -> str:
    """Return one line per trend point."""
    points = list(points)
    if not points:
        return "no trend data available\n"
    return "".join(
        f"[{_rfc3339(p.timestamp)}] {p.service}: {p.drift_count} diffs "
        f"(max severity: {p.max_severity})\n"
        for p in points
    )