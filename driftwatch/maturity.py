"""Maturity assessment of service configurations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from driftwatch.history import _format_time, _load_json, _parse_time, _write_json
from driftwatch.model import CompareResult
from driftwatch.score import score_results


class MaturityLevel(str, Enum):
    """How stable a service's configuration is."""

    UNKNOWN = "unknown"
    UNSTABLE = "unstable"
    DEVELOPING = "developing"
    STABLE = "stable"
    MATURE = "mature"

    def __str__(self) -> str:
        return self.value


@dataclass
class MaturityEntry:
    """Maturity assessment of one service."""

    service: str
    level: MaturityLevel
    drift_score: float
    assessed_at: datetime
    note: str = ""


_MATURITY_BOUNDS = (
    (5, MaturityLevel.STABLE),
    (15, MaturityLevel.DEVELOPING),
    (30, MaturityLevel.UNSTABLE),
)


def score_to_maturity(score: float) -> MaturityLevel:
    """Map a drift score to a maturity level."""
    if score == 0:
        return MaturityLevel.MATURE
    return next(
        (level for bound, level in _MATURITY_BOUNDS if score <= bound), MaturityLevel.UNKNOWN
    )


def assess_maturity(results: Iterable[CompareResult]) -> list[MaturityEntry]:
    """Assess every result, in input order."""
    now = datetime.now(timezone.utc)
    return [
        MaturityEntry(
            service=s.service,
            level=score_to_maturity(s.score),
            drift_score=s.score,
            assessed_at=now,
        )
        for s in score_results(results)
    ]


def _entry_to_dict(entry: MaturityEntry) -> dict[str, Any]:
    data = {
        "service": entry.service,
        "level": str(entry.level),
        "drift_score": entry.drift_score,
        "assessed_at": _format_time(entry.assessed_at),
    }
    if entry.note:
        data["note"] = entry.note
    return data


def _entry_from_dict(data: dict[str, Any]) -> MaturityEntry:
    return MaturityEntry(
        service=data.get("service", ""),
        level=MaturityLevel(data.get("level") or MaturityLevel.UNKNOWN.value),
        drift_score=float(data.get("drift_score", 0.0)),
        assessed_at=_parse_time(data.get("assessed_at")),
        note=data.get("note") or "",
    )


def save_maturity_report(path: str | Path, entries: Iterable[MaturityEntry]) -> None:
    """Write the entries to a JSON report file."""
    _write_json(path, {"entries": [_entry_to_dict(e) for e in entries]})


def load_maturity_report(path: str | Path) -> list[MaturityEntry]:
    """Read a report; a missing file yields no entries."""
    raw = _load_json(path, "unmarshal maturity report") or {}
    return [_entry_from_dict(e) for e in raw.get("entries") or []]


def format_maturity(entries: Iterable[MaturityEntry]) -> str:
    """Return the entries as a text table."""
    rows = [f"{e.service:<30} {e.level.value:<12} {e.drift_score:.1f}\n" for e in entries]
    if not rows:
        return "no maturity data available\n"
    header = (
        "Service Maturity Report\n"
        f"{'SERVICE':<30} {'LEVEL':<12} SCORE\n"
        f"{'-------':<30} {'-----':<12} -----\n"
    )
    return header + "".join(rows)