"""Labelled point-in-time captures of drift results."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from driftwatch.history import _ZERO_TIME, _format_time, _parse_time, _read_json, _write_json
from driftwatch.model import CompareResult


@dataclass
class Snapshot:
    """Drift results captured under a label."""

    timestamp: datetime = _ZERO_TIME
    label: str = ""
    results: list[CompareResult] = field(default_factory=list)


def save_snapshot(path: str | Path, label: str, results: Iterable[CompareResult]) -> None:
    """Write a labelled snapshot of the results, stamped with the current time."""
    _write_json(
        path,
        {
            "timestamp": _format_time(datetime.now(timezone.utc)),
            "label": label,
            "results": [r.to_dict() for r in results],
        },
    )


def load_snapshot(path: str | Path) -> Snapshot:
    """Read a snapshot; a missing file raises FileNotFoundError."""
    try:
        raw = _read_json(path, "snapshot unmarshal") or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"snapshot not found: {path}") from None
    return Snapshot(
        timestamp=_parse_time(raw.get("timestamp")),
        label=raw.get("label") or "",
        results=[CompareResult.from_dict(r) for r in raw.get("results") or []],
    )


def diff_snapshot(snapshot: Snapshot, current: Iterable[CompareResult]) -> list[str]:
    """Return the services that are new or whose drift status changed."""
    previous = {r.service: bool(r.diffs) for r in snapshot.results}
    return [
        r.service
        for r in current
        if r.service not in previous or previous[r.service] != bool(r.diffs)
    ]