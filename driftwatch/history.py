"""Persistent history of drift detection runs, and the JSON helpers shared by the stores."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from driftwatch.model import CompareResult

_ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)
_FRACTION = re.compile(r"^(.*T\d\d:\d\d:\d\d)\.(\d+)(.*)$")

_E = TypeVar("_E", bound=Enum)


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


def _coerce_enum(enum_cls: type[_E], value: str) -> _E | str:
    """Return the enum member for value, or value itself when it is not a member."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _read_json(path: str | Path, context: str) -> Any:
    """Parse a JSON file; OS errors propagate, bad JSON raises ValueError."""
    text = Path(path).read_text()
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{context}: {exc}") from exc


def _load_json(path: str | Path, context: str, default: Any = None) -> Any:
    """Like _read_json, but a missing file yields default."""
    try:
        return _read_json(path, context)
    except FileNotFoundError:
        return default


def _write_json(
    path: str | Path, data: Any, *, indent: int | None = 2, newline: bool = False
) -> None:
    text = json.dumps(data, indent=indent)
    Path(path).write_text(text + "\n" if newline else text)


@dataclass
class HistoryEntry:
    """Drift results captured at one point in time."""

    timestamp: datetime
    results: list[CompareResult] = field(default_factory=list)


def _entry_to_dict(entry: HistoryEntry) -> dict[str, Any]:
    return {
        "timestamp": _format_time(entry.timestamp),
        "results": [r.to_dict() for r in entry.results],
    }


def _entry_from_dict(data: dict[str, Any]) -> HistoryEntry:
    return HistoryEntry(
        timestamp=_parse_time(data.get("timestamp")),
        results=[CompareResult.from_dict(r) for r in data.get("results") or []],
    )


def load_history(path: str | Path) -> list[HistoryEntry]:
    """Read all entries; raises FileNotFoundError when the file is missing."""
    return [_entry_from_dict(e) for e in _read_json(path, "decode history") or []]


def append_history(path: str | Path, results: Iterable[CompareResult]) -> None:
    """Append the results, stamped with the current time, to the history file."""
    path = Path(path)
    try:
        entries = load_history(path)
    except FileNotFoundError:
        entries = []
    entries.append(HistoryEntry(timestamp=datetime.now(timezone.utc), results=list(results)))
    path.parent.mkdir(parents=True, exist_ok=True)
    _write_json(path, [_entry_to_dict(e) for e in entries], newline=True)


def latest_history(path: str | Path) -> HistoryEntry | None:
    """Return the most recent entry, or None when the history is empty."""
    entries = load_history(path)
    return entries[-1] if entries else None