"""Services watched for drift above a per-service threshold."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from driftwatch.model import CompareResult

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


@dataclass
class WatchEntry:
    """A watched service and the minimum diff count that triggers an alert."""

    service: str
    added_at: datetime = _ZERO_TIME
    threshold: int = 0


@dataclass
class Watchlist:
    """All watched services."""

    entries: list[WatchEntry] = field(default_factory=list)


def _entry_to_dict(entry: WatchEntry) -> dict[str, Any]:
    return {
        "service": entry.service,
        "added_at": _format_time(entry.added_at),
        "threshold": entry.threshold,
    }


def load_watchlist(path: str | Path) -> Watchlist:
    """Read the watchlist; a missing file raises FileNotFoundError."""
    text = Path(path).read_text()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse watchlist: {exc}") from exc
    raw = raw or {}
    return Watchlist(
        entries=[
            WatchEntry(
                service=e.get("service", ""),
                added_at=_parse_time(e.get("added_at")),
                threshold=int(e.get("threshold", 0) or 0),
            )
            for e in raw.get("entries") or []
        ]
    )


def _save_watchlist(path: str | Path, watchlist: Watchlist) -> None:
    data = {"entries": [_entry_to_dict(e) for e in watchlist.entries]}
    Path(path).write_text(json.dumps(data, indent=2))


def add_to_watchlist(path: str | Path, service: str, threshold: int) -> None:
    """Watch a service; ValueError if it is already watched."""
    try:
        watchlist = load_watchlist(path)
    except (OSError, ValueError):
        watchlist = Watchlist()
    if any(e.service == service for e in watchlist.entries):
        raise ValueError(f"service {service!r} already in watchlist")
    watchlist.entries.append(
        WatchEntry(service=service, added_at=datetime.now(timezone.utc), threshold=threshold)
    )
    _save_watchlist(path, watchlist)


def remove_from_watchlist(path: str | Path, service: str) -> None:
    """Stop watching a service; KeyError if it is not watched."""
    watchlist = load_watchlist(path)
    kept = [e for e in watchlist.entries if e.service != service]
    if len(kept) == len(watchlist.entries):
        raise KeyError(f"service {service!r} not found in watchlist")
    watchlist.entries = kept
    _save_watchlist(path, watchlist)


def match_watchlist(
    watchlist: Watchlist, results: Iterable[CompareResult]
) -> list[CompareResult]:
    """Keep watched services with at least their threshold of diffs."""
    index = {e.service: e for e in watchlist.entries}
    return [
        r for r in results if r.service in index and len(r.diffs) >= index[r.service].threshold
    ]