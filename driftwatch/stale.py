"""Detection of services whose drift has not been re-checked recently."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from driftwatch.history import load_history

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


def _to_ns(duration: timedelta) -> int:
    return (duration.days * 86400 + duration.seconds) * 10**9 + duration.microseconds * 1000


def _from_ns(nanoseconds: int) -> timedelta:
    return timedelta(microseconds=int(nanoseconds) // 1000)


@dataclass
class StaleEntry:
    """A service last checked longer ago than allowed."""

    service: str
    last_seen: datetime
    stale_since: timedelta


def find_stale_services(history_path: str | Path, max_age: timedelta) -> list[StaleEntry]:
    """Return services whose latest history record is older than max_age."""
    latest: dict[str, datetime] = {}
    for record in load_history(history_path):
        for result in record.results:
            seen = latest.get(result.service)
            if seen is None or record.timestamp > seen:
                latest[result.service] = record.timestamp

    now = datetime.now(timezone.utc)
    stale = []
    for service, seen in latest.items():
        age = now - seen
        if age > max_age:
            stale.append(StaleEntry(service=service, last_seen=seen, stale_since=age))
    return stale


def _entry_to_dict(entry: StaleEntry) -> dict[str, Any]:
    return {
        "service": entry.service,
        "last_seen": _format_time(entry.last_seen),
        "stale_since_seconds": _to_ns(entry.stale_since),
    }


def save_stale_report(path: str | Path, entries: Iterable[StaleEntry]) -> None:
    """Write stale entries to a JSON file."""
    Path(path).write_text(json.dumps([_entry_to_dict(e) for e in entries], indent=2))


def load_stale_report(path: str | Path) -> list[StaleEntry]:
    """Read a stale report; a missing file yields no entries."""
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        return []
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse stale report: {exc}") from exc
    return [
        StaleEntry(
            service=e.get("service", ""),
            last_seen=_parse_time(e.get("last_seen")),
            stale_since=_from_ns(e.get("stale_since_seconds", 0) or 0),
        )
        for e in raw or []
    ]


def format_stale_report(entries: Iterable[StaleEntry]) -> str:
    """Return a human-readable list of stale services."""
    entries = list(entries)
    if not entries:
        return "No stale services detected.\n"
    lines = [f"Stale services ({len(entries)}):\n"]
    lines.extend(
        f"  {e.service:<30} last seen: {_rfc3339(e.last_seen)} "
        f"({e.stale_since.total_seconds() / 3600:.0f}h ago)\n"
        for e in entries
    )
    return "".join(lines)