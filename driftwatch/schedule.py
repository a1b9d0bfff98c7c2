"""Per-service check schedules."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

_ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)
_FRACTION = re.compile(r"^(.*T\d\d:\d\d:\d\d)\.(\d+)(.*)$")


def _format_time(moment: datetime) -> str:
    return _aware(moment).astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


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


def _aware(moment: datetime) -> datetime:
    # Naive datetimes are taken as local time.
    return moment if moment.tzinfo is not None else moment.astimezone()


def _to_ns(duration: timedelta) -> int:
    return (duration.days * 86400 + duration.seconds) * 10**9 + duration.microseconds * 1000


def _from_ns(nanoseconds: int) -> timedelta:
    return timedelta(microseconds=int(nanoseconds) // 1000)


@dataclass
class ScheduleEntry:
    """How often a service is checked and when it last ran."""

    service: str
    interval: timedelta = timedelta(0)
    last_run: datetime = _ZERO_TIME
    enabled: bool = False


@dataclass
class Schedule:
    """All scheduled services."""

    entries: list[ScheduleEntry] = field(default_factory=list)

    def upsert(self, entry: ScheduleEntry) -> None:
        """Replace the entry of the same service, or append a new one."""
        for index, existing in enumerate(self.entries):
            if existing.service == entry.service:
                self.entries[index] = entry
                return
        self.entries.append(entry)

    def due_services(self, now: datetime | None = None) -> list[str]:
        """Return the enabled services whose interval has elapsed since their last run."""
        now = _aware(now) if now is not None else datetime.now(timezone.utc)
        return [
            e.service
            for e in self.entries
            if e.enabled and now - _aware(e.last_run) >= e.interval
        ]


def _entry_to_dict(entry: ScheduleEntry) -> dict[str, Any]:
    return {
        "service": entry.service,
        "interval_ns": _to_ns(entry.interval),
        "last_run": _format_time(entry.last_run),
        "enabled": entry.enabled,
    }


def load_schedule(path: str | Path) -> Schedule:
    """Read a schedule; a missing file yields an empty schedule."""
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        return Schedule()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse schedule: {exc}") from exc
    raw = raw or {}
    return Schedule(
        entries=[
            ScheduleEntry(
                service=e.get("service", ""),
                interval=_from_ns(e.get("interval_ns", 0) or 0),
                last_run=_parse_time(e.get("last_run")),
                enabled=bool(e.get("enabled", False)),
            )
            for e in raw.get("entries") or []
        ]
    )


def save_schedule(path: str | Path, schedule: Schedule) -> None:
    """Write a schedule to a JSON file."""
    data = {"entries": [_entry_to_dict(e) for e in schedule.entries]}
    Path(path).write_text(json.dumps(data, indent=2))