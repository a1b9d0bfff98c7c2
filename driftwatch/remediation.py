"""Log of remediation actions taken on drifted keys."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

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


class RemediationAction(str, Enum):
    """What was done about a drifted key."""

    APPLY = "apply"
    REVERT = "revert"
    IGNORE = "ignore"

    def __str__(self) -> str:
        return self.value


def _coerce_action(value: str) -> RemediationAction | str:
    try:
        return RemediationAction(value)
    except ValueError:
        return value


@dataclass
class RemediationEntry:
    """One recorded remediation."""

    service: str
    key: str
    action: RemediationAction | str
    created_at: datetime = _ZERO_TIME
    note: str = ""


@dataclass
class RemediationLog:
    """All recorded remediations, oldest first."""

    entries: list[RemediationEntry] = field(default_factory=list)


def _entry_to_dict(entry: RemediationEntry) -> dict[str, Any]:
    data = {"service": entry.service, "key": entry.key, "action": str(entry.action)}
    if entry.note:
        data["note"] = entry.note
    data["created_at"] = _format_time(entry.created_at)
    return data


def load_remediations(path: str | Path) -> RemediationLog:
    """Read the log; a missing file yields an empty log."""
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        return RemediationLog()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse remediation log: {exc}") from exc
    raw = raw or {}
    return RemediationLog(
        entries=[
            RemediationEntry(
                service=e.get("service", ""),
                key=e.get("key", ""),
                action=_coerce_action(e.get("action", "")),
                created_at=_parse_time(e.get("created_at")),
                note=e.get("note", "") or "",
            )
            for e in raw.get("entries") or []
        ]
    )


def add_remediation(
    path: str | Path,
    service: str,
    key: str,
    action: RemediationAction | str,
    note: str = "",
) -> None:
    """Append a remediation, stamped with the current time, to the log."""
    try:
        log = load_remediations(path)
    except (OSError, ValueError):
        log = RemediationLog()
    log.entries.append(
        RemediationEntry(
            service=service,
            key=key,
            action=_coerce_action(str(action)),
            created_at=datetime.now(timezone.utc),
            note=note,
        )
    )
    data = {"entries": [_entry_to_dict(e) for e in log.entries]}
    Path(path).write_text(json.dumps(data, indent=2))


def filter_remediations(log: RemediationLog, service: str) -> list[RemediationEntry]:
    """Return the entries of a service, or all entries when service is empty."""
    return [e for e in log.entries if not service or e.service == service]