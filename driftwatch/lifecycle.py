"""Lifecycle stages of services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from driftwatch.history import _coerce_enum, _format_time, _parse_time, _read_json, _write_json


class LifecycleStage(str, Enum):
    """Well-known lifecycle stages."""

    ACTIVE = "active"
    WATCHED = "watched"
    DEPRECATED = "deprecated"
    RETIRED = "retired"

    def __str__(self) -> str:
        return self.value


@dataclass
class LifecycleEntry:
    """The stage a service is in and when it was last changed."""

    service: str
    stage: LifecycleStage | str
    updated_at: datetime
    note: str = ""


@dataclass
class LifecycleStore:
    """All lifecycle entries."""

    entries: list[LifecycleEntry] = field(default_factory=list)


def _entry_to_dict(entry: LifecycleEntry) -> dict[str, Any]:
    data = {
        "service": entry.service,
        "stage": str(entry.stage),
        "updated_at": _format_time(entry.updated_at),
    }
    if entry.note:
        data["note"] = entry.note
    return data


def _entry_from_dict(data: dict[str, Any]) -> LifecycleEntry:
    return LifecycleEntry(
        service=data.get("service", ""),
        stage=_coerce_enum(LifecycleStage, data.get("stage", "")),
        updated_at=_parse_time(data.get("updated_at")),
        note=data.get("note") or "",
    )


def load_lifecycle(path: str | Path) -> LifecycleStore:
    """Read the store; an unreadable file yields an empty store."""
    try:
        raw = _read_json(path, "parse lifecycle") or {}
    except OSError:
        return LifecycleStore()
    return LifecycleStore(entries=[_entry_from_dict(e) for e in raw.get("entries") or []])


def set_lifecycle(
    path: str | Path, service: str, stage: LifecycleStage | str, note: str = ""
) -> None:
    """Add or update the lifecycle stage of a service."""
    if not service:
        raise ValueError("service name is required")
    if not stage:
        raise ValueError("lifecycle stage is required")
    try:
        store = load_lifecycle(path)
    except ValueError:
        store = LifecycleStore()
    stage = _coerce_enum(LifecycleStage, str(stage))
    now = datetime.now(timezone.utc)
    for entry in store.entries:
        if entry.service == service:
            entry.stage = stage
            entry.updated_at = now
            entry.note = note
            break
    else:
        store.entries.append(LifecycleEntry(service=service, stage=stage, updated_at=now, note=note))
    _write_json(path, {"entries": [_entry_to_dict(e) for e in store.entries]})


def filter_by_stage(store: LifecycleStore, stage: LifecycleStage | str) -> list[LifecycleEntry]:
    """Return the entries in the given stage."""
    return [e for e in store.entries if str(e.stage) == str(stage)]