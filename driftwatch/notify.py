"""Notification events raised for drifted services."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from driftwatch.history import (
    _coerce_enum,
    _format_time,
    _load_json,
    _parse_time,
    _write_json,
)
from driftwatch.model import CompareResult
from driftwatch.severity import max_severity

_SEVERITY_ORDER = {"none": 0, "low": 1, "medium": 2, "high": 3}


class NotifyChannel(str, Enum):
    """Delivery channels for notifications."""

    SLACK = "slack"
    EMAIL = "email"
    WEBHOOK = "webhook"

    def __str__(self) -> str:
        return self.value


@dataclass
class NotifyRule:
    """Where to send notifications and for which severities and services."""

    channel: NotifyChannel | str
    target: str
    min_severity: str = ""
    services: list[str] = field(default_factory=list)


@dataclass
class NotifyEvent:
    """A notification to deliver."""

    service: str
    severity: str
    message: str
    timestamp: datetime
    channel: NotifyChannel | str
    target: str


def _meets_minimum(severity: str, minimum: str) -> bool:
    return _SEVERITY_ORDER.get(severity, 0) >= _SEVERITY_ORDER.get(minimum, 0)


def _rule_applies(rule: NotifyRule, service: str, severity: str) -> bool:
    if not _meets_minimum(severity, rule.min_severity):
        return False
    return not rule.services or service in rule.services


def generate_notify_events(
    results: Iterable[CompareResult], rules: Iterable[NotifyRule] | None
) -> list[NotifyEvent]:
    """Produce one event per drifted service and matching rule."""
    rules = list(rules or [])
    events = []
    for result in results:
        if not result.diffs:
            continue
        severity = str(max_severity(result.diffs))
        events.extend(
            NotifyEvent(
                service=result.service,
                severity=severity,
                message=f"drift detected in {result.service}: {len(result.diffs)} diff(s)",
                timestamp=datetime.now(timezone.utc),
                channel=rule.channel,
                target=rule.target,
            )
            for rule in rules
            if _rule_applies(rule, result.service, severity)
        )
    return events


def _event_to_dict(event: NotifyEvent) -> dict[str, Any]:
    return {
        "service": event.service,
        "severity": event.severity,
        "message": event.message,
        "timestamp": _format_time(event.timestamp),
        "channel": str(event.channel),
        "target": event.target,
    }


def _event_from_dict(data: dict[str, Any]) -> NotifyEvent:
    return NotifyEvent(
        service=data.get("service", ""),
        severity=data.get("severity", ""),
        message=data.get("message", ""),
        timestamp=_parse_time(data.get("timestamp")),
        channel=_coerce_enum(NotifyChannel, data.get("channel", "")),
        target=data.get("target", ""),
    )


def save_notify_events(path: str | Path, events: Iterable[NotifyEvent]) -> None:
    """Write events to a JSON file."""
    _write_json(path, [_event_to_dict(e) for e in events], indent=None, newline=True)


def load_notify_events(path: str | Path) -> list[NotifyEvent]:
    """Read events; a missing file yields no events."""
    return [_event_from_dict(e) for e in _load_json(path, "decode notify events") or []]