"""Time-to-live rules bounding how long a service's drift is tolerated."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

_ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)
_FRACTION = re.compile(r"^(.*T\d\d:\d\d:\d\d)\.(\d+)(.*)$")


def _aware(moment: datetime) -> datetime:
    # Naive datetimes are taken as local time.
    return moment if moment.tzinfo is not None else moment.astimezone()


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


def _to_ns(duration: timedelta) -> int:
    return (duration.days * 86400 + duration.seconds) * 10**9 + duration.microseconds * 1000


def _from_ns(nanoseconds: int) -> timedelta:
    return timedelta(microseconds=int(nanoseconds) // 1000)


@dataclass
class TTLRule:
    """How long drift of a service is tolerated, counted from creation."""

    service: str
    ttl: timedelta
    created_at: datetime = _ZERO_TIME

    @property
    def expires_at(self) -> datetime:
        return _aware(self.created_at) + self.ttl


@dataclass
class TTLList:
    """All TTL rules."""

    rules: list[TTLRule] = field(default_factory=list)


def _rule_to_dict(rule: TTLRule) -> dict[str, Any]:
    return {
        "service": rule.service,
        "ttl_ns": _to_ns(rule.ttl),
        "created_at": _format_time(rule.created_at),
    }


def load_ttl_list(path: str | Path) -> TTLList:
    """Read the TTL rules; a missing file yields an empty list."""
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        return TTLList()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse ttl list: {exc}") from exc
    raw = raw or {}
    return TTLList(
        rules=[
            TTLRule(
                service=r.get("service", ""),
                ttl=_from_ns(r.get("ttl_ns", 0) or 0),
                created_at=_parse_time(r.get("created_at")),
            )
            for r in raw.get("rules") or []
        ]
    )


def save_ttl_list(path: str | Path, ttl_list: TTLList) -> None:
    """Write the TTL rules to a JSON file."""
    data = {"rules": [_rule_to_dict(r) for r in ttl_list.rules]}
    Path(path).write_text(json.dumps(data, indent=2))


def add_ttl_rule(path: str | Path, service: str, ttl: timedelta) -> None:
    """Add or update the TTL rule of a service, restarting its clock."""
    if not service:
        raise ValueError("service name is required")
    if ttl <= timedelta(0):
        raise ValueError("ttl must be positive")
    try:
        ttl_list = load_ttl_list(path)
    except (OSError, ValueError):
        ttl_list = TTLList()
    now = datetime.now(timezone.utc)
    for rule in ttl_list.rules:
        if rule.service == service:
            rule.ttl = ttl
            rule.created_at = now
            break
    else:
        ttl_list.rules.append(TTLRule(service=service, ttl=ttl, created_at=now))
    save_ttl_list(path, ttl_list)


def expired_services(ttl_list: TTLList) -> list[str]:
    """Return the services whose TTL has elapsed since their rule was created."""
    now = datetime.now(timezone.utc)
    return [r.service for r in ttl_list.rules if now > r.expires_at]