"""Time-limited silencing of drift alerts."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from driftwatch.model import CompareResult

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


@dataclass
class SuppressRule:
    """Silence a key of a service (or all its keys with '*') until expiry."""

    service: str
    key: str
    reason: str = ""
    expires_at: datetime = _ZERO_TIME

    def suppresses(self, service: str, key: str, now: datetime) -> bool:
        if _aware(self.expires_at) < now:
            return False
        return self.service == service and (self.key == key or self.key == "*")


@dataclass
class SuppressList:
    """All suppression rules."""

    rules: list[SuppressRule] = field(default_factory=list)


def _rule_to_dict(rule: SuppressRule) -> dict[str, Any]:
    return {
        "service": rule.service,
        "key": rule.key,
        "reason": rule.reason,
        "expires_at": _format_time(rule.expires_at),
    }


def load_suppress_list(path: str | Path) -> SuppressList:
    """Read the list; a missing file yields an empty list."""
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        return SuppressList()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse suppress list: {exc}") from exc
    raw = raw or {}
    return SuppressList(
        rules=[
            SuppressRule(
                service=r.get("service", ""),
                key=r.get("key", ""),
                reason=r.get("reason", "") or "",
                expires_at=_parse_time(r.get("expires_at")),
            )
            for r in raw.get("rules") or []
        ]
    )


def save_suppress_list(path: str | Path, suppress_list: SuppressList) -> None:
    """Write the list to a JSON file."""
    data = {"rules": [_rule_to_dict(r) for r in suppress_list.rules]}
    Path(path).write_text(json.dumps(data, indent=2))


def add_suppress_rule(path: str | Path, rule: SuppressRule) -> None:
    """Append a rule to the list file."""
    suppress_list = load_suppress_list(path)
    suppress_list.rules.append(rule)
    save_suppress_list(path, suppress_list)


def apply_suppress(
    results: Iterable[CompareResult], suppress_list: SuppressList
) -> list[CompareResult]:
    """Return the results without the diffs currently suppressed."""
    now = datetime.now(timezone.utc)
    return [
        replace(
            r,
            diffs=[
                d
                for d in r.diffs
                if not any(rule.suppresses(r.service, d.key, now) for rule in suppress_list.rules)
            ],
        )
        for r in results
    ]