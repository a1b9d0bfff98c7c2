"""Rules that suppress specific drift findings permanently."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from driftwatch.history import _read_json, _write_json
from driftwatch.model import CompareResult


@dataclass
class IgnoreRule:
    """Ignore a key (exact, or prefix ending in '*') for a service or all services."""

    service: str = ""
    key: str = ""
    reason: str = ""

    def matches(self, service: str, key: str) -> bool:
        if self.service and self.service != service:
            return False
        if self.key.endswith("*"):
            return key.startswith(self.key[:-1])
        return self.key == key


@dataclass
class IgnoreList:
    """A set of ignore rules."""

    rules: list[IgnoreRule] = field(default_factory=list)


def _rule_to_dict(rule: IgnoreRule) -> dict[str, Any]:
    data = {"service": rule.service, "key": rule.key}
    if rule.reason:
        data["reason"] = rule.reason
    return data


def load_ignore_list(path: str | Path) -> IgnoreList:
    """Read an ignore list; a missing file yields an empty list."""
    try:
        raw = _read_json(path, "parse ignore list") or {}
    except FileNotFoundError:
        return IgnoreList()
    return IgnoreList(
        rules=[
            IgnoreRule(
                service=r.get("service") or "",
                key=r.get("key") or "",
                reason=r.get("reason") or "",
            )
            for r in raw.get("rules") or []
        ]
    )


def save_ignore_list(path: str | Path, ignore_list: IgnoreList) -> None:
    """Write an ignore list to a JSON file."""
    _write_json(path, {"rules": [_rule_to_dict(r) for r in ignore_list.rules]})


def add_ignore_rule(path: str | Path, service: str, key: str, reason: str = "") -> None:
    """Append a rule to the ignore list file."""
    ignore_list = load_ignore_list(path)
    ignore_list.rules.append(IgnoreRule(service=service, key=key, reason=reason))
    save_ignore_list(path, ignore_list)


def apply_ignore_list(
    results: Iterable[CompareResult], ignore_list: IgnoreList | None
) -> list[CompareResult]:
    """Return the results with every diff matching a rule removed."""
    results = list(results)
    if ignore_list is None or not ignore_list.rules:
        return results
    return [
        replace(
            r,
            diffs=[
                d
                for d in r.diffs
                if not any(rule.matches(r.service, d.key) for rule in ignore_list.rules)
            ],
        )
        for r in results
    ]