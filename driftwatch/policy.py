"""Policies restricting the values drifted keys may take."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from driftwatch.history import _read_json
from driftwatch.model import CompareResult


def _go_str(value: Any) -> str:
    """Render a value the way the stored files spell it."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class PolicyRule:
    """Constraint on one configuration key."""

    key: str
    severity: str = ""
    required: bool = False
    allowed: list[str] = field(default_factory=list)


@dataclass
class Policy:
    """A named set of policy rules."""

    name: str = ""
    rules: list[PolicyRule] = field(default_factory=list)


@dataclass
class PolicyViolation:
    """A service value that breaks a policy rule."""

    service: str
    rule: PolicyRule
    message: str


def load_policy(path: str | Path) -> Policy:
    """Read a policy from a JSON file; a missing file raises FileNotFoundError."""
    raw = _read_json(path, "decode policy") or {}
    return Policy(
        name=raw.get("name") or "",
        rules=[
            PolicyRule(
                key=r.get("key", ""),
                severity=r.get("severity") or "",
                required=bool(r.get("required", False)),
                allowed=list(r.get("allowed") or []),
            )
            for r in raw.get("rules") or []
        ],
    )


def _check_rule(result: CompareResult, rule: PolicyRule) -> list[PolicyViolation]:
    if not rule.allowed:
        return []
    return [
        PolicyViolation(
            service=result.service,
            rule=rule,
            message=f'key "{d.key}" value {_go_str(d.actual)} not in allowed list',
        )
        for d in result.diffs
        if d.key == rule.key and _go_str(d.actual) not in rule.allowed
    ]


def apply_policy(results: Iterable[CompareResult], policy: Policy) -> list[PolicyViolation]:
    """Return every violation of the policy's allowed-value lists."""
    return [v for r in results for rule in policy.rules for v in _check_rule(r, rule)]