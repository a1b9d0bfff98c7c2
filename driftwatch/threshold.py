"""Per-service limits on acceptable drift."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from driftwatch.model import CompareResult
from driftwatch.severity import Severity, max_severity


@dataclass
class ThresholdRule:
    """Maximum diff count and severity tolerated for a service."""

    service: str
    max_drifts: int = 0
    min_severity: str = ""


@dataclass
class ThresholdList:
    """All threshold rules."""

    rules: list[ThresholdRule] = field(default_factory=list)


@dataclass
class ThresholdViolation:
    """A service that exceeded its threshold."""

    service: str
    rule: ThresholdRule
    drifts: int
    severity: Severity


def parse_severity(name: str) -> Severity:
    """Map a severity name to its level; unknown names map to NONE."""
    return {"high": Severity.HIGH, "medium": Severity.MEDIUM, "low": Severity.LOW}.get(
        name, Severity.NONE
    )


def load_thresholds(path: str | Path) -> ThresholdList:
    """Read threshold rules; a missing file yields no rules."""
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        return ThresholdList()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse thresholds: {exc}") from exc
    raw = raw or {}
    return ThresholdList(
        rules=[
            ThresholdRule(
                service=r.get("service", ""),
                max_drifts=int(r.get("max_drifts", 0) or 0),
                min_severity=r.get("min_severity", "") or "",
            )
            for r in raw.get("rules") or []
        ]
    )


def check_thresholds(
    results: Iterable[CompareResult], thresholds: ThresholdList
) -> list[ThresholdViolation]:
    """Return a violation for each ruled service over its count or at its severity."""
    rules = {r.service: r for r in thresholds.rules}
    violations = []
    for result in results:
        rule = rules.get(result.service)
        if rule is None:
            continue
        drifts = sum(1 for d in result.diffs if d.status != "match")
        severity = max_severity(result.diffs)
        if drifts > rule.max_drifts or severity >= parse_severity(rule.min_severity):
            violations.append(
                ThresholdViolation(service=result.service, rule=rule, drifts=drifts, severity=severity)
            )
    return violations