"""Blast-radius assessment of drift per service."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from driftwatch.model import CompareResult
from driftwatch.severity import Severity, classify_key


class ImpactLevel(str, Enum):
    """Coarse impact category derived from a score."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    def __str__(self) -> str:
        return self.value


@dataclass
class ImpactReport:
    """Impact summary for a single drifted service."""

    service: str
    impact: ImpactLevel
    score: int
    drift_count: int
    top_keys: list[str] = field(default_factory=list)


_WEIGHTS = {Severity.HIGH: 10, Severity.MEDIUM: 5, Severity.LOW: 2}
_TOP_KEYS_LIMIT = 5
_IMPACT_BOUNDS = (
    (20, ImpactLevel.CRITICAL),
    (10, ImpactLevel.HIGH),
    (5, ImpactLevel.MEDIUM),
)


def score_to_impact(score: int) -> ImpactLevel:
    """Map a numeric score to an impact level."""
    return next((level for bound, level in _IMPACT_BOUNDS if score >= bound), ImpactLevel.LOW)


def _report_for(result: CompareResult) -> ImpactReport:
    score = sum(_WEIGHTS.get(classify_key(d.key), 1) for d in result.diffs)
    return ImpactReport(
        service=result.service,
        impact=score_to_impact(score),
        score=score,
        drift_count=len(result.diffs),
        top_keys=sorted({d.key for d in result.diffs})[:_TOP_KEYS_LIMIT],
    )


def assess_impact(results: Iterable[CompareResult]) -> list[ImpactReport]:
    """Report impact for each drifted service, highest score first."""
    reports = [_report_for(r) for r in results if r.diffs]
    reports.sort(key=lambda r: r.score, reverse=True)
    return reports


def format_impact(reports: Iterable[ImpactReport]) -> str:
    """Return impact reports as a text table."""
    rows = [
        f"{r.service:<30} {r.impact.value:<10} {r.score:<6} {', '.join(r.top_keys)}\n"
        for r in reports
    ]
    if not rows:
        return "No drift impact detected.\n"
    header = f"{'SERVICE':<30} {'IMPACT':<10} {'SCORE':<6} TOP KEYS\n" + "-" * 80 + "\n"
    return header + "".join(rows)