"""Numeric risk scoring of drift results."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from driftwatch.model import CompareResult
from driftwatch.severity import Severity, classify_key

WEIGHT_HIGH = 10.0
WEIGHT_MEDIUM = 5.0
WEIGHT_LOW = 1.0


@dataclass
class DriftScore:
    """Risk score and severity breakdown for one service."""

    service: str
    score: float = 0.0
    drifted: int = 0
    highs: int = 0
    mediums: int = 0
    lows: int = 0


def _score_one(result: CompareResult) -> DriftScore:
    ds = DriftScore(service=result.service)
    for diff in result.diffs:
        severity = classify_key(diff.key)
        if severity is Severity.HIGH:
            ds.highs += 1
            ds.score += WEIGHT_HIGH
        elif severity is Severity.MEDIUM:
            ds.mediums += 1
            ds.score += WEIGHT_MEDIUM
        elif severity is Severity.LOW:
            ds.lows += 1
            ds.score += WEIGHT_LOW
        else:
            ds.score += WEIGHT_LOW
        ds.drifted += 1
    return ds


def score_results(results: Iterable[CompareResult]) -> list[DriftScore]:
    """Compute a score for every result, in input order."""
    return [_score_one(r) for r in results]


def format_score(score: DriftScore) -> str:
    """Return a one-line description of a score."""
    return (
        f"service={score.service:<20} score={score.score:.1f} drifted={score.drifted} "
        f"(high={score.highs} medium={score.mediums} low={score.lows})"
    )