"""Ordering of drift results."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from driftwatch.model import CompareResult, DiffKind


class SortOrder(str, Enum):
    """Available orderings for drift results."""

    SERVICE = "service"
    DRIFT_COUNT = "drift_count"
    SEVERITY = "severity"

    def __str__(self) -> str:
        return self.value


_KIND_WEIGHTS = {DiffKind.CHANGED: 3, DiffKind.MISSING: 2, DiffKind.UNEXPECTED: 1}


def _severity_score(result: CompareResult) -> int:
    # Changed values outrank missing fields, which outrank unexpected ones.
    return sum(_KIND_WEIGHTS.get(d.kind, 0) for d in result.diffs)


def sort_results(results: Iterable[CompareResult], order: SortOrder | str) -> list[CompareResult]:
    """Return a new, stably sorted list; unknown orders sort by service name."""
    try:
        order = SortOrder(order)
    except ValueError:
        order = SortOrder.SERVICE
    if order is SortOrder.DRIFT_COUNT:
        return sorted(results, key=lambda r: len(r.diffs), reverse=True)
    if order is SortOrder.SEVERITY:
        return sorted(results, key=_severity_score, reverse=True)
    return sorted(results, key=lambda r: r.service)