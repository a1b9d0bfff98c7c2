"""Aggregate statistics of a drift detection run."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass
class SummaryStats:
    """Counts of checked, drifted and clean services."""

    total_services: int = 0
    drifted_services: int = 0
    clean_services: int = 0
    total_diffs: int = 0


def summarize(results: Mapping[str, Sequence[Any]]) -> SummaryStats:
    """Summarise a mapping of service name to its diffs."""
    stats = SummaryStats(total_services=len(results))
    for diffs in results.values():
        if diffs:
            stats.drifted_services += 1
            stats.total_diffs += len(diffs)
        else:
            stats.clean_services += 1
    return stats


def format_summary(stats: SummaryStats) -> str:
    """Return a one-line human-readable summary."""
    return (
        f"Services checked: {stats.total_services} | Drifted: {stats.drifted_services} | "
        f"Clean: {stats.clean_services} | Total diffs: {stats.total_diffs}"
    )