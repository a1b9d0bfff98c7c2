"""Frequency heatmap of drifting service and key pairs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from driftwatch.model import CompareResult
from driftwatch.severity import Severity, classify_key


@dataclass
class HeatmapEntry:
    """How often a key drifted for a service, with its highest severity."""

    service: str
    key: str
    count: int
    max_sev: str


@dataclass
class HeatmapRow:
    """All heatmap entries of one service."""

    service: str
    entries: list[HeatmapEntry] = field(default_factory=list)
    total: int = 0


def build_heatmap(results: Iterable[CompareResult]) -> list[HeatmapRow]:
    """Aggregate results into rows ordered by total drift count, highest first."""
    counts: dict[tuple[str, str], int] = {}
    severities: dict[tuple[str, str], Severity] = {}
    for result in results:
        for diff in result.diffs:
            pair = (result.service, diff.key)
            counts[pair] = counts.get(pair, 0) + 1
            severities[pair] = max(severities.get(pair, Severity.NONE), classify_key(diff.key))

    rows: dict[str, HeatmapRow] = {}
    for (service, key), count in counts.items():
        row = rows.setdefault(service, HeatmapRow(service=service))
        row.entries.append(
            HeatmapEntry(service=service, key=key, count=count, max_sev=str(severities[(service, key)]))
        )
        row.total += count

    for row in rows.values():
        row.entries.sort(key=lambda e: e.count, reverse=True)
    return sorted(rows.values(), key=lambda r: r.total, reverse=True)


def format_heatmap(rows: Iterable[HeatmapRow]) -> str:
    """Return the heatmap as a text table."""
    rows = list(rows)
    if not rows:
        return "no drift data for heatmap\n"
    lines = [f"{'SERVICE':<24} {'KEY':<24} {'COUNT':>6}  MAX_SEV\n", "-" * 68 + "\n"]
    for row in rows:
        lines.extend(
            f"{e.service:<24} {e.key:<24} {e.count:>6}  {e.max_sev}\n" for e in row.entries
        )
    return "".join(lines)