"""Per-service rollup of drift counts by severity."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from driftwatch.model import CompareResult
from driftwatch.severity import classify_key

MAX_TOP_KEYS = 5


@dataclass
class RollupEntry:
    """Drift totals of one service."""

    service: str
    total_diffs: int = 0
    by_severity: dict[str, int] = field(default_factory=dict)
    top_keys: list[str] = field(default_factory=list)


@dataclass
class RollupReport:
    """Rollup entries of all drifted services and their overall diff count."""

    entries: list[RollupEntry] = field(default_factory=list)
    total: int = 0


def build_rollup(results: Iterable[CompareResult]) -> RollupReport:
    """Aggregate the drifted results; clean services are left out."""
    report = RollupReport()
    for result in results:
        if not result.diffs:
            continue
        entry = RollupEntry(service=result.service, total_diffs=len(result.diffs))
        for diff in result.diffs:
            level = str(classify_key(diff.key))
            entry.by_severity[level] = entry.by_severity.get(level, 0) + 1
            if diff.key not in entry.top_keys and len(entry.top_keys) < MAX_TOP_KEYS:
                entry.top_keys.append(diff.key)
        report.entries.append(entry)
        report.total += len(result.diffs)
    return report


def format_rollup(report: RollupReport) -> str:
    """Return a human-readable rendering of the rollup."""
    if not report.entries:
        return "No drift detected across all services.\n"
    lines = [f"Rollup: {report.total} total diffs across {len(report.entries)} service(s)\n"]
    for entry in report.entries:
        line = f"  {entry.service}: {entry.total_diffs} diffs"
        highs = entry.by_severity.get("high", 0)
        if highs > 0:
            line += f" [high:{highs}]"
        mediums = entry.by_severity.get("medium", 0)
        if mediums > 0:
            line += f" [medium:{mediums}]"
        lines.append(line + "\n")
    return "".join(lines)