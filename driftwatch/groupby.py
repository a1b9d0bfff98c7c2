"""Grouping of drift results by service, severity or key."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from driftwatch.model import CompareResult
from driftwatch.severity import classify_key


class GroupByField(str, Enum):
    """Supported grouping criteria."""

    SERVICE = "service"
    SEVERITY = "severity"
    KEY = "key"

    def __str__(self) -> str:
        return self.value


@dataclass
class GroupedResults:
    """Drift results organised under grouping keys."""

    field: GroupByField
    groups: dict[str, list[CompareResult]] = field(default_factory=dict)

    def sorted_group_keys(self) -> list[str]:
        """Return the group keys in alphabetical order."""
        return sorted(self.groups)


def _group_keys(result: CompareResult, by: GroupByField) -> list[str]:
    # One result may fall into several groups, one per distinct severity or key.
    if by is GroupByField.SERVICE:
        return [result.service]
    if by is GroupByField.SEVERITY:
        if not result.diffs:
            return ["none"]
        return list(dict.fromkeys(str(classify_key(d.key)).lower() for d in result.diffs))
    return list(dict.fromkeys(d.key for d in result.diffs))


def group_results(results: Iterable[CompareResult], field: GroupByField | str) -> GroupedResults:
    """Group results by the given field; raises ValueError for unknown fields."""
    try:
        by = GroupByField(field)
    except ValueError:
        raise ValueError(f"unsupported group-by field: {str(field)!r}") from None
    groups: defaultdict[str, list[CompareResult]] = defaultdict(list)
    for result in results:
        for key in _group_keys(result, by):
            groups[key].append(result)
    return GroupedResults(field=by, groups=dict(groups))


def format_grouped(grouped: GroupedResults) -> str:
    """Return a human-readable rendering of grouped results."""
    lines = [f"Grouped by: {grouped.field.value}\n", "-" * 40 + "\n"]
    for key in grouped.sorted_group_keys():
        members = grouped.groups[key]
        total_diffs = sum(len(r.diffs) for r in members)
        lines.append(f"[{key}] {len(members)} service(s), {total_diffs} diff(s)\n")
        lines.extend(
            f"  - {r.service} ({len(r.diffs)} diffs)\n" for r in members if r.diffs
        )
    return "".join(lines)