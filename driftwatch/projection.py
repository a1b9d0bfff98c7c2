"""Projection of drift results down to selected keys."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from driftwatch.model import CompareResult


def _go_str(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class ProjectionField:
    """A key to include, optionally shown under an alias."""

    key: str
    alias: str = ""

    @property
    def name(self) -> str:
        return self.alias or self.key


@dataclass
class ProjectionOptions:
    """Which fields to project and an optional service filter."""

    fields: list[ProjectionField] = field(default_factory=list)
    service: str = ""


@dataclass
class ProjectedRow:
    """Live values of the projected fields for one service."""

    service: str
    values: dict[str, str] = field(default_factory=dict)


def apply_projection(
    results: Iterable[CompareResult], options: ProjectionOptions
) -> list[ProjectedRow]:
    """Project each result to the requested fields, ordered by service."""
    rows = []
    for result in results:
        if options.service and result.service != options.service:
            continue
        row = ProjectedRow(service=result.service)
        for wanted in options.fields:
            diff = next((d for d in result.diffs if d.key == wanted.key), None)
            if diff is not None:
                row.values[wanted.name] = _go_str(diff.actual)
            else:
                row.values.setdefault(wanted.name, "")
        rows.append(row)
    rows.sort(key=lambda r: r.service)
    return rows


def format_projection(
    rows: Iterable[ProjectedRow], fields: Iterable[ProjectionField] | None
) -> str:
    """Render projected rows as a tab-separated table."""
    rows = list(rows)
    if not rows:
        return "no results\n"
    fields = list(fields or [])
    lines = ["\t".join(["SERVICE", *(f.name.upper() for f in fields)]) + "\n", "-" * 60 + "\n"]
    lines.extend(
        "\t".join([row.service, *(row.values.get(f.name, "") for f in fields)]) + "\n"
        for row in rows
    )
    return "".join(lines)