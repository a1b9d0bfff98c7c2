"""Plain-text reporting of drift results."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, TextIO


@dataclass
class FieldDiff:
    """A field whose live value differs from the expected one."""

    field: str
    expected: Any = None
    actual: Any = None


@dataclass
class DriftResult:
    """Drift state of a single service."""

    service_name: str
    has_drift: bool = False
    diffs: list[FieldDiff] = field(default_factory=list)


def _format_value(value: Any) -> str:
    if value is None:
        return "<absent>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


class Reporter:
    """Writes drift results to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def print(self, results: Iterable[DriftResult]) -> None:
        """Write a human-readable listing of the results."""
        for res in results:
            if not res.has_drift:
                self.stream.write(f"[OK]    {res.service_name} \u2014 no drift detected\n")
                continue
            self.stream.write(
                f"[DRIFT] {res.service_name} \u2014 {len(res.diffs)} field(s) differ:\n"
            )
            for diff in res.diffs:
                self.stream.write(
                    f"  {diff.field:<30} expected={_format_value(diff.expected):<20} "
                    f"actual={_format_value(diff.actual)}\n"
                )

    def summary(self, results: Iterable[DriftResult]) -> str:
        """Return a one-line summary of the results."""
        results = list(results)
        drifted = sum(1 for r in results if r.has_drift)
        if drifted == 0:
            return f"All {len(results)} service(s) in sync."
        return f"{drifted}/{len(results)} service(s) have drift."