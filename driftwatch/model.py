"""Core data types shared by the drift analysis modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DiffKind(str, Enum):
    """How a live value differs from the expected one."""

    CHANGED = "changed"
    MISSING = "missing"
    UNEXPECTED = "unexpected"

    def __str__(self) -> str:
        return self.value


@dataclass
class DiffEntry:
    """A single differing configuration key of a service."""

    key: str
    expected: Any = None
    actual: Any = None
    kind: DiffKind | None = None
    status: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping of this entry."""
        data: dict[str, Any] = {
            "key": self.key,
            "expected": self.expected,
            "actual": self.actual,
        }
        if self.kind is not None:
            data["kind"] = self.kind.value
        if self.status:
            data["status"] = self.status
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiffEntry:
        """Build an entry from a mapping produced by :meth:`to_dict`."""
        kind = data.get("kind")
        return cls(
            key=data.get("key", ""),
            expected=data.get("expected"),
            actual=data.get("actual"),
            kind=DiffKind(kind) if kind else None,
            status=data.get("status", "") or "",
        )


@dataclass
class CompareResult:
    """The outcome of comparing one service against its manifest."""

    service: str
    diffs: list[DiffEntry] = field(default_factory=list)

    @property
    def has_drift(self) -> bool:
        return bool(self.diffs)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping of this result."""
        return {
            "service": self.service,
            "diffs": [d.to_dict() for d in self.diffs],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompareResult:
        """Build a result from a mapping produced by :meth:`to_dict`."""
        return cls(
            service=data.get("service", ""),
            diffs=[DiffEntry.from_dict(d) for d in data.get("diffs") or []],
        )