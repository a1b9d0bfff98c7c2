"""Classification of configuration keys by drift severity."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum

from driftwatch.model import DiffEntry


class Severity(IntEnum):
    """Importance of a detected drift, ordered from least to most severe."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    def __str__(self) -> str:
        return self.name.lower()


HIGH_SEVERITY_KEYS = frozenset({"replicas", "image", "port", "memory_limit", "cpu_limit"})
MEDIUM_SEVERITY_KEYS = frozenset({"env", "log_level", "timeout"})


def classify_key(key: str) -> Severity:
    """Return the severity level for a configuration key."""
    if key in HIGH_SEVERITY_KEYS:
        return Severity.HIGH
    if key in MEDIUM_SEVERITY_KEYS:
        return Severity.MEDIUM
    if key:
        return Severity.LOW
    return Severity.NONE


def max_severity(keys: Iterable[str | DiffEntry]) -> Severity:
    """Return the highest severity among keys (or the keys of diff entries)."""
    return max(
        (classify_key(k if isinstance(k, str) else k.key) for k in keys),
        default=Severity.NONE,
    )