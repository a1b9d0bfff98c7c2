"""Free-form key/value labels attached to services."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

from driftwatch.model import CompareResult

LabelMap = dict[str, dict[str, str]]


def load_labels(path: str | Path) -> LabelMap:
    """Read the label map; a missing file yields an empty map."""
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        return {}
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse labels: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("parse labels: expected a JSON object")
    return {svc: dict(values or {}) for svc, values in raw.items()}


def _save_labels(path: str | Path, labels: LabelMap) -> None:
    Path(path).write_text(json.dumps(labels, indent=2, sort_keys=True))


def add_label(path: str | Path, service: str, key: str, value: str) -> None:
    """Set a label on a service, overwriting any previous value."""
    if not service or not key:
        raise ValueError("service and key are required")
    try:
        labels = load_labels(path)
    except (OSError, ValueError):
        labels = {}
    labels.setdefault(service, {})[key] = value
    _save_labels(path, labels)


def remove_label(path: str | Path, service: str, key: str) -> None:
    """Remove a label; a service left without labels is dropped entirely."""
    labels = load_labels(path)
    if service not in labels:
        raise KeyError("service not found")
    labels[service].pop(key, None)
    if not labels[service]:
        del labels[service]
    _save_labels(path, labels)


def filter_by_label(
    results: Iterable[CompareResult],
    labels: Mapping[str, Mapping[str, str]],
    key: str,
    value: str,
) -> list[CompareResult]:
    """Keep labelled services whose label value (empty if unset) equals value."""
    return [
        r for r in results if r.service in labels and labels[r.service].get(key, "") == value
    ]