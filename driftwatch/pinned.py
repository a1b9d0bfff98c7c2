"""Config keys pinned to an expected live value."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from driftwatch.history import _ZERO_TIME, _format_time, _parse_time, _read_json, _write_json
from driftwatch.model import CompareResult
from driftwatch.policy import _go_str


@dataclass
class PinnedKey:
    """A service key whose live value is expected to stay fixed."""

    service: str
    key: str
    expected: str
    pinned_at: datetime = _ZERO_TIME
    comment: str = ""


@dataclass
class PinList:
    """All pinned keys."""

    pins: list[PinnedKey] = field(default_factory=list)


def _pin_to_dict(pin: PinnedKey) -> dict[str, Any]:
    data = {
        "service": pin.service,
        "key": pin.key,
        "expected": pin.expected,
        "pinned_at": _format_time(pin.pinned_at),
    }
    if pin.comment:
        data["comment"] = pin.comment
    return data


def load_pins(path: str | Path) -> PinList:
    """Read the pin list; an unreadable file yields an empty list."""
    try:
        raw = _read_json(path, f"failed to parse pin file {str(path)!r}") or {}
    except OSError:
        return PinList()
    return PinList(
        pins=[
            PinnedKey(
                service=p.get("service", ""),
                key=p.get("key", ""),
                expected=p.get("expected", ""),
                pinned_at=_parse_time(p.get("pinned_at")),
                comment=p.get("comment") or "",
            )
            for p in raw.get("pins") or []
        ]
    )


def _save_pins(path: str | Path, pins: PinList) -> None:
    _write_json(path, {"pins": [_pin_to_dict(p) for p in pins.pins]})


def add_pin(path: str | Path, service: str, key: str, expected: str, comment: str = "") -> None:
    """Add or update the pin of a service/key pair."""
    try:
        pins = load_pins(path)
    except ValueError:
        pins = PinList()
    now = datetime.now(timezone.utc)
    for pin in pins.pins:
        if pin.service == service and pin.key == key:
            pin.expected = expected
            pin.pinned_at = now
            pin.comment = comment
            break
    else:
        pins.pins.append(
            PinnedKey(service=service, key=key, expected=expected, pinned_at=now, comment=comment)
        )
    _save_pins(path, pins)


def remove_pin(path: str | Path, service: str, key: str) -> None:
    """Remove the pin of a service/key pair; KeyError if there is none."""
    pins = load_pins(path)
    kept = [p for p in pins.pins if not (p.service == service and p.key == key)]
    if len(kept) == len(pins.pins):
        raise KeyError(f"pin not found: {service}/{key}")
    pins.pins = kept
    _save_pins(path, pins)


def apply_pins(results: Iterable[CompareResult], pins: PinList) -> list[CompareResult]:
    """Drop diffs whose live value equals the pinned expected value."""
    expected: dict[tuple[str, str], str] = {(p.service, p.key): p.expected for p in pins.pins}

    def pinned(service: str, key: str, actual: Any) -> bool:
        want = expected.get((service, key))
        return want is not None and _go_str(actual) == want

    return [
        replace(r, diffs=[d for d in r.diffs if not pinned(r.service, d.key, d.actual)])
        for r in results
    ]