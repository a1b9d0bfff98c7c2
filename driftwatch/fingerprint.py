"""Stable hashes of each service's drift state."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field
from pathlib import Path

from driftwatch.history import _load_json, _write_json
from driftwatch.model import CompareResult


@dataclass
class Fingerprint:
    """Hash and key list describing a service's drift."""

    service: str
    hash: str
    drift_keys: list[str] = field(default_factory=list)
    drift_count: int = 0


def build_fingerprint(result: CompareResult) -> Fingerprint:
    """Compute a fingerprint that depends only on the set of drifted keys."""
    keys = sorted(d.key for d in result.diffs)
    digest = hashlib.sha256("".join(f"{k}:" for k in keys).encode()).hexdigest()[:16]
    return Fingerprint(
        service=result.service,
        hash=digest,
        drift_keys=keys,
        drift_count=len(result.diffs),
    )


def build_fingerprint_store(results: Iterable[CompareResult]) -> dict[str, Fingerprint]:
    """Fingerprint every drifted service, keyed by service name."""
    return {r.service: build_fingerprint(r) for r in results if r.diffs}


def save_fingerprint_store(path: str | Path, store: Mapping[str, Fingerprint]) -> None:
    """Write the store to a JSON file."""
    _write_json(path, {svc: asdict(store[svc]) for svc in sorted(store)})


def load_fingerprint_store(path: str | Path) -> dict[str, Fingerprint]:
    """Read a store from JSON; a missing file yields an empty store."""
    raw = _load_json(path, "unmarshal fingerprint store", {}) or {}
    return {
        svc: Fingerprint(
            service=fp.get("service", ""),
            hash=fp.get("hash", ""),
            drift_keys=list(fp.get("drift_keys") or []),
            drift_count=fp.get("drift_count", 0),
        )
        for svc, fp in raw.items()
    }


def diff_fingerprint_store(
    old: Mapping[str, Fingerprint], current: Mapping[str, Fingerprint]
) -> list[str]:
    """Return, sorted, the services that are new or whose hash changed."""
    return sorted(
        svc for svc, fp in current.items() if svc not in old or old[svc].hash != fp.hash
    )


def format_fingerprint_store(store: Mapping[str, Fingerprint]) -> str:
    """Return a human-readable summary of the store."""
    if not store:
        return "no drifted services fingerprinted\n"
    return "".join(
        f"{fp.service:<30} hash={fp.hash:<16} drifts={fp.drift_count} "
        f"keys=[{','.join(fp.drift_keys)}]\n"
        for fp in (store[svc] for svc in sorted(store))
    )