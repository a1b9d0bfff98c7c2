"""Teams and contacts responsible for services."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path


@dataclass
class Owner:
    """The team and contact owning a service."""

    service: str
    team: str
    contact: str = ""


@dataclass
class OwnershipMap:
    """All known service owners."""

    owners: list[Owner] = field(default_factory=list)


def load_ownership(path: str | Path) -> OwnershipMap:
    """Read the map; an unreadable file yields an empty map."""
    try:
        text = Path(path).read_text()
    except OSError:
        return OwnershipMap()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse ownership: {exc}") from exc
    raw = raw or {}
    return OwnershipMap(
        owners=[
            Owner(
                service=o.get("service", ""),
                team=o.get("team", ""),
                contact=o.get("contact", "") or "",
            )
            for o in raw.get("owners") or []
        ]
    )


def _save_ownership(path: str | Path, ownership: OwnershipMap) -> None:
    data = {"owners": [asdict(o) for o in ownership.owners]}
    Path(path).write_text(json.dumps(data, indent=2))


def add_owner(path: str | Path, service: str, team: str, contact: str = "") -> None:
    """Add or replace the owner of a service."""
    if not service or not team:
        raise ValueError("service and team are required")
    try:
        ownership = load_ownership(path)
    except ValueError:
        ownership = OwnershipMap()
    owner = Owner(service=service, team=team, contact=contact)
    for index, existing in enumerate(ownership.owners):
        if existing.service == service:
            ownership.owners[index] = owner
            break
    else:
        ownership.owners.append(owner)
    _save_ownership(path, ownership)


def remove_owner(path: str | Path, service: str) -> None:
    """Remove the owner entry of a service; KeyError if there is none."""
    ownership = load_ownership(path)
    kept = [o for o in ownership.owners if o.service != service]
    if len(kept) == len(ownership.owners):
        raise KeyError(f"service {service!r} not found in ownership map")
    ownership.owners = kept
    _save_ownership(path, ownership)


def lookup_owner(ownership: OwnershipMap, service: str) -> Owner | None:
    """Return the owner of a service, matched case-insensitively, or None."""
    wanted = service.casefold()
    return next((o for o in ownership.owners if o.service.casefold() == wanted), None)