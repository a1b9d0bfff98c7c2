"""Named tags grouping services."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path


@dataclass
class Tag:
    """A tag name and the services carrying it."""

    name: str
    services: list[str] = field(default_factory=list)


@dataclass
class TagStore:
    """All tags."""

    tags: list[Tag] = field(default_factory=list)


def load_tags(path: str | Path) -> TagStore:
    """Read the tag store; a missing file yields an empty store."""
    try:
        text = Path(path).read_text()
    except FileNotFoundError:
        return TagStore()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"parse tags: {exc}") from exc
    raw = raw or {}
    return TagStore(
        tags=[Tag(name=t.get("name", ""), services=list(t.get("services") or [])) for t in raw.get("tags") or []]
    )


def _save_tags(path: str | Path, store: TagStore) -> None:
    data = {"tags": [asdict(t) for t in store.tags]}
    Path(path).write_text(json.dumps(data, indent=2))


def add_tag(path: str | Path, tag_name: str, service: str) -> None:
    """Add a service to a tag, creating the tag if needed; no-op if already present."""
    try:
        store = load_tags(path)
    except (OSError, ValueError):
        store = TagStore()
    for tag in store.tags:
        if tag.name == tag_name:
            if service in tag.services:
                return
            tag.services.append(service)
            tag.services.sort()
            break
    else:
        store.tags.append(Tag(name=tag_name, services=[service]))
    _save_tags(path, store)


def remove_tag(path: str | Path, tag_name: str, service: str) -> None:
    """Remove a service from a tag; KeyError if the tag does not exist."""
    store = load_tags(path)
    for tag in store.tags:
        if tag.name == tag_name:
            tag.services = [s for s in tag.services if s != service]
            _save_tags(path, store)
            return
    raise KeyError("tag not found")


def filter_by_tag(store: TagStore, tag_name: str) -> list[str] | None:
    """Return the services of a tag, or None when the tag does not exist."""
    return next((t.services for t in store.tags if t.name == tag_name), None)