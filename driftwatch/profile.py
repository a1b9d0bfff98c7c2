"""Named drift configuration profiles."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from driftwatch.history import _ZERO_TIME, _format_time, _load_json, _parse_time, _write_json


@dataclass
class Profile:
    """Filter options, severity threshold and ignored keys under one name."""

    name: str
    description: str = ""
    ignore_keys: list[str] = field(default_factory=list)
    min_severity: str = ""
    service_prefix: str = ""
    created_at: datetime = _ZERO_TIME
    updated_at: datetime = _ZERO_TIME


def _profile_to_dict(profile: Profile) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": profile.name,
        "description": profile.description,
        "ignore_keys": list(profile.ignore_keys),
        "min_severity": profile.min_severity,
    }
    if profile.service_prefix:
        data["service_prefix"] = profile.service_prefix
    data["created_at"] = _format_time(profile.created_at)
    data["updated_at"] = _format_time(profile.updated_at)
    return data


def _profile_from_dict(data: dict[str, Any]) -> Profile:
    return Profile(
        name=data.get("name", ""),
        description=data.get("description") or "",
        ignore_keys=list(data.get("ignore_keys") or []),
        min_severity=data.get("min_severity") or "",
        service_prefix=data.get("service_prefix") or "",
        created_at=_parse_time(data.get("created_at")),
        updated_at=_parse_time(data.get("updated_at")),
    )


def load_profiles(path: str | Path) -> list[Profile]:
    """Read all profiles; a missing file yields none."""
    raw = _load_json(path, "parse profiles") or {}
    return [_profile_from_dict(p) for p in raw.get("profiles") or []]


def _write_profiles(path: str | Path, profiles: list[Profile]) -> None:
    _write_json(path, {"profiles": [_profile_to_dict(p) for p in profiles]})


def _load_profiles_lenient(path: str | Path) -> list[Profile]:
    try:
        return load_profiles(path)
    except (OSError, ValueError):
        return []


def save_profile(path: str | Path, profile: Profile) -> None:
    """Add or update a profile, keeping the creation time of an existing one."""
    if not profile.name:
        raise ValueError("profile name is required")
    profiles = _load_profiles_lenient(path)
    now = datetime.now(timezone.utc)
    for index, existing in enumerate(profiles):
        if existing.name == profile.name:
            profiles[index] = replace(profile, created_at=existing.created_at, updated_at=now)
            break
    else:
        profiles.append(replace(profile, created_at=now, updated_at=now))
    _write_profiles(path, profiles)


def get_profile(path: str | Path, name: str) -> Profile | None:
    """Return the profile with the given name, or None."""
    return next((p for p in _load_profiles_lenient(path) if p.name == name), None)


def remove_profile(path: str | Path, name: str) -> None:
    """Delete a profile by name; KeyError if it does not exist."""
    profiles = load_profiles(path)
    kept = [p for p in profiles if p.name != name]
    if len(kept) == len(profiles):
        raise KeyError(f"profile {name!r} not found")
    _write_profiles(path, kept)