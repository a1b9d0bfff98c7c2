"""Loading of YAML service manifests."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml


class ManifestError(Exception):
    """A manifest could not be read, parsed or validated."""


@dataclass
class Manifest:
    """A parsed service config manifest."""

    name: str
    version: str = ""
    namespace: str = ""
    env: dict[str, str] = field(default_factory=dict)
    image: str = ""
    replicas: int = 0


def _scalar(value: Any, what: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float, date)):
        return str(value)
    raise ManifestError(f"{what}: expected a scalar value")


def _from_mapping(data: dict[str, Any], where: str) -> Manifest:
    try:
        replicas = data.get("replicas")
        if replicas is None:
            replicas = 0
        elif isinstance(replicas, bool) or not isinstance(replicas, int):
            raise ManifestError("replicas: expected an integer")
        env = data.get("env") or {}
        if not isinstance(env, dict):
            raise ManifestError("env: expected a mapping")
        return Manifest(
            name=_scalar(data.get("name"), "name"),
            version=_scalar(data.get("version"), "version"),
            namespace=_scalar(data.get("namespace"), "namespace"),
            env={_scalar(k, "env key"): _scalar(v, f"env.{k}") for k, v in env.items()},
            image=_scalar(data.get("image"), "image"),
            replicas=replicas,
        )
    except ManifestError as exc:
        raise ManifestError(f'parsing manifest "{where}": {exc}') from exc


def load_file(path: str | os.PathLike[str]) -> Manifest:
    """Read and parse a YAML manifest; the name field is required."""
    resolved = Path(path).resolve()
    try:
        text = resolved.read_text()
    except OSError as exc:
        raise ManifestError(f'reading manifest "{resolved}": {exc}') from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestError(f'parsing manifest "{resolved}": {exc}') from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestError(f'parsing manifest "{resolved}": expected a mapping')
    manifest = _from_mapping(data, str(resolved))
    if not manifest.name:
        raise ManifestError(f'manifest "{resolved}" missing required field: name')
    return manifest


def load_dir(directory: str | os.PathLike[str]) -> list[Manifest]:
    """Load every .yaml and .yml manifest directly inside a directory, by file name."""
    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except OSError as exc:
        raise ManifestError(f'reading directory "{directory}": {exc}') from exc
    return [
        load_file(Path(directory) / entry.name)
        for entry in entries
        if not entry.is_dir() and Path(entry.name).suffix in (".yaml", ".yml")
    ]