"""Parsing of KEY=VALUE configuration bodies."""

from __future__ import annotations


class ConfigParseError(ValueError):
    """A configuration body line is malformed."""


def parse_config_body(data: bytes | str) -> dict[str, str]:
    """Parse newline-delimited KEY=VALUE lines; blank lines and '#' comments are skipped."""
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    fields: dict[str, str] = {}
    for number, raw in enumerate(text.strip().split("\n"), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise ConfigParseError(f'line {number}: invalid format "{line}"')
        key = key.strip()
        if not key:
            raise ConfigParseError(f"line {number}: empty key")
        fields[key] = value.strip()
    return fields