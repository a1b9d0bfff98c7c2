"""Retrieval of live service configuration over HTTP."""

from __future__ import annotations

import urllib.error
import urllib.request
from dataclasses import dataclass, field
from datetime import timedelta

from driftwatch.configbody import ConfigParseError, parse_config_body


class FetchError(Exception):
    """Live configuration could not be fetched or parsed."""


@dataclass
class ServiceConfig:
    """Raw configuration retrieved from a live service."""

    service_name: str
    fields: dict[str, str] = field(default_factory=dict)


class Fetcher:
    """Fetches service configuration from a remote endpoint."""

    def __init__(self, base_url: str, timeout: float | timedelta = 30.0) -> None:
        self.base_url = base_url
        self.timeout = timeout.total_seconds() if isinstance(timeout, timedelta) else float(timeout)

    def fetch(self, service_name: str) -> ServiceConfig:
        """Retrieve and parse the configuration of a named service."""
        url = f"{self.base_url}/services/{service_name}/config"
        try:
            request = urllib.request.Request(url, method="GET")
        except ValueError as exc:
            raise FetchError(f"build request: {exc}") from exc
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status = response.status
                body = response.read() if status == 200 else b""
        except urllib.error.HTTPError as exc:
            exc.close()
            raise FetchError(f"fetch {service_name}: unexpected status {exc.code}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise FetchError(f"fetch {service_name}: {exc}") from exc
        if status != 200:
            raise FetchError(f"fetch {service_name}: unexpected status {status}")
        try:
            fields = parse_config_body(body)
        except ConfigParseError as exc:
            raise FetchError(f"parse config: {exc}") from exc
        return ServiceConfig(service_name=service_name, fields=fields)