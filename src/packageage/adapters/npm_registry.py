"""Registry source: npm-compatible registry.

- One `GET <registry>/<url-encoded name>` per package.
- Reads `dist-tags.latest`, `versions[latest].deprecated` and `time.modified`.
- `http_timeout_seconds` bounds the whole request, body included.
- Any failure (timeout, non-2xx, bad JSON) comes back as an unknown lookup.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from packageage.adapters.http_client import build_async_client
from packageage.core.config import AppSettings
from packageage.core.domain.models import RegistryLookup, RegistryMetadata
from packageage.core.errors import RegistryUnavailableError
from packageage.core.interfaces.registry import MetadataFetcher

_TIMESTAMP = TypeAdapter(datetime)


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return _TIMESTAMP.validate_python(value.strip())
    except ValidationError:
        return None


def parse_registry_document(package_name: str, payload: Any) -> RegistryMetadata:
    """Build `RegistryMetadata` from a decoded registry packument."""

    if not isinstance(payload, dict):
        raise RegistryUnavailableError(package_name, "malformed registry document")

    latest: str | None = None
    dist_tags = payload.get("dist-tags")
    if isinstance(dist_tags, dict) and isinstance(dist_tags.get("latest"), str):
        latest = dist_tags["latest"]

    deprecated_raw: object = None
    versions = payload.get("versions")
    if latest and isinstance(versions, dict):
        entry = versions.get(latest)
        if isinstance(entry, dict):
            deprecated_raw = entry.get("deprecated")

    modified: object = None
    time_info = payload.get("time")
    if isinstance(time_info, dict):
        modified = time_info.get("modified")

    return RegistryMetadata(
        package_name=package_name,
        latest_version=latest,
        last_modified_at=_parse_timestamp(modified),
        deprecated=bool(deprecated_raw),
        deprecation_message=deprecated_raw if isinstance(deprecated_raw, str) and deprecated_raw else None,
    )


class NpmRegistryClient(MetadataFetcher):
    """Fetches package metadata from the npm registry."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def package_url(self, package_name: str) -> str:
        base = self._settings.registry_url.rstrip("/")
        return f"{base}/{quote(package_name, safe='')}"

    async def _get_document(self, package_name: str) -> Any:
        async with build_async_client(self._settings, transport=self._transport) as client:
            response = await client.get(self.package_url(package_name))

        if not response.is_success:
            raise RegistryUnavailableError(package_name, f"HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise RegistryUnavailableError(package_name, "malformed JSON body") from exc

    async def fetch_metadata(self, package_name: str) -> RegistryLookup:
        try:
            payload = await asyncio.wait_for(
                self._get_document(package_name),
                timeout=self._settings.http_timeout_seconds,
            )
            return RegistryLookup.found(parse_registry_document(package_name, payload))
        except RegistryUnavailableError as exc:
            return RegistryLookup.unknown(package_name, exc.reason)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return RegistryLookup.unknown(package_name, "timed out")
        except httpx.HTTPError as exc:
            return RegistryLookup.unknown(package_name, str(exc) or exc.__class__.__name__)
