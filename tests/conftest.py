"""Shared fixtures: a deterministic clock and an in-memory registry."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from packageage.core.domain.models import RegistryLookup, RegistryMetadata
from packageage.core.logging_config import setup_logging

FIXED_NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_metadata(
    name: str,
    *,
    days_ago: int | None = None,
    deprecated: bool = False,
    message: str | None = None,
) -> RegistryMetadata:
    last_modified = FIXED_NOW - timedelta(days=days_ago) if days_ago is not None else None
    return RegistryMetadata(
        package_name=name,
        latest_version="1.0.0",
        last_modified_at=last_modified,
        deprecated=deprecated,
        deprecation_message=message,
    )


class FakeFetcher:
    """In-memory `MetadataFetcher` with call counting.

    Names missing from `responses` come back as unknown (HTTP 404).
    """

    def __init__(
        self,
        responses: dict[str, RegistryMetadata] | None = None,
        *,
        delays: dict[str, float] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.responses = dict(responses or {})
        self.delays = dict(delays or {})
        self.failing = set(failing or ())
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_metadata(self, package_name: str) -> RegistryLookup:
        self.calls.append(package_name)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(package_name, 0))
            if package_name in self.failing:
                raise RuntimeError("connection reset")
            metadata = self.responses.get(package_name)
            if metadata is None:
                return RegistryLookup.unknown(package_name, "HTTP 404")
            return RegistryLookup.found(metadata)
        finally:
            self.in_flight -= 1


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def metadata_factory():
    return make_metadata


@pytest.fixture
def fake_fetcher_factory():
    return FakeFetcher


@pytest.fixture(autouse=True)
def _quiet_logging():
    setup_logging(quiet=True)
    yield
