"""Registry lookup contract.

Why Protocol:
- Structural contract (duck typing) with no rigid inheritance.
- The gate depends on this capability only, so tests can inject fakes that
  simulate timeouts, bad bodies or deprecations without network access.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from packageage.core.domain.models import RegistryLookup


@runtime_checkable
class MetadataFetcher(Protocol):
    """Minimal contract for a package registry source.

    Design rules:
    - `fetch_metadata` is async because it performs network I/O.
    - It never raises: failures come back as `RegistryLookup.unknown(...)`.
    """

    async def fetch_metadata(self, package_name: str) -> RegistryLookup:
        """Fetch publication metadata for `package_name`."""

        ...
