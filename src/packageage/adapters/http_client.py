"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts and headers for every registry request.
- Makes testing easy: a `transport` (e.g. `httpx.MockTransport`) can be
  injected instead of hitting the network.
"""

from __future__ import annotations

import httpx

from packageage.core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    The timeout applies to each request individually.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
