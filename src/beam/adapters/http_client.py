"""httpx wrapper used by the HTTP feed source.

Only the calling side (CLI, applications) fetches feeds; the core never
does. There is no cache here: response validators (`ETag`,
`Last-Modified`) are handed back to the caller to store as it sees fit.
"""

from __future__ import annotations

import httpx

from beam.adapters.json_codec import MEDIA_TYPE
from beam.core.config import BeamSettings


def build_client(
    settings: BeamSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with the configured timeout and headers."""

    settings = settings or BeamSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": f"{MEDIA_TYPE}, application/json;q=0.9, */*;q=0.1",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def conditional_headers(*, etag: str | None = None, last_modified: str | None = None) -> dict[str, str]:
    """Request headers for a conditional GET from previously stored validators."""

    headers: dict[str, str] = {}
    if etag:
        headers["If-None-Match"] = etag
    if last_modified:
        headers["If-Modified-Since"] = last_modified
    return headers
