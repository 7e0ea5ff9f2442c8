"""Concrete `FeedSource` implementations: local files and HTTP URLs."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from beam.adapters.http_client import build_client, conditional_headers
from beam.core.config import BeamSettings
from beam.core.domain.errors import SourceError

log = logging.getLogger("beam.sources")


class FileFeedSource:
    """Reads a BEAM document from disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.location = str(self.path)

    def read(self) -> bytes:
        log.debug("Reading feed file %s", self.path)
        try:
            return self.path.read_bytes()
        except FileNotFoundError as exc:
            raise SourceError(self.location, "file not found") from exc
        except OSError as exc:
            log.warning("Cannot read %s: %s", self.path, exc)
            raise SourceError(self.location, exc.strerror or str(exc)) from exc


class HttpFeedSource:
    """Fetches a BEAM document with a single GET.

    After a successful `read`, `etag` and `last_modified` hold the response
    validators (or None) so callers can send a conditional request next
    time via `etag=` / `last_modified=`. A `304 Not Modified` answer is
    reported as `SourceError` with reason `not modified`.
    """

    def __init__(
        self,
        url: str,
        settings: BeamSettings | None = None,
        *,
        etag: str | None = None,
        last_modified: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.location = url
        self._settings = settings or BeamSettings()
        self._transport = transport
        self.etag = etag
        self.last_modified = last_modified

    def read(self) -> bytes:
        headers = conditional_headers(etag=self.etag, last_modified=self.last_modified)
        log.debug("GET %s", self.url)
        try:
            with build_client(self._settings, extra_headers=headers, transport=self._transport) as client:
                response = client.get(self.url)
        except httpx.HTTPError as exc:
            log.warning("Fetching %s failed: %s", self.url, exc)
            raise SourceError(self.location, str(exc) or exc.__class__.__name__) from exc

        if response.status_code == 304:
            raise SourceError(self.location, "not modified")
        if response.is_error:
            log.warning("Fetching %s returned HTTP %d", self.url, response.status_code)
            raise SourceError(self.location, f"HTTP {response.status_code}")

        self.etag = response.headers.get("ETag")
        self.last_modified = response.headers.get("Last-Modified")
        log.debug("Fetched %d bytes from %s", len(response.content), self.url)
        return response.content


def is_url(value: str) -> bool:
    return value.lower().startswith(("http://", "https://"))


def open_source(value: str, settings: BeamSettings | None = None) -> FileFeedSource | HttpFeedSource:
    """Pick a source for a CLI argument: http(s) URLs go over HTTP, anything else is a path."""

    if is_url(value):
        return HttpFeedSource(value, settings)
    return FileFeedSource(Path(value))
