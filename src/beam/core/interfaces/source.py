"""Feed source contract.

The core never fetches anything. Callers (the CLI, applications) hand it
bytes obtained through a `FeedSource`: a file, an HTTP URL, a test double.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FeedSource(Protocol):
    """Minimal contract for something that yields raw BEAM bytes.

    Rules:
    - `read` is synchronous and returns the whole document.
    - Failures are reported as `beam.core.domain.errors.SourceError`.
    """

    location: str

    def read(self) -> bytes:
        """Return the raw document bytes."""

        ...
