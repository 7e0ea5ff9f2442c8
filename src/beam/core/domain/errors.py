"""Error taxonomy for BEAM decoding and validation.

Validation problems are values (`ValidationIssue`), not exceptions: the
validator accumulates them so publishers get a complete diagnostic in one
pass. Exceptions are reserved for the codec boundary, where a caller asked
for a `Feed` and cannot get one.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    """Categories of problems a BEAM document can have."""

    MALFORMED_JSON = "malformed_json"
    UNSUPPORTED_VERSION = "unsupported_version"
    MISSING_FIELD = "missing_field"
    INVALID_FIELD = "invalid_field"
    DUPLICATE_ENTRY_ID = "duplicate_entry_id"

    def label(self) -> str:
        """Human readable label for tables and logs."""

        return self.value.replace("_", " ")


class ValidationIssue(BaseModel):
    """A single violation found while checking a candidate feed."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    field: str | None = Field(
        default=None,
        description="Wire name of the offending field (e.g. 'published', 'author.name').",
    )
    index: int | None = Field(
        default=None,
        ge=0,
        description="Position in `items` for entry-level issues; None at feed level.",
    )
    entry_id: str | None = Field(
        default=None,
        description="Id of the entry involved, when it is known.",
    )
    message: str = ""

    @property
    def location(self) -> str:
        """Path-like location, e.g. `items[2].published` or `feed_url`."""

        parts: list[str] = []
        if self.index is not None:
            parts.append(f"items[{self.index}]")
        if self.field:
            parts.append(self.field)
        return ".".join(parts) or "$"

    def __str__(self) -> str:
        text = f"{self.kind.value} at {self.location}"
        if self.message:
            text += f": {self.message}"
        return text


class BeamError(Exception):
    """Base class for every error raised by this package."""


class DecodeError(BeamError):
    """Raw input could not be turned into a `Feed`."""


class MalformedJsonError(DecodeError):
    """Input bytes are not valid UTF-8 JSON."""

    kind = ErrorKind.MALFORMED_JSON

    def __init__(self, detail: str) -> None:
        super().__init__(f"malformed JSON: {detail}")
        self.detail = detail


class InvalidFeedError(DecodeError):
    """The JSON value does not satisfy BEAM's structural rules."""

    def __init__(self, issues: Iterable[ValidationIssue]) -> None:
        self.issues: list[ValidationIssue] = list(issues)
        count = len(self.issues)
        head = "; ".join(str(i) for i in self.issues[:3])
        more = f" (+{count - 3} more)" if count > 3 else ""
        super().__init__(f"invalid BEAM feed, {count} issue(s): {head}{more}")

    def kinds(self) -> set[ErrorKind]:
        return {issue.kind for issue in self.issues}


class SourceError(BeamError):
    """A feed source could not produce bytes (missing file, HTTP failure)."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"cannot read {location}: {reason}")
        self.location = location
        self.reason = reason
