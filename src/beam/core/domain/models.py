"""BEAM domain models (Pydantic v2).

The models describe *what* a BEAM feed is. They do not know about bytes,
files or HTTP; `beam.adapters.json_codec` maps them to and from the wire.

Notes:
- Models are frozen: a decoded feed is read-only for consumers, and a
  publisher builds a fresh one right before encoding.
- Optional fields use `None` for absence. An empty string is a value.
- `extensions` holds the `_`-prefixed keys found at the same nesting level,
  in the order they were encountered, as read-only JSON values: objects
  become `MappingProxyType`, arrays become tuples. `thaw_json` turns them
  back into plain dicts and lists.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any, Literal, Mapping

from pydantic import AwareDatetime, BaseModel, Field, field_serializer, field_validator
from pydantic.config import ConfigDict

BEAM_VERSION = "1.0"
EXTENSION_PREFIX = "_"


def is_extension_key(key: str) -> bool:
    return key.startswith(EXTENSION_PREFIX)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp that carries an explicit UTC offset.

    Raises `ValueError` for unparseable strings and for values without
    timezone information (including date-only values such as `2025-06-29`).
    """

    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise ValueError(f"timestamp {value!r} has no UTC offset")
    return parsed


def format_timestamp(value: datetime) -> str:
    """Render a timezone-aware datetime, using `Z` for UTC."""

    if value.utcoffset() == timedelta(0):
        return value.replace(tzinfo=None).isoformat() + "Z"
    return value.isoformat()


def freeze_json(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze_json(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_json(v) for v in value)
    return value


def thaw_json(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: thaw_json(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw_json(v) for v in value]
    return value


def _freeze_extensions(value: Mapping[str, Any]) -> Mapping[str, Any]:
    bad = [k for k in value if not is_extension_key(k)]
    if bad:
        raise ValueError(f"extension keys must start with '{EXTENSION_PREFIX}': {', '.join(bad)}")
    return freeze_json(value)


class Author(BaseModel):
    """Author of a feed or of a single entry. Pure value object."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Display name.")
    email: str | None = Field(default=None, description="Contact address, not validated.")
    url: str | None = Field(default=None, description="Absolute http/https URL.")


class Entry(BaseModel):
    """One syndicated post inside a feed."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique within the enclosing feed.")
    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1, description="Canonical URL of the post.")
    published: AwareDatetime = Field(..., description="Publication time, timezone-aware.")

    content: str | None = Field(default=None, description="Full body (HTML or text).")
    summary: str | None = None
    updated: AwareDatetime | None = None
    author: Author | None = None
    tags: tuple[str, ...] | None = Field(
        default=None,
        description="Ordered tags; duplicates are allowed.",
    )
    category: str | None = None
    image: str | None = Field(default=None, description="Absolute http/https URL.")
    reading_time: int | None = Field(default=None, ge=0, description="Minutes.")

    extensions: Mapping[str, Any] = Field(
        default_factory=dict,
        validate_default=True,
        description="`_`-prefixed entry keys, kept verbatim.",
    )

    @field_validator("extensions")
    @classmethod
    def _extension_keys(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze_extensions(value)

    @field_serializer("extensions")
    def _serialize_extensions(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return thaw_json(value)

    @field_serializer("published", "updated")
    def _serialize_timestamp(self, value: datetime | None) -> str | None:
        return format_timestamp(value) if value is not None else None


class Feed(BaseModel):
    """Top-level BEAM document: a blog and its entries in publication order."""

    model_config = ConfigDict(frozen=True)

    version: Literal["1.0"] = Field(
        default=BEAM_VERSION,
        description="Protocol revision; this library only speaks 1.0.",
    )
    title: str = Field(..., min_length=1)
    feed_url: str = Field(..., min_length=1, description="Absolute URL of this document.")
    items: tuple[Entry, ...] = Field(..., description="Entries in the order given by the publisher.")

    description: str | None = None
    home_page_url: str | None = None
    language: str | None = Field(default=None, description="ISO 639-1 style code, e.g. 'en' or 'pt-BR'.")
    author: Author | None = None
    last_updated: AwareDatetime | None = None

    extensions: Mapping[str, Any] = Field(
        default_factory=dict,
        validate_default=True,
        description="`_`-prefixed top-level keys, kept verbatim.",
    )

    @field_validator("extensions")
    @classmethod
    def _extension_keys(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze_extensions(value)

    @field_serializer("extensions")
    def _serialize_extensions(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return thaw_json(value)

    @field_serializer("last_updated")
    def _serialize_timestamp(self, value: datetime | None) -> str | None:
        return format_timestamp(value) if value is not None else None

    def entry(self, entry_id: str) -> Entry | None:
        """Return the entry with `entry_id`, or None."""

        for item in self.items:
            if item.id == entry_id:
                return item
        return None

    @property
    def entry_ids(self) -> list[str]:
        return [item.id for item in self.items]
