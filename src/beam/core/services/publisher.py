"""Helpers for the publisher path: blog data -> `Feed`.

These build models only; call `beam.adapters.json_codec.encode` to get the
bytes, which validates the result before writing.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Sequence

from bs4 import BeautifulSoup

from beam.core.domain.models import BEAM_VERSION, Author, Entry, Feed, parse_timestamp

DEFAULT_WORDS_PER_MINUTE = 200

_WORD_RE = re.compile(r"\w+(?:['’-]\w+)*", re.UNICODE)


def estimate_reading_time(text: str | None, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Minutes needed to read `text`, rounded up.

    Only the visible text of HTML content counts: markup, attribute values
    and comments are skipped, entities are decoded.
    """

    if words_per_minute <= 0:
        raise ValueError("words_per_minute must be positive")
    plain = BeautifulSoup(text or "", "html.parser").get_text(" ")
    words = len(_WORD_RE.findall(plain))
    if words == 0:
        return 0
    return math.ceil(words / words_per_minute)


def normalize_tags(tags: Iterable[str] | None) -> tuple[str, ...] | None:
    """Strip tags and drop empty ones and case-insensitive repeats, keeping order."""

    if tags is None:
        return None
    seen: set[str] = set()
    clean: list[str] = []
    for tag in tags:
        tag = (tag or "").strip()
        if not tag:
            continue
        key = tag.casefold()
        if key not in seen:
            seen.add(key)
            clean.append(tag)
    return tuple(clean)


def coerce_timestamp(value: datetime | str | None) -> datetime | None:
    """Accept a datetime or an ISO 8601 string; naive datetimes are taken as UTC."""

    if value is None:
        return None
    if isinstance(value, str):
        return parse_timestamp(value)
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def coerce_author(value: Author | Mapping[str, Any] | str | None) -> Author | None:
    if value is None or isinstance(value, Author):
        return value
    if isinstance(value, str):
        return Author(name=value)
    return Author(**dict(value))


def make_entry(
    *,
    id: str,
    title: str,
    url: str,
    published: datetime | str,
    content: str | None = None,
    summary: str | None = None,
    updated: datetime | str | None = None,
    author: Author | Mapping[str, Any] | str | None = None,
    tags: Iterable[str] | None = None,
    category: str | None = None,
    image: str | None = None,
    reading_time: int | None = None,
    extensions: Mapping[str, Any] | None = None,
    words_per_minute: int = DEFAULT_WORDS_PER_MINUTE,
) -> Entry:
    """Build an `Entry` from a blog post.

    `reading_time` is estimated from `content` when not given.
    """

    if reading_time is None and content:
        reading_time = estimate_reading_time(content, words_per_minute)

    return Entry(
        id=id,
        title=title,
        url=url,
        published=coerce_timestamp(published),
        content=content,
        summary=summary,
        updated=coerce_timestamp(updated),
        author=coerce_author(author),
        tags=normalize_tags(tags),
        category=category,
        image=image,
        reading_time=reading_time,
        extensions=dict(extensions or {}),
    )


def latest_change(entries: Sequence[Entry]) -> datetime | None:
    """Newest `updated` (or `published`) moment among `entries`."""

    moments = [e.updated or e.published for e in entries]
    return max(moments) if moments else None


def make_feed(
    *,
    title: str,
    feed_url: str,
    entries: Iterable[Entry],
    description: str | None = None,
    home_page_url: str | None = None,
    language: str | None = None,
    author: Author | Mapping[str, Any] | str | None = None,
    last_updated: datetime | str | None = None,
    extensions: Mapping[str, Any] | None = None,
) -> Feed:
    """Build a `Feed`; entries keep the order they are given in."""

    items = tuple(entries)
    return Feed(
        version=BEAM_VERSION,
        title=title,
        feed_url=feed_url,
        items=items,
        description=description,
        home_page_url=home_page_url,
        language=language,
        author=coerce_author(author),
        last_updated=coerce_timestamp(last_updated) or latest_change(items),
        extensions=dict(extensions or {}),
    )
