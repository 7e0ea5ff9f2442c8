"""Helpers for the consumer path, over an already decoded `Feed`."""

from __future__ import annotations

from datetime import datetime

from beam.core.domain.models import Entry, Feed


def new_entries(feed: Feed, last_seen_id: str | None) -> list[Entry]:
    """Entries listed before `last_seen_id`, in feed order.

    Feeds list the newest post first, so these are the posts a reader has
    not seen yet. Every entry is returned when `last_seen_id` is None or no
    longer present in the feed.
    """

    backlog: list[Entry] = []
    for entry in feed.items:
        if last_seen_id is not None and entry.id == last_seen_id:
            break
        backlog.append(entry)
    return backlog


def entries_since(feed: Feed, moment: datetime, *, include_updates: bool = True) -> list[Entry]:
    """Entries published (or updated, unless `include_updates` is False) after `moment`."""

    if moment.tzinfo is None or moment.utcoffset() is None:
        raise ValueError("moment must be timezone-aware")
    out: list[Entry] = []
    for entry in feed.items:
        changed = entry.published
        if include_updates and entry.updated is not None and entry.updated > changed:
            changed = entry.updated
        if changed > moment:
            out.append(entry)
    return out


def sorted_by_published(feed: Feed, *, newest_first: bool = True) -> list[Entry]:
    return sorted(feed.items, key=lambda e: e.published, reverse=newest_first)


def entries_by_tag(feed: Feed, tag: str) -> list[Entry]:
    """Entries carrying `tag` (case-insensitive)."""

    wanted = tag.strip().casefold()
    return [e for e in feed.items if e.tags and any(t.casefold() == wanted for t in e.tags)]
