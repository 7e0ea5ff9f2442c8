from datetime import datetime, timezone

import pytest

from beam.adapters.json_codec import decode, encode
from beam.core.domain.models import Author
from beam.core.services.publisher import (
    coerce_timestamp,
    estimate_reading_time,
    latest_change,
    make_entry,
    make_feed,
    normalize_tags,
)


# ── estimate_reading_time ─────────────────────────────────────

class TestEstimateReadingTime:
    def test_empty(self):
        assert estimate_reading_time("") == 0
        assert estimate_reading_time(None) == 0

    def test_rounds_up(self):
        assert estimate_reading_time("word " * 201) == 2

    def test_exact(self):
        assert estimate_reading_time("word " * 400) == 2

    def test_ignores_html(self):
        html = "<p class='lead'>" + "<b>word</b> " * 10 + "</p>"
        assert estimate_reading_time(html, words_per_minute=10) == 1

    def test_attribute_values_not_counted(self):
        assert estimate_reading_time('<p title="a > b">one</p>', words_per_minute=1) == 1

    def test_comments_not_counted(self):
        assert estimate_reading_time("<!-- x > draft notes here --><p>one</p>", words_per_minute=1) == 1

    def test_entities_decoded(self):
        assert estimate_reading_time("<p>fish&nbsp;&amp;&nbsp;chips</p>", words_per_minute=1) == 2

    def test_custom_speed(self):
        assert estimate_reading_time("a b c d e f", words_per_minute=2) == 3

    def test_invalid_speed(self):
        with pytest.raises(ValueError):
            estimate_reading_time("a", words_per_minute=0)


# ── normalize_tags ────────────────────────────────────────────

class TestNormalizeTags:
    def test_none(self):
        assert normalize_tags(None) is None

    def test_dedup_case_insensitive_keeps_first(self):
        assert normalize_tags(["Python", "python", "BEAM", " beam "]) == ("Python", "BEAM")

    def test_drops_blank(self):
        assert normalize_tags(["", "  ", None, "x"]) == ("x",)


# ── coerce_timestamp ──────────────────────────────────────────

class TestCoerceTimestamp:
    def test_string(self):
        assert coerce_timestamp("2025-06-29T12:00:00Z") == datetime(2025, 6, 29, 12, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert coerce_timestamp(datetime(2025, 6, 29, 12)).tzinfo is timezone.utc

    def test_string_without_offset_rejected(self):
        with pytest.raises(ValueError):
            coerce_timestamp("2025-06-29T12:00:00")


# ── make_entry / make_feed ────────────────────────────────────

class TestMakeEntry:
    def test_reading_time_from_content(self):
        entry = make_entry(
            id="p1",
            title="Post",
            url="https://blog.example.com/p1",
            published="2025-06-29T12:00:00Z",
            content="<p>" + "word " * 450 + "</p>",
        )
        assert entry.reading_time == 3

    def test_explicit_reading_time_wins(self):
        entry = make_entry(
            id="p1",
            title="Post",
            url="https://blog.example.com/p1",
            published="2025-06-29T12:00:00Z",
            content="word " * 450,
            reading_time=10,
        )
        assert entry.reading_time == 10

    def test_no_content_no_reading_time(self):
        entry = make_entry(id="p1", title="Post", url="https://e.com/p1", published="2025-06-29T12:00:00Z")
        assert entry.reading_time is None

    def test_author_forms(self):
        common = dict(id="p", title="T", url="https://e.com/p", published="2025-06-29T12:00:00Z")
        assert make_entry(author="Ada", **common).author == Author(name="Ada")
        assert make_entry(author={"name": "Ada", "email": "a@e.com"}, **common).author.email == "a@e.com"
        assert make_entry(author=Author(name="Ada"), **common).author.name == "Ada"

    def test_extensions(self):
        entry = make_entry(
            id="p", title="T", url="https://e.com/p", published="2025-06-29T12:00:00Z",
            extensions={"_views": 3},
        )
        assert entry.extensions == {"_views": 3}


class TestMakeFeed:
    def _entries(self):
        return [
            make_entry(id="new", title="New", url="https://e.com/new", published="2025-06-30T09:00:00Z"),
            make_entry(
                id="old",
                title="Old",
                url="https://e.com/old",
                published="2025-06-01T09:00:00Z",
                updated="2025-07-02T09:00:00Z",
            ),
        ]

    def test_last_updated_defaults_to_latest_change(self):
        feed = make_feed(title="Blog", feed_url="https://e.com/feed.json", entries=self._entries())
        assert feed.last_updated == datetime(2025, 7, 2, 9, tzinfo=timezone.utc)

    def test_explicit_last_updated(self):
        feed = make_feed(
            title="Blog",
            feed_url="https://e.com/feed.json",
            entries=self._entries(),
            last_updated="2025-08-01T00:00:00Z",
        )
        assert feed.last_updated == datetime(2025, 8, 1, tzinfo=timezone.utc)

    def test_empty_feed(self):
        feed = make_feed(title="Blog", feed_url="https://e.com/feed.json", entries=[])
        assert feed.items == ()
        assert feed.last_updated is None
        assert latest_change([]) is None

    def test_order_kept(self):
        feed = make_feed(title="Blog", feed_url="https://e.com/feed.json", entries=self._entries())
        assert feed.entry_ids == ["new", "old"]

    def test_publisher_path_round_trip(self):
        feed = make_feed(
            title="Blog",
            feed_url="https://e.com/feed.json",
            home_page_url="https://e.com/",
            language="en",
            author="Ada",
            entries=self._entries(),
            extensions={"_generator": "beam"},
        )
        assert decode(encode(feed)) == feed
