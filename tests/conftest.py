import copy
import json

import pytest

MINIMAL_FEED = {
    "version": "1.0",
    "title": "Test Blog",
    "feed_url": "https://test.example.com/feed.json",
    "items": [
        {
            "id": "test-post-1",
            "title": "Test Post",
            "url": "https://test.example.com/test-post",
            "published": "2025-06-29T12:00:00Z",
        }
    ],
}

FULL_FEED = {
    "version": "1.0",
    "title": "Full Blog",
    "feed_url": "https://blog.example.com/feed.json",
    "description": "Everything BEAM can say",
    "home_page_url": "https://blog.example.com/",
    "language": "en",
    "author": {"name": "Ada", "email": "ada@example.com", "url": "https://ada.example.com"},
    "last_updated": "2025-07-01T08:30:00+02:00",
    "items": [
        {
            "id": "post-2",
            "title": "Second",
            "url": "https://blog.example.com/second",
            "published": "2025-06-30T10:00:00Z",
            "updated": "2025-07-01T06:30:00Z",
            "content": "<p>Hello <b>world</b></p>",
            "summary": "Hello",
            "author": {"name": "Grace"},
            "tags": ["python", "beam", "python"],
            "category": "news",
            "image": "https://blog.example.com/second.png",
            "reading_time": 0,
            "_analytics": {"views": 12, "sources": ["rss", None]},
        },
        {
            "id": "post-1",
            "title": "First",
            "url": "https://blog.example.com/first",
            "published": "2025-06-29T12:00:00Z",
        },
    ],
    "_monetization": {"provider": "coil", "pointer": "$wallet.example.com/ada"},
    "_generator": "hand-written",
}


def _dup(data):
    return copy.deepcopy(data)


@pytest.fixture
def minimal_feed():
    return _dup(MINIMAL_FEED)


@pytest.fixture
def full_feed():
    return _dup(FULL_FEED)


@pytest.fixture
def minimal_bytes():
    return json.dumps(MINIMAL_FEED).encode("utf-8")


@pytest.fixture
def full_bytes():
    return json.dumps(FULL_FEED).encode("utf-8")


@pytest.fixture
def make_item():
    """Factory for valid raw entries with overrides."""

    def _make(entry_id="a", **overrides):
        item = {
            "id": entry_id,
            "title": f"Post {entry_id}",
            "url": f"https://test.example.com/{entry_id}",
            "published": "2025-06-29T12:00:00Z",
        }
        item.update(overrides)
        return item

    return _make


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep user/global BEAM settings out of the tests."""

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    for key in ("BEAM_STRICT", "BEAM_JSON_INDENT", "BEAM_LOG_LEVEL", "BEAM_USER_AGENT"):
        monkeypatch.delenv(key, raising=False)
