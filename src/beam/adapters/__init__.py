"""Infrastructure around the core: JSON codec, feed sources, HTTP client."""

from beam.adapters.json_codec import decode, decode_report, encode, feed_to_dict, read_feed, write_feed
from beam.adapters.sources import FileFeedSource, HttpFeedSource, open_source

__all__ = [
    "FileFeedSource",
    "HttpFeedSource",
    "decode",
    "decode_report",
    "encode",
    "feed_to_dict",
    "open_source",
    "read_feed",
    "write_feed",
]
