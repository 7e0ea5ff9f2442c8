"""Reference implementation of BEAM 1.0, a JSON blog syndication format.

Consumer path::

    feed = beam.decode(raw_bytes)

Publisher path::

    data = beam.encode(beam.make_feed(title=..., feed_url=..., entries=[...]))
"""

from beam.adapters.json_codec import decode, decode_report, encode, feed_to_dict, read_feed, write_feed
from beam.core.domain.errors import (
    BeamError,
    DecodeError,
    ErrorKind,
    InvalidFeedError,
    MalformedJsonError,
    SourceError,
    ValidationIssue,
)
from beam.core.domain.models import BEAM_VERSION, Author, Entry, Feed, thaw_json
from beam.core.services.consumer import entries_by_tag, entries_since, new_entries, sorted_by_published
from beam.core.services.publisher import estimate_reading_time, make_entry, make_feed
from beam.core.services.validator import EntryReport, ValidationReport, validate_entry, validate_feed

__version__ = "1.0.0"

__all__ = [
    "BEAM_VERSION",
    "Author",
    "BeamError",
    "DecodeError",
    "Entry",
    "EntryReport",
    "ErrorKind",
    "Feed",
    "InvalidFeedError",
    "MalformedJsonError",
    "SourceError",
    "ValidationIssue",
    "ValidationReport",
    "decode",
    "decode_report",
    "encode",
    "entries_by_tag",
    "entries_since",
    "estimate_reading_time",
    "feed_to_dict",
    "make_entry",
    "make_feed",
    "new_entries",
    "read_feed",
    "sorted_by_published",
    "thaw_json",
    "validate_entry",
    "validate_feed",
    "write_feed",
]
