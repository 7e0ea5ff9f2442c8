"""JSON codec for BEAM feeds.

Consumer path: bytes -> json -> `validate_feed` -> `Feed`.
Publisher path: `Feed` -> dict -> `validate_feed` -> bytes.

Output is UTF-8 JSON in schema field order, with extension fields appended
at the level they were captured from. Absent optional fields are omitted,
never written as `null`. Byte-identical output across implementations is
not a goal; semantic JSON equality is.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Mapping

from beam.core.domain.errors import ErrorKind, InvalidFeedError, MalformedJsonError, ValidationIssue
from beam.core.domain.models import Feed, thaw_json
from beam.core.services.validator import ValidationReport, validate_feed

MEDIA_TYPE = "application/json; charset=utf-8"


def _reject_constant(name: str) -> Any:
    raise MalformedJsonError(f"{name} is not a JSON value")


def _load_json(data: bytes | str) -> Any:
    try:
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8-sig")
        return json.loads(data, parse_constant=_reject_constant)
    except UnicodeDecodeError as exc:
        raise MalformedJsonError(f"not UTF-8 ({exc.reason} at byte {exc.start})") from exc
    except json.JSONDecodeError as exc:
        raise MalformedJsonError(f"{exc.msg} (line {exc.lineno}, column {exc.colno})") from exc


def decode_report(data: bytes | str, *, strict: bool = True) -> ValidationReport:
    """Parse and validate, returning the full report.

    Raises `MalformedJsonError` when the input is not JSON; validation
    problems are left in the report for the caller to inspect.
    """

    return validate_feed(_load_json(data), strict=strict)


def decode(data: bytes | str, *, strict: bool = True) -> Feed:
    """Decode BEAM JSON into a `Feed`.

    In strict mode any validation issue raises `InvalidFeedError`. In lenient
    mode a feed is returned as long as its required fields are sound;
    invalid entries and invalid optional fields are dropped. Use
    `decode_report` to see what was dropped.
    """

    report = decode_report(data, strict=strict)
    if report.feed is None:
        raise InvalidFeedError(report.errors)
    return report.feed


def feed_to_dict(feed: Feed) -> dict[str, Any]:
    """JSON-ready mapping of `feed`, extension fields included."""

    payload = feed.model_dump(
        mode="json",
        exclude_none=True,
        exclude={"extensions": True, "items": {"__all__": {"extensions"}}},
    )
    for dumped, entry in zip(payload["items"], feed.items):
        dumped.update(thaw_json(entry.extensions))
    payload.update(thaw_json(feed.extensions))
    return payload


def _has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, Mapping):
        return any(_has_non_finite(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(_has_non_finite(v) for v in value)
    return False


def _non_finite_issues(feed: Feed) -> list[ValidationIssue]:
    """Extension values holding NaN or +/-Infinity, which JSON cannot carry."""

    issues = [
        ValidationIssue(kind=ErrorKind.INVALID_FIELD, field=key, message="NaN/Infinity is not JSON")
        for key, value in feed.extensions.items()
        if _has_non_finite(value)
    ]
    for index, entry in enumerate(feed.items):
        issues.extend(
            ValidationIssue(
                kind=ErrorKind.INVALID_FIELD,
                field=key,
                index=index,
                entry_id=entry.id,
                message="NaN/Infinity is not JSON",
            )
            for key, value in entry.extensions.items()
            if _has_non_finite(value)
        )
    return issues


def encode(feed: Feed, *, indent: int | None = 2) -> bytes:
    """Serialize `feed` to UTF-8 JSON bytes.

    The payload goes through `validate_feed` first, so a model that cannot
    be decoded back (duplicate ids, relative URLs, NaN in an extension, ...)
    raises `InvalidFeedError` instead of producing a non-conforming document.
    """

    payload = feed_to_dict(feed)
    issues = validate_feed(payload, strict=True).errors + _non_finite_issues(feed)
    if issues:
        raise InvalidFeedError(issues)
    text = json.dumps(payload, ensure_ascii=False, allow_nan=False, indent=indent or None)
    if indent:
        text += "\n"
    return text.encode("utf-8")


def read_feed(path: Path, *, strict: bool = True) -> Feed:
    """Decode a BEAM document stored on disk."""

    return decode(path.read_bytes(), strict=strict)


def write_feed(feed: Feed, path: Path, *, indent: int | None = 2) -> Path:
    """Encode `feed` to `path` (parents are created)."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode(feed, indent=indent))
    return path
