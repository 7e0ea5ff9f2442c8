"""Structural validation of decoded BEAM documents.

Input is whatever `json.loads` produced; output is a report holding either a
validated `Feed` or the list of every independently-detectable problem.

Rules of the game:
- Pure functions: no I/O, no logging, no shared state.
- Errors accumulate; only an unsupported `version` stops the check early,
  because nothing else in the document can be trusted after it.
- Absent and explicit `null` are the same state for optional fields.
- `_`-prefixed keys are extension data: copied verbatim, never checked.
- In lenient mode, invalid optional fields are dropped and invalid entries
  are skipped; missing or invalid required feed fields are always fatal.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from beam.core.domain.errors import ErrorKind, ValidationIssue
from beam.core.domain.models import (
    BEAM_VERSION,
    Author,
    Entry,
    Feed,
    is_extension_key,
    parse_timestamp,
)

_HTTP_URL = TypeAdapter(HttpUrl)
_LANGUAGE_RE = re.compile(r"^[A-Za-z]{2}(?:[-_][A-Za-z0-9]{2,8})*$")


@dataclass
class EntryReport:
    """Outcome of `validate_entry`."""

    entry: Entry | None
    errors: list[ValidationIssue] = field(default_factory=list)
    index: int | None = None

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ValidationReport:
    """Outcome of `validate_feed`.

    `feed` is None when the document is unusable: always in strict mode if
    any error was found, and in lenient mode when a fatal error was found.
    """

    feed: Feed | None
    errors: list[ValidationIssue] = field(default_factory=list)
    strict: bool = True
    skipped_entries: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def errors_of(self, kind: ErrorKind) -> list[ValidationIssue]:
        return [e for e in self.errors if e.kind is kind]

    def feed_level_errors(self) -> list[ValidationIssue]:
        return [e for e in self.errors if e.index is None]


class _Collector:
    """Accumulates issues for one feed or one entry."""

    def __init__(self, index: int | None = None, entry_id: str | None = None) -> None:
        self.index = index
        self.entry_id = entry_id
        self.issues: list[ValidationIssue] = []
        self.required_failed = False

    def add(self, kind: ErrorKind, name: str | None, message: str, *, required: bool = False) -> None:
        if required:
            self.required_failed = True
        self.issues.append(
            ValidationIssue(
                kind=kind,
                field=name,
                index=self.index,
                entry_id=self.entry_id,
                message=message,
            )
        )

    # Required fields -------------------------------------------------

    def required_string(self, data: dict[str, Any], name: str) -> str | None:
        value = data.get(name)
        if value is None:
            self.add(ErrorKind.MISSING_FIELD, name, f"'{name}' is required", required=True)
            return None
        if not isinstance(value, str):
            self.add(ErrorKind.INVALID_FIELD, name, f"'{name}' must be a string", required=True)
            return None
        if not value.strip():
            self.add(ErrorKind.MISSING_FIELD, name, f"'{name}' must not be empty", required=True)
            return None
        return value

    def required_url(self, data: dict[str, Any], name: str) -> str | None:
        if data.get(name) is None:
            self.add(ErrorKind.MISSING_FIELD, name, f"'{name}' is required", required=True)
            return None
        return self.url(data, name, required=True)

    def required_timestamp(self, data: dict[str, Any], name: str) -> datetime | None:
        if data.get(name) is None:
            self.add(ErrorKind.MISSING_FIELD, name, f"'{name}' is required", required=True)
            return None
        return self.timestamp(data, name, required=True)

    # Optional fields -------------------------------------------------

    def string(self, data: dict[str, Any], name: str) -> str | None:
        value = data.get(name)
        if value is None:
            return None
        if not isinstance(value, str):
            self.add(ErrorKind.INVALID_FIELD, name, f"'{name}' must be a string")
            return None
        return value

    def url(self, data: dict[str, Any], name: str, *, required: bool = False, label: str | None = None) -> str | None:
        value = data.get(name)
        label = label or name
        if value is None:
            return None
        if not isinstance(value, str) or not is_http_url(value):
            self.add(
                ErrorKind.INVALID_FIELD,
                label,
                f"'{label}' must be an absolute http(s) URL, got {value!r}",
                required=required,
            )
            return None
        return value

    def timestamp(self, data: dict[str, Any], name: str, *, required: bool = False) -> datetime | None:
        value = data.get(name)
        if value is None:
            return None
        if not isinstance(value, str):
            self.add(ErrorKind.INVALID_FIELD, name, f"'{name}' must be an ISO 8601 string", required=required)
            return None
        try:
            return parse_timestamp(value)
        except ValueError:
            self.add(
                ErrorKind.INVALID_FIELD,
                name,
                f"'{name}' must be ISO 8601 with a UTC offset, got {value!r}",
                required=required,
            )
            return None

    def language(self, data: dict[str, Any], name: str = "language") -> str | None:
        value = data.get(name)
        if value is None:
            return None
        if not isinstance(value, str) or not _LANGUAGE_RE.match(value):
            self.add(ErrorKind.INVALID_FIELD, name, f"'{name}' must look like an ISO 639-1 code, got {value!r}")
            return None
        return value

    def tags(self, data: dict[str, Any], name: str = "tags") -> tuple[str, ...] | None:
        value = data.get(name)
        if value is None:
            return None
        if not isinstance(value, list):
            self.add(ErrorKind.INVALID_FIELD, name, f"'{name}' must be an array of strings")
            return None
        bad = [i for i, tag in enumerate(value) if not isinstance(tag, str)]
        if bad:
            self.add(ErrorKind.INVALID_FIELD, name, f"'{name}' has non-string values at positions {bad}")
            return None
        return tuple(value)

    def minutes(self, data: dict[str, Any], name: str = "reading_time") -> int | None:
        value = data.get(name)
        if value is None:
            return None
        # bool is an int subclass in Python, but `true` is not a duration.
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            self.add(ErrorKind.INVALID_FIELD, name, f"'{name}' must be a non-negative integer, got {value!r}")
            return None
        return value

    def author(self, data: dict[str, Any], name: str = "author") -> Author | None:
        value = data.get(name)
        if value is None:
            return None
        if not isinstance(value, dict):
            self.add(ErrorKind.INVALID_FIELD, name, f"'{name}' must be an object")
            return None

        before = len(self.issues)
        author_name = value.get("name")
        if author_name is None:
            self.add(ErrorKind.MISSING_FIELD, f"{name}.name", "author 'name' is required")
        elif not isinstance(author_name, str):
            self.add(ErrorKind.INVALID_FIELD, f"{name}.name", "author 'name' must be a string")
        elif not author_name.strip():
            self.add(ErrorKind.MISSING_FIELD, f"{name}.name", "author 'name' must not be empty")

        email = value.get("email")
        if email is not None and not isinstance(email, str):
            self.add(ErrorKind.INVALID_FIELD, f"{name}.email", "author 'email' must be a string")
        url = self.url(value, "url", label=f"{name}.url")

        if len(self.issues) > before:
            return None
        return Author(name=author_name, email=email, url=url)


def is_http_url(value: str) -> bool:
    """True when `value` is a syntactically valid absolute http/https URL."""

    if not value or value != value.strip():
        return False
    try:
        _HTTP_URL.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def extract_extensions(data: dict[str, Any]) -> dict[str, Any]:
    """Copy `_`-prefixed keys in encounter order."""

    return {k: copy.deepcopy(v) for k, v in data.items() if is_extension_key(k)}


def _raw_entry_id(candidate: Any) -> str | None:
    if isinstance(candidate, dict):
        value = candidate.get("id")
        if isinstance(value, str) and value.strip():
            return value
    return None


def validate_entry(candidate: Any, index: int | None = None, *, strict: bool = True) -> EntryReport:
    """Check one element of `items`.

    Required: `id`, `title`, `url`, `published`. Optional fields are
    type-checked only when present.
    """

    check = _Collector(index=index, entry_id=_raw_entry_id(candidate))
    if not isinstance(candidate, dict):
        check.add(ErrorKind.INVALID_FIELD, None, "entry must be a JSON object", required=True)
        return EntryReport(entry=None, errors=check.issues, index=index)

    values: dict[str, Any] = {
        "id": check.required_string(candidate, "id"),
        "title": check.required_string(candidate, "title"),
        "url": check.required_url(candidate, "url"),
        "published": check.required_timestamp(candidate, "published"),
        "content": check.string(candidate, "content"),
        "summary": check.string(candidate, "summary"),
        "updated": check.timestamp(candidate, "updated"),
        "author": check.author(candidate),
        "tags": check.tags(candidate),
        "category": check.string(candidate, "category"),
        "image": check.url(candidate, "image"),
        "reading_time": check.minutes(candidate),
    }

    if check.required_failed or (strict and check.issues):
        return EntryReport(entry=None, errors=check.issues, index=index)

    entry = Entry(
        **{k: v for k, v in values.items() if v is not None},
        extensions=extract_extensions(candidate),
    )
    return EntryReport(entry=entry, errors=check.issues, index=index)


def validate_feed(candidate: Any, *, strict: bool = True) -> ValidationReport:
    """Check a decoded JSON value against BEAM 1.0.

    Order: version, title, feed_url, items, each entry, entry id
    uniqueness, then optional feed fields.
    """

    check = _Collector()
    if not isinstance(candidate, dict):
        check.add(ErrorKind.INVALID_FIELD, None, "a BEAM feed must be a JSON object")
        return ValidationReport(feed=None, errors=check.issues, strict=strict)

    version = candidate.get("version")
    if version != BEAM_VERSION:
        message = (
            "'version' is required"
            if version is None
            else f"unsupported version {version!r}, expected {BEAM_VERSION!r}"
        )
        check.add(ErrorKind.UNSUPPORTED_VERSION, "version", message)
        return ValidationReport(feed=None, errors=check.issues, strict=strict)

    title = check.required_string(candidate, "title")
    feed_url = check.required_url(candidate, "feed_url")

    raw_items = candidate.get("items")
    if raw_items is None:
        check.add(ErrorKind.MISSING_FIELD, "items", "'items' is required (use [] for an empty feed)", required=True)
        raw_items = []
    elif not isinstance(raw_items, list):
        check.add(ErrorKind.INVALID_FIELD, "items", "'items' must be an array", required=True)
        raw_items = []

    errors: list[ValidationIssue] = list(check.issues)
    entries: list[Entry] = []
    skipped: list[int] = []
    duplicates: list[ValidationIssue] = []
    seen: set[str] = set()

    for index, raw in enumerate(raw_items):
        report = validate_entry(raw, index=index, strict=strict)
        errors.extend(report.errors)

        entry_id = _raw_entry_id(raw)
        if entry_id is not None:
            if entry_id in seen:
                duplicates.append(
                    ValidationIssue(
                        kind=ErrorKind.DUPLICATE_ENTRY_ID,
                        field="id",
                        index=index,
                        entry_id=entry_id,
                        message=f"entry id {entry_id!r} already used earlier in 'items'",
                    )
                )
                skipped.append(index)
                continue
            seen.add(entry_id)

        if report.entry is None:
            skipped.append(index)
        else:
            entries.append(report.entry)

    errors.extend(duplicates)

    optional = _Collector()
    values: dict[str, Any] = {
        "description": optional.string(candidate, "description"),
        "home_page_url": optional.url(candidate, "home_page_url"),
        "language": optional.language(candidate),
        "author": optional.author(candidate),
        "last_updated": optional.timestamp(candidate, "last_updated"),
    }
    errors.extend(optional.issues)

    if check.required_failed or (strict and errors):
        return ValidationReport(feed=None, errors=errors, strict=strict, skipped_entries=skipped)

    feed = Feed(
        version=BEAM_VERSION,
        title=title,
        feed_url=feed_url,
        items=tuple(entries),
        **{k: v for k, v in values.items() if v is not None},
        extensions=extract_extensions(candidate),
    )
    return ValidationReport(feed=feed, errors=errors, strict=strict, skipped_entries=skipped)
