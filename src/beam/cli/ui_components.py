"""Rich components for the CLI.

Kept apart from the commands so tables and panels can be reused and so
`--json` modes never touch them.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from beam.core.domain.errors import ErrorKind, ValidationIssue
from beam.core.domain.models import Entry, Feed, format_timestamp

_KIND_STYLE = {
    ErrorKind.MALFORMED_JSON: "bold red",
    ErrorKind.UNSUPPORTED_VERSION: "bold red",
    ErrorKind.MISSING_FIELD: "red",
    ErrorKind.INVALID_FIELD: "yellow",
    ErrorKind.DUPLICATE_ENTRY_ID: "magenta",
}


def build_issues_table(issues: list[ValidationIssue], *, title: str = "Validation issues") -> Table:
    table = Table(title=title)
    table.add_column("Kind", no_wrap=True)
    table.add_column("Location", style="cyan", no_wrap=True)
    table.add_column("Entry id", style="white")
    table.add_column("Message", style="dim")
    for issue in issues:
        table.add_row(
            Text(issue.kind.label(), style=_KIND_STYLE.get(issue.kind, "white")),
            issue.location,
            issue.entry_id or "",
            issue.message,
        )
    return table


def build_entries_table(entries: list[Entry] | tuple[Entry, ...], *, limit: int | None = None) -> Table:
    shown = list(entries)[:limit] if limit else list(entries)
    table = Table(title=f"Entries ({len(shown)} of {len(entries)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Published", style="green", no_wrap=True)
    table.add_column("Id", style="cyan")
    table.add_column("Title", style="white")
    table.add_column("Min", justify="right")
    table.add_column("Tags", style="magenta")
    for position, entry in enumerate(shown):
        table.add_row(
            str(position),
            format_timestamp(entry.published),
            entry.id,
            entry.title,
            "" if entry.reading_time is None else str(entry.reading_time),
            ", ".join(entry.tags or ()),
        )
    return table


def build_feed_panel(feed: Feed) -> Panel:
    """Summary panel for a decoded feed."""

    body = Text()
    body.append(f"{feed.feed_url}\n", style="cyan")
    if feed.description:
        body.append(feed.description.strip() + "\n")
    if feed.home_page_url:
        body.append(f"\nHome: {feed.home_page_url}")
    if feed.language:
        body.append(f"\nLanguage: {feed.language}")
    if feed.author:
        body.append(f"\nAuthor: {feed.author.name}")
    if feed.last_updated:
        body.append(f"\nLast updated: {format_timestamp(feed.last_updated)}")
    body.append(f"\nEntries: {len(feed.items)}")
    if feed.extensions:
        body.append(f"\nExtensions: {', '.join(feed.extensions)}", style="dim")

    return Panel(body, title=Text(feed.title, style="bold"), subtitle=f"BEAM {feed.version}", border_style="cyan")
