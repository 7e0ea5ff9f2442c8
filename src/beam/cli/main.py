"""`beam` command line: validate, reformat and inspect BEAM feeds."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from beam import __version__
from beam.adapters.json_codec import decode_report, encode
from beam.adapters.sources import open_source
from beam.cli.ui_components import build_entries_table, build_feed_panel, build_issues_table
from beam.core.config import ENV_PREFIX, BeamSettings, get_user_env_file, write_user_env_vars
from beam.core.domain.errors import ErrorKind, MalformedJsonError, SourceError, ValidationIssue
from beam.core.services.validator import ValidationReport
from beam.logging_config import setup_logging

app = typer.Typer(no_args_is_help=True, help="Validate, format and inspect BEAM 1.0 feeds.")

_console = Console()
_err = Console(stderr=True)

log = logging.getLogger("beam.cli")

EXIT_INVALID = 1
EXIT_SOURCE = 2
EXIT_CONFIG = 2


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"beam {__version__}")
        raise typer.Exit()


def _settings() -> BeamSettings:
    try:
        return BeamSettings()
    except ValidationError as exc:
        for error in exc.errors():
            name = ".".join(str(part) for part in error["loc"])
            _err.print(f"[red]Invalid setting[/red] {ENV_PREFIX}{name.upper()}: {escape(error['msg'])}")
        _err.print(f"[dim]Fix the environment, ./.env or {get_user_env_file()}[/dim]")
        raise typer.Exit(EXIT_CONFIG) from exc


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    # `config` stays usable so a broken value can be overwritten with --set.
    level = "WARNING" if ctx.invoked_subcommand == "config" else _settings().log_level
    setup_logging(level, verbose=verbose, console=_err)


def _read_source(source: str, settings: BeamSettings) -> bytes:
    try:
        return open_source(source, settings).read()
    except SourceError as exc:
        _err.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(EXIT_SOURCE) from exc


def _load(source: str, settings: BeamSettings, strict: bool) -> tuple[ValidationReport | None, list[ValidationIssue]]:
    """Decode `source`; a malformed document yields (None, [malformed issue])."""

    raw = _read_source(source, settings)
    try:
        report = decode_report(raw, strict=strict)
    except MalformedJsonError as exc:
        log.info("%s is not JSON: %s", source, exc.detail)
        return None, [ValidationIssue(kind=ErrorKind.MALFORMED_JSON, message=exc.detail)]
    log.info(
        "%s decoded (%s mode): %d issue(s), %d entries skipped",
        source,
        "strict" if strict else "lenient",
        len(report.errors),
        len(report.skipped_entries),
    )
    return report, report.errors


def _strict(settings: BeamSettings, lenient: bool) -> bool:
    return settings.strict and not lenient


@app.command()
def validate(
    source: str = typer.Argument(..., help="Path or http(s) URL of a BEAM feed."),
    lenient: bool = typer.Option(False, "--lenient", help="Accept the feed if its required fields are sound."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Check a feed against BEAM 1.0. Exit 0 if usable, 1 if not, 2 if unreadable."""

    settings = _settings()
    strict = _strict(settings, lenient)
    report, issues = _load(source, settings, strict)
    usable = report is not None and report.feed is not None

    if as_json:
        payload = {
            "source": source,
            "valid": usable and not issues,
            "usable": usable,
            "strict": strict,
            "entries": len(report.feed.items) if usable else None,
            "issues": [
                {**issue.model_dump(mode="json"), "location": issue.location}
                for issue in issues
            ],
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        if issues:
            _console.print(build_issues_table(issues))
        if usable and not issues:
            _console.print(f"[green]valid[/green] {source}: {len(report.feed.items)} entries")
        elif usable:
            _console.print(
                f"[yellow]usable with {len(issues)} issue(s)[/yellow] {source}: "
                f"{len(report.feed.items)} entries kept, {len(report.skipped_entries)} skipped"
            )
        else:
            _console.print(f"[red]invalid[/red] {source}: {len(issues)} issue(s)")

    if not usable:
        raise typer.Exit(EXIT_INVALID)


@app.command(name="format")
def format_feed(
    source: str = typer.Argument(..., help="Path or http(s) URL of a BEAM feed."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write here instead of stdout."),
    lenient: bool = typer.Option(False, "--lenient", help="Drop invalid entries instead of failing."),
    indent: Optional[int] = typer.Option(None, "--indent", min=0, max=8, help="Override BEAM_JSON_INDENT."),
) -> None:
    """Re-encode a feed in canonical field order."""

    settings = _settings()
    report, issues = _load(source, settings, _strict(settings, lenient))
    if report is None or report.feed is None:
        _err.print(build_issues_table(issues))
        raise typer.Exit(EXIT_INVALID)
    if issues:
        log.info("%d issue(s) dropped while formatting %s", len(issues), source)

    data = encode(report.feed, indent=settings.json_indent if indent is None else indent)
    if output is None:
        typer.echo(data.decode("utf-8"), nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    _err.print(f"[green]Wrote[/green] {output}")


@app.command()
def show(
    source: str = typer.Argument(..., help="Path or http(s) URL of a BEAM feed."),
    limit: int = typer.Option(20, "--limit", "-n", min=0, help="Max entries to list (0 = all)."),
    lenient: bool = typer.Option(False, "--lenient", help="Show whatever is usable."),
) -> None:
    """Print a summary of the feed and its entries."""

    settings = _settings()
    report, issues = _load(source, settings, _strict(settings, lenient))
    if report is None or report.feed is None:
        _err.print(build_issues_table(issues))
        raise typer.Exit(EXIT_INVALID)

    feed = report.feed
    _console.print(build_feed_panel(feed))
    _console.print(build_entries_table(feed.items, limit=limit or None))
    if issues:
        _console.print(build_issues_table(issues, title="Dropped while decoding"))


@app.command()
def config(
    set_values: List[str] = typer.Option(
        [], "--set", help="KEY=VALUE stored in the user .env (e.g. --set strict=false)."
    ),
) -> None:
    """Show the effective settings, or persist new values."""

    if set_values:
        values: dict[str, str] = {}
        for item in set_values:
            key, sep, value = item.partition("=")
            key = key.strip().lower()
            if not sep or key not in BeamSettings.model_fields:
                raise typer.BadParameter(f"expected KEY=VALUE with KEY in {sorted(BeamSettings.model_fields)}")
            values[f"{ENV_PREFIX}{key.upper()}"] = value.strip()
        env_path = write_user_env_vars(values)
        _console.print(f"[green]Saved config to:[/green] {env_path}")
        return

    settings = _settings()
    table = Table(title="BEAM settings")
    table.add_column("Setting", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_column("Env var", style="dim")
    for name, value in settings.model_dump().items():
        table.add_row(name, str(value), f"{ENV_PREFIX}{name.upper()}")
    _console.print(table)
    _console.print(f"[dim]User config file: {get_user_env_file()}[/dim]")


def run() -> None:
    app()
