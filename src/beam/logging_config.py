"""Logging configuration for the beam CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING", verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Install a single Rich console handler on the root logger.

    Args:
        level: Root level name ("DEBUG", "INFO", ...)
        verbose: Force DEBUG regardless of `level`
        console: Console to log to (defaults to stderr)
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING))

    # Remove existing handlers (avoid duplicates on repeated CLI invocations)
    root_logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(handler)

    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)
    return root_logger
