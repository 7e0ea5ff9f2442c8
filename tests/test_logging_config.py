import io
import logging

from rich.console import Console
from rich.logging import RichHandler

from beam.logging_config import setup_logging


class TestSetupLogging:
    def test_single_rich_handler(self):
        console = Console(file=io.StringIO())
        root = setup_logging("INFO", console=console)
        setup_logging("INFO", console=console)
        rich_handlers = [h for h in root.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert root.level == logging.INFO

    def test_verbose_forces_debug(self):
        root = setup_logging("ERROR", verbose=True, console=Console(file=io.StringIO()))
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_unknown_level_falls_back(self):
        root = setup_logging("chatty", console=Console(file=io.StringIO()))
        assert root.level == logging.WARNING
