"""Logging setup with a Rich handler"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(force_terminal: bool = True) -> Console:
    """
    Install a Rich handler on the root logger.

    Everything else stays at WARNING; the pdf_raster loggers follow the
    LOG_LEVEL environment variable (default INFO).

    Returns:
        The console the handler writes to
    """
    console = Console(force_terminal=force_terminal)

    # Get level from env, default to INFO
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=True
    )

    # Silence everything by default
    logging.basicConfig(level=logging.WARNING, format="%(message)s", handlers=[rich_handler], force=True)

    logging.getLogger("pdf_raster").setLevel(log_level)

    return console
