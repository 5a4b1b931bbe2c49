"""Console logging for the navigation CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# loggers of libraries that are noisy below WARNING
QUIET_LOGGERS = ("asyncio",)


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr through rich, so stdout stays parseable."""
    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=False, show_path=False)
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]
