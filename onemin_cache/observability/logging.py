"""Console logging setup for applications embedding the cache."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: int = logging.INFO, console: Console | None = None) -> RichHandler:
    """Install a rich console handler on the root logger.

    Returns the installed handler. Calling it again reuses the existing
    RichHandler and only updates the level.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler, RichHandler):
            return handler

    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    return handler
