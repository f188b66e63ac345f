"""Tests for rich logging setup."""

import logging

from rich.logging import RichHandler

from onemin_cache.observability import configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_installs_single_rich_handler(self):
        root = logging.getLogger()
        original_level = root.level

        first = configure_logging(logging.WARNING)
        second = configure_logging(logging.INFO)

        try:
            assert first is second
            assert isinstance(first, RichHandler)
            assert sum(isinstance(h, RichHandler) for h in root.handlers) == 1
            assert root.level == logging.INFO
        finally:
            root.setLevel(original_level)
