"""Tests for modmanifest.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from modmanifest.logging import configure_logging, get_logger


def test_get_logger_nests_under_package() -> None:
    assert get_logger("walker").name == "modmanifest.walker"
    assert get_logger().name == "modmanifest"


def test_configure_logging_levels() -> None:
    assert configure_logging().level == logging.INFO
    assert configure_logging(quiet=True).level == logging.WARNING
    assert configure_logging(verbose=True, quiet=True).level == logging.DEBUG


def test_configure_logging_replaces_handlers_and_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "modmanifest.log"
    configure_logging()
    logger = configure_logging(verbose=True, log_file=log_file)

    assert len(logger.handlers) == 2

    get_logger("test").debug("hello from the walker")
    for handler in logger.handlers:
        handler.flush()

    assert "hello from the walker" in log_file.read_text(encoding="utf-8")
