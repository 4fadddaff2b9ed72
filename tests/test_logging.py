"""Tests for gdnsgen.logging."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from gdnsgen.logging import CargoWarningHandler, configure_logging, get_logger


def test_get_logger_nests_under_package() -> None:
    assert get_logger().name == "gdnsgen"
    assert get_logger("scanner").name == "gdnsgen.scanner"


def test_configure_logging_resets_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "gdnsgen.log"

    configure_logging(verbose=True, log_file=log_file)
    logger = configure_logging(verbose=False)

    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_configure_logging_writes_file_sink(tmp_path: Path) -> None:
    log_file = tmp_path / "gdnsgen.log"
    logger = configure_logging(verbose=True, log_file=log_file)

    get_logger("generator").debug("Wrote %s", "Player.gdns")
    for handler in logger.handlers:
        handler.flush()

    assert "gdnsgen.generator: Wrote Player.gdns" in log_file.read_text(encoding="utf-8")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_logging_quiet_drops_info_records() -> None:
    logger = configure_logging(quiet=True)
    assert logger.level == logging.WARNING

    logger = configure_logging(quiet=True, verbose=True)
    assert logger.level == logging.DEBUG


def test_cargo_warning_handler_emits_single_line_directives() -> None:
    stream = io.StringIO()
    handler = CargoWarningHandler(stream)
    logger = logging.getLogger("gdnsgen.tests.cargo")
    logger.addHandler(handler)
    try:
        logger.info("not forwarded")
        logger.warning("first line\nsecond line")
    finally:
        logger.removeHandler(handler)

    assert stream.getvalue() == "cargo:warning=gdnsgen: first line second line\n"


def test_configure_logging_installs_cargo_handler_on_request() -> None:
    logger = configure_logging(cargo_warnings=True)
    assert any(isinstance(handler, CargoWarningHandler) for handler in logger.handlers)

    logger = configure_logging()
    assert not any(isinstance(handler, CargoWarningHandler) for handler in logger.handlers)
