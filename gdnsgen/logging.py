"""Logging setup shared by the scanner, generator and CLI.

Records go to stderr. When gdnsgen runs from a cargo build script, cargo
hides that stream unless the build fails, so ``cargo_warnings`` also echoes
warnings to stdout as ``cargo:warning=`` directives, which cargo prints.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, Optional

_LOGGER_NAME = "gdnsgen"
_CONSOLE_FORMAT = "[gdnsgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_CARGO_DIRECTIVE = "cargo:warning="


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``gdnsgen`` or one of its children, e.g. ``gdnsgen.scanner``."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class CargoWarningHandler(logging.StreamHandler):
    """Writes each warning as one ``cargo:warning=`` line."""

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        super().__init__(stream if stream is not None else sys.stdout)
        self.setLevel(logging.WARNING)

    def format(self, record: logging.LogRecord) -> str:
        # cargo reads directives line by line.
        message = " ".join(record.getMessage().splitlines())
        return f"{_CARGO_DIRECTIVE}gdnsgen: {message}"


def _level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    cargo_warnings: bool = False,
) -> logging.Logger:
    """Install gdnsgen's handlers, replacing those of a previous call.

    ``verbose`` wins over ``quiet``.
    """
    level = _level(verbose, quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if cargo_warnings:
        logger.addHandler(CargoWarningHandler())

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["CargoWarningHandler", "configure_logging", "get_logger"]
