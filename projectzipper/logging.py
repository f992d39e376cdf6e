"""Logging setup shared by the projectzipper CLI and service."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "projectzipper"
_OWNED_MARKER = "_projectzipper_handler"

CONSOLE_FORMAT = "[projectzipper] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``projectzipper`` or one of its children, e.g. ``projectzipper.steps``."""
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route projectzipper records to stderr and, optionally, a log file.

    Calling this again replaces the handlers installed by an earlier call;
    handlers attached by anything else (test capture, the host app) are kept.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in [h for h in logger.handlers if getattr(h, _OWNED_MARKER, False)]:
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    _install(logger, console, level)

    if log_file is not None:
        # The file always records debug output, whatever the console level.
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.setLevel(logging.DEBUG)
        _install(logger, sink, logging.DEBUG)

    return logger


def log_exception(logger: logging.Logger, message: str, exc: BaseException) -> None:
    """Log a recovered failure, attaching the traceback only in verbose mode."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.warning("%s: %s", message, exc, exc_info=exc)
    else:
        logger.warning("%s: %s", message, exc)


def _install(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    setattr(handler, _OWNED_MARKER, True)
    logger.addHandler(handler)


__all__ = ["CONSOLE_FORMAT", "FILE_FORMAT", "configure_logging", "get_logger", "log_exception"]
