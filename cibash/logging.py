"""The ``cibash`` logger tree.

Library modules ask for a child logger with :func:`get_logger` and only
emit records; the CLI is the one caller of :func:`configure_logging`.
Pipeline status lines (``Processing: …``, ``Detected: …``) go out at INFO,
everything else at DEBUG.
"""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "cibash"

CONSOLE_FORMAT = "[cibash] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """``get_logger("watch")`` -> the ``cibash.watch`` logger."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send ``cibash`` records to stderr, plus *log_file* when given.

    Calling it again replaces the previous handlers, so one process can run
    the CLI repeatedly (tests, ``watch``) without doubled lines.
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False

    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    root.addHandler(_handler(logging.StreamHandler(), level, CONSOLE_FORMAT))
    if log_file is not None:
        root.addHandler(
            _handler(logging.FileHandler(log_file, encoding="utf-8"), level, FILE_FORMAT)
        )
    return root


__all__ = ["configure_logging", "get_logger"]
