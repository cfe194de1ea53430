# backend/gstimport/logging_setup.py
"""Central logging configuration for the ``gstimport`` package.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the package
  logger. The API calls it once at startup.
- ``get_logger(name)`` returns a module logger and makes sure the package
  logger has a ``NullHandler`` until something configures it.

Library modules never attach handlers themselves.
"""

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "gstimport"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("GSTIMPORT_LOG_LEVEL")
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package logger once; later calls are no-ops.

    ``level`` falls back to ``GSTIMPORT_LOG_LEVEL`` and then ``INFO``.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
