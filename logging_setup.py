"""Centralized logging configuration for LedgerLens.

Entry points (the CLI and the Streamlit app) call ``configure_logging`` once.
Library modules only call ``get_logger("ledgerlens.<module>")`` and never
attach handlers of their own.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PKG_LOGGER_NAME = "ledgerlens"
LOG_LEVEL_ENV = "LEDGERLENS_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        # Numeric strings or level names (INFO/DEBUG/etc.).
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    env_val = os.getenv(LOG_LEVEL_ENV)
    if env_val:
        return _parse_level(env_val)
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> bool:
    """Attach a single stream handler to the package logger.

    ``level`` falls back to ``LEDGERLENS_LOG_LEVEL`` and then INFO. Returns
    False when logging was already configured by an earlier call.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return False

    logger = logging.getLogger(PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True
    return True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, keeping the package silent until configured."""
    pkg_logger = logging.getLogger(PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
