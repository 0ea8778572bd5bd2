"""Logging helpers shared across the package."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def mask_sensitive(value: str | None, keep_chars: int = 4) -> str:
    """Return *value* with everything after the first *keep_chars* masked.

    >>> mask_sensitive("abcdef123456", 4)
    'abcd****'
    """
    if not value:
        return "<empty>"
    if len(value) <= keep_chars:
        return "*" * len(value)
    return f"{value[:keep_chars]}****"


def setup_logging(level: int | str = logging.INFO, stream=None) -> logging.Logger:
    """Attach a single stream handler to the ``hacktolive`` logger tree.

    Calling it twice does not duplicate handlers.
    """
    logger = logging.getLogger("hacktolive")
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"unknown log level: {name}")
    logger.setLevel(level)
    if not any(getattr(h, "_hacktolive", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._hacktolive = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
