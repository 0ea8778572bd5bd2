"""Structured logging helpers for session components.

This module restricts **which** contextual attributes are attached to log
records so that credentials never reach a handler by accident.  Helpers ONLY
inject the following *non-sensitive* fields:

- ``operation``      – Controller operation (``login``, ``logout``…)
- ``user_id``        – Backend user identifier (first 8 chars kept)
- ``role``           – Role of the user the operation concerns
- ``correlation_id`` – Request correlation id, wired by the HTTP adapter

Usage
-----
>>> from hacktolive_auth.session.log_utils import get_auth_logger
>>> log = get_auth_logger(operation="login", role="ADMIN")
>>> log.info("Login succeeded")
INFO hacktolive.session operation=login role=ADMIN ...

The adapter is a thin wrapper around :class:`logging.LoggerAdapter`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping


class _AuthLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted session context into log records."""

    extra_keys = ("operation", "user_id", "role", "correlation_id")

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        extra_clean: MutableMapping[str, Any] = {}
        for k in self.extra_keys:
            if not extra or extra.get(k) is None:
                continue
            if k == "user_id":
                extra_clean[k] = str(extra[k])[:8]
            else:
                extra_clean[k] = extra[k]
        super().__init__(logger, extra_clean)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        if "extra" not in kwargs or kwargs["extra"] is None:
            kwargs["extra"] = {}
        # merge but do not overwrite call-site provided extras
        for k, v in self.extra.items():
            kwargs["extra"].setdefault(k, v)
        return msg, kwargs


def get_auth_logger(
    *,
    base_logger_name: str = "hacktolive.session",
    operation: str | None = None,
    user_id: str | int | None = None,
    role: str | None = None,
    correlation_id: str | None = None,
) -> logging.LoggerAdapter:
    """Return a LoggerAdapter pre-filled with session context."""
    logger = logging.getLogger(base_logger_name)
    return _AuthLoggerAdapter(
        logger,
        {
            "operation": operation,
            "user_id": user_id,
            "role": role,
            "correlation_id": correlation_id,
        },
    )
