"""Configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Tuple

from hacktolive_auth.api.client import DEFAULT_TIMEOUT
from hacktolive_auth.session.otp import DEFAULT_COOLDOWN

logger = logging.getLogger("hacktolive.utils.environment")

_TRUTHY: Final[Tuple[str, ...]] = ("true", "1", "yes", "y", "on")

DEFAULT_API_URL: Final[str] = "http://localhost:4000"


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def _number(name: str, default: float, cast=float):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return cast(default)
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class SessionConfig:
    """Settings shared by the API client, the token store and the OTP flow."""

    api_url: str = DEFAULT_API_URL
    session_dir: Path | None = None
    http_timeout: float = DEFAULT_TIMEOUT
    otp_cooldown: int = DEFAULT_COOLDOWN
    ephemeral_session: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> SessionConfig:
        """Build the configuration from ``HACKTOLIVE_*`` variables.

        Raises
        ------
        ValueError
            If a numeric variable is malformed or not positive.
        """
        session_dir_raw = os.getenv("HACKTOLIVE_SESSION_DIR")
        config = cls(
            api_url=(os.getenv("HACKTOLIVE_API_URL") or DEFAULT_API_URL).rstrip("/"),
            session_dir=Path(session_dir_raw).expanduser() if session_dir_raw else None,
            http_timeout=_number("HACKTOLIVE_HTTP_TIMEOUT", DEFAULT_TIMEOUT),
            otp_cooldown=_number("HACKTOLIVE_OTP_COOLDOWN", DEFAULT_COOLDOWN, int),
            ephemeral_session=_truthy(os.getenv("HACKTOLIVE_EPHEMERAL_SESSION")),
            log_level=(os.getenv("HACKTOLIVE_LOG_LEVEL") or "INFO").strip().upper(),
        )
        logger.debug(
            "Loaded session config api_url=%s ephemeral=%s",
            config.api_url,
            config.ephemeral_session,
        )
        return config
