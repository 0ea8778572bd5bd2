"""Durable storage for the current session token and user profile.

This module introduces a *narrow* persistence interface (:class:`TokenStore`)
and two implementations:

* :class:`DiskTokenStore` – JSON files under a base directory, surviving a
  process restart.  Writes use *temp-file + os.replace*.
* :class:`MemoryTokenStore` – process-local dict, for ephemeral sessions and
  tests.

Failure policy
--------------
A broken storage medium (unreadable directory, corrupt JSON, permission
errors) is **never fatal**: reads answer "absent" and writes are logged and
dropped, so the application fails open to a logged-out state.

Environment variables
---------------------
HACKTOLIVE_SESSION_DIR
    Base directory for persisted data.
    Defaults to ``~/.hacktolive/session`` when unset.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from hacktolive_auth.session.models import UserProfile

_LOG = logging.getLogger("hacktolive.session.store")

_TOKEN_FILE = "token.json"
_USER_FILE = "user.json"


def _atomic_write(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as fh:
        json.dump(data, fh, separators=(",", ":"), sort_keys=True)
    os.replace(tmp, path)  # atomic on POSIX


def _read_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


# --------------------------------------------------------------------------- #
# public interface                                                            #
# --------------------------------------------------------------------------- #


@runtime_checkable
class TokenStore(Protocol):
    """Minimal persistence contract for the current session."""

    def get_token(self) -> str | None: ...
    def set_token(self, token: str) -> None: ...
    def get_user(self) -> UserProfile | None: ...
    def set_user(self, user: UserProfile) -> None: ...
    def clear(self) -> None: ...


# --------------------------------------------------------------------------- #
# Disk implementation                                                         #
# --------------------------------------------------------------------------- #


class DiskTokenStore(TokenStore):
    """JSON-file implementation of :class:`TokenStore`."""

    def __init__(self, base_dir: str | os.PathLike | None = None) -> None:
        self.base_dir = Path(
            base_dir
            or os.getenv("HACKTOLIVE_SESSION_DIR")
            or Path.home() / ".hacktolive" / "session"
        ).expanduser()

    @property
    def _token_path(self) -> Path:
        return self.base_dir / _TOKEN_FILE

    @property
    def _user_path(self) -> Path:
        return self.base_dir / _USER_FILE

    # ---------------- token ---------------------------------------------- #
    def get_token(self) -> str | None:
        try:
            data = _read_json(self._token_path)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            _LOG.warning("Token storage unreadable, treating as absent: %s", exc)
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def set_token(self, token: str) -> None:
        try:
            _atomic_write(self._token_path, {"token": token})
        except OSError as exc:
            _LOG.warning("Could not persist token: %s", exc)

    # ---------------- user ----------------------------------------------- #
    def get_user(self) -> UserProfile | None:
        try:
            data = _read_json(self._user_path)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            _LOG.warning("User storage unreadable, treating as absent: %s", exc)
            return None
        try:
            return UserProfile.from_payload(data, required=())
        except (TypeError, ValueError) as exc:
            _LOG.warning("Stored user record is invalid, treating as absent: %s", exc)
            return None

    def set_user(self, user: UserProfile) -> None:
        try:
            _atomic_write(self._user_path, user.to_payload())
        except OSError as exc:
            _LOG.warning("Could not persist user profile: %s", exc)

    # ---------------- lifecycle ------------------------------------------ #
    def clear(self) -> None:
        for path in (self._token_path, self._user_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                _LOG.warning("Could not remove %s: %s", path.name, exc)


# --------------------------------------------------------------------------- #
# Memory implementation                                                       #
# --------------------------------------------------------------------------- #


class MemoryTokenStore(TokenStore):
    """Process-local implementation; nothing survives a restart."""

    def __init__(self, token: str | None = None, user: UserProfile | None = None) -> None:
        self._token = token
        self._user = user

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def get_user(self) -> UserProfile | None:
        return self._user

    def set_user(self, user: UserProfile) -> None:
        self._user = user

    def clear(self) -> None:
        self._token = None
        self._user = None
