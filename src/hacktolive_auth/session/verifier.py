"""Startup check of a persisted session token."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from hacktolive_auth.session.errors import AuthError
from hacktolive_auth.utils.logging import mask_sensitive

if TYPE_CHECKING:  # pragma: no cover
    from hacktolive_auth.api.base import AuthApi

_LOG = logging.getLogger("hacktolive.session.verifier")


class Verification(str, Enum):
    OK = "ok"
    INVALID = "invalid"


class SessionVerifier:
    """Decide whether a restored token is still trustworthy.

    One shot: a rejection or a transport failure is terminal and yields
    ``INVALID``; there is no retry.  Errors are logged, never raised, because
    an expired session is an expected steady-state outcome.
    """

    def __init__(self, api: AuthApi) -> None:
        self.api = api

    async def verify(self, token: str) -> Verification:
        try:
            accepted = await self.api.verify_token(token)
        except AuthError as exc:
            _LOG.info(
                "Session token %s could not be verified (%s)",
                mask_sensitive(token),
                exc.code,
            )
            return Verification.INVALID
        if not accepted:
            _LOG.info("Session token %s refused by backend", mask_sensitive(token))
            return Verification.INVALID
        return Verification.OK
