"""Parsing of the Google OAuth redirect.

After a successful Google sign-in the backend redirects the browser to::

    <frontend>/auth/google/callback?token=<opaque>&user=<url-encoded JSON>

Two failure modes are kept apart so the user sees which one happened:

1. ``token`` or ``user`` missing/empty – *Invalid callback parameters*
2. ``user`` present but not a decodable JSON object carrying a ``role`` –
   *Unable to complete Google sign-in*

Logging
-------
Only the masked token prefix is ever logged.
"""

from __future__ import annotations

import json
import logging
from typing import Final, Mapping
from urllib.parse import parse_qs, unquote, urlsplit

from hacktolive_auth.session.errors import MalformedCallbackError
from hacktolive_auth.session.models import AuthResult, UserProfile
from hacktolive_auth.utils.logging import mask_sensitive

_LOG = logging.getLogger("hacktolive.session.callback")

MISSING_PARAMS: Final[str] = "Invalid callback parameters"
UNREADABLE_USER: Final[str] = "Unable to complete Google sign-in"


def _query_params(callback: str | Mapping[str, str]) -> Mapping[str, str]:
    if not isinstance(callback, str):
        return callback
    # accept a bare "token=...&user=..." query as well as a full URL
    query = urlsplit(callback).query if "?" in callback else callback
    parsed = parse_qs(query, keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items()}


def parse_oauth_callback(callback: str | Mapping[str, str]) -> AuthResult:
    """Extract the token and user from an OAuth callback.

    Parameters
    ----------
    callback:
        Either the full callback URL (or its query string), or an already
        decoded mapping of query parameters such as Starlette's
        ``request.query_params``.

    Returns
    -------
    AuthResult
        The token and the decoded user profile.

    Raises
    ------
    MalformedCallbackError
        If a parameter is missing or the user record cannot be decoded.
    """
    params = _query_params(callback)
    token = (params.get("token") or "").strip()
    raw_user = params.get("user") or ""
    if not token or not raw_user:
        raise MalformedCallbackError(MISSING_PARAMS)

    try:
        # query decoding already happened once; the backend encodes the JSON
        # itself, so decode a second time
        data = json.loads(unquote(raw_user))
    except ValueError:
        raise MalformedCallbackError(UNREADABLE_USER) from None
    try:
        user = UserProfile.from_payload(data, required=("role",))
    except (TypeError, ValueError):
        raise MalformedCallbackError(UNREADABLE_USER) from None

    _LOG.debug("Parsed OAuth callback for token=%s", mask_sensitive(token))
    return AuthResult(token=token, user=user)
