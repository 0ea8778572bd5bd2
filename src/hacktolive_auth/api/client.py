"""httpx implementation of the backend authentication API.

Responsibilities:

1. Attach ``Authorization: Bearer <token>`` when a token is available.
2. Map transport failures to :class:`TransportError`.
3. Map non-2xx answers to :class:`CredentialsRejectedError`, and a 401 from a
   protected endpoint to :class:`SessionExpiredError`.  Login, signup and
   change-password answer 401 for wrong credentials, which is *not* an
   expired session.

SECURITY NOTE
-------------
Request bodies (passwords, codes) and bearer tokens are never logged.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Final, Optional

import httpx

from hacktolive_auth.session.errors import (
    CredentialsRejectedError,
    SessionExpiredError,
    TransportError,
)
from hacktolive_auth.session.models import (
    AuthResult,
    ProfilePatch,
    Role,
    SocialLinksPatch,
    UserProfile,
)

_LOG = logging.getLogger("hacktolive.api.client")

DEFAULT_TIMEOUT: Final[float] = 15.0

LOGIN_PATH: Final[str] = "/auth/login"
SIGNUP_PATH: Final[str] = "/auth/signup"
VERIFY_PATH: Final[str] = "/auth/verify"
PROFILE_PATH: Final[str] = "/auth/profile"
SOCIAL_LINKS_PATH: Final[str] = "/auth/profile/social-links"
CHANGE_PASSWORD_PATH: Final[str] = "/auth/change-password"
OTP_RESEND_PATH: Final[str] = "/auth/otp/resend"
OTP_VERIFY_PATH: Final[str] = "/auth/otp/verify"

# A 401 on these endpoints means "wrong credentials", not "session expired".
_CREDENTIAL_PATHS: Final[frozenset[str]] = frozenset(
    {LOGIN_PATH, SIGNUP_PATH, CHANGE_PASSWORD_PATH}
)

TokenProvider = Callable[[], Optional[str]]


def _error_message(response: httpx.Response) -> str | None:
    """Extract the backend's human-readable message, if any.

    NestJS validation errors carry ``message`` as a list of strings.
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message") or body.get("error")
    if isinstance(message, list):
        return "; ".join(str(m) for m in message) or None
    return str(message) if message else None


class HttpAuthApi:
    """Async client for the ``/auth`` endpoints.

    Parameters
    ----------
    base_url:
        Backend root, e.g. ``http://localhost:4000``.
    token_provider:
        Zero-argument callable returning the current bearer token.  Normally
        ``store.get_token`` so the client reads, but never writes, the session.
    timeout:
        Seconds before a request is abandoned with :class:`TransportError`.
    transport:
        Optional httpx transport (tests pass :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        base_url: str,
        *,
        token_provider: TokenProvider | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token_provider = token_provider or (lambda: None)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpAuthApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # Plumbing                                                           #
    # ------------------------------------------------------------------ #
    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> Any:
        headers: dict[str, str] = {}
        bearer = token if token is not None else self._token_provider()
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as exc:
            _LOG.warning("%s %s timed out", method, path)
            raise TransportError("The server took too long to respond.") from exc
        except httpx.HTTPError as exc:
            _LOG.warning("%s %s failed: %s", method, path, type(exc).__name__)
            raise TransportError() from exc

        if response.is_success:
            _LOG.debug("%s %s -> %s", method, path, response.status_code)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise TransportError("The server sent an unreadable response.") from exc

        message = _error_message(response)
        _LOG.info("%s %s rejected with %s", method, path, response.status_code)
        if response.status_code == 401 and path not in _CREDENTIAL_PATHS:
            raise SessionExpiredError(message, status_code=401)
        raise CredentialsRejectedError(message, status_code=response.status_code)

    @staticmethod
    def _auth_result(body: Any) -> AuthResult:
        if not isinstance(body, dict) or not body.get("token"):
            raise TransportError("The server sent an unreadable response.")
        try:
            # the backend accepts signups without a name
            user = UserProfile.from_payload(body.get("user"), required=("id",))
        except ValueError as exc:
            raise TransportError("The server sent an unreadable response.") from exc
        return AuthResult(token=str(body["token"]), user=user)

    @staticmethod
    def _user_body(body: Any) -> dict[str, Any]:
        if not isinstance(body, dict):
            raise TransportError("The server sent an unreadable response.")
        return body

    # ------------------------------------------------------------------ #
    # AuthApi                                                            #
    # ------------------------------------------------------------------ #
    async def login(self, email: str, password: str) -> AuthResult:
        body = await self._request("POST", LOGIN_PATH, json={"email": email, "password": password})
        return self._auth_result(body)

    async def signup(
        self, name: str, email: str, password: str, role: str | None = None
    ) -> AuthResult:
        payload = {
            "email": email,
            "password": password,
            "name": name,
            "role": role or Role.STUDENT.value,
        }
        body = await self._request("POST", SIGNUP_PATH, json=payload)
        return self._auth_result(body)

    async def verify_token(self, token: str) -> bool:
        try:
            body = await self._request("GET", VERIFY_PATH, token=token)
        except SessionExpiredError:
            return False
        return bool(isinstance(body, dict) and body.get("valid", True))

    async def get_profile(self) -> dict[str, Any]:
        return self._user_body(await self._request("GET", PROFILE_PATH))

    async def update_profile(self, patch: ProfilePatch) -> dict[str, Any]:
        return self._user_body(
            await self._request("PATCH", PROFILE_PATH, json=patch.to_payload())
        )

    async def update_social_links(self, patch: SocialLinksPatch) -> dict[str, Any]:
        return self._user_body(
            await self._request("PATCH", SOCIAL_LINKS_PATH, json=patch.to_payload())
        )

    async def change_password(self, old_password: str, new_password: str) -> None:
        await self._request(
            "POST",
            CHANGE_PASSWORD_PATH,
            json={"oldPassword": old_password, "newPassword": new_password},
        )

    # ------------------------------------------------------------------ #
    # OtpApi                                                             #
    # ------------------------------------------------------------------ #
    async def resend_code(self, contact: str) -> None:
        await self._request("POST", OTP_RESEND_PATH, json={"contact": contact})

    async def verify_code(self, contact: str, code: str) -> None:
        await self._request("POST", OTP_VERIFY_PATH, json={"contact": contact, "code": code})
