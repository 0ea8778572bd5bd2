"""Exception types raised by the session core.

Only lightweight, **data-carrying** exceptions live here so that web/UI layers
can transform them into notifications or HTTP responses.  None of them ever
carries a token, password or one-time code.
"""

from __future__ import annotations

from typing import Any


class AuthError(RuntimeError):
    """Base class for every failure surfaced by the session core."""

    code: str = "auth_error"

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or "Authentication error.")
        self.reason: str = str(self)

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload **without secrets**."""
        return {"error": self.code, "message": self.reason}


class TransportError(AuthError):
    """The API call did not complete (network, timeout, undecodable body)."""

    code = "transport_error"

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or "Unable to reach the server. Please try again.")


class CredentialsRejectedError(AuthError):
    """The API answered with an explicit rejection."""

    code = "rejected"

    def __init__(self, reason: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(reason or "Request rejected by the server.")
        self.status_code: int | None = status_code

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["status_code"] = self.status_code
        return payload


class SessionExpiredError(CredentialsRejectedError):
    """A protected endpoint rejected the current bearer token."""

    code = "session_expired"

    def __init__(self, reason: str | None = None, *, status_code: int | None = 401) -> None:
        super().__init__(reason or "Your session has expired. Please log in again.", status_code=status_code)


class MalformedCallbackError(AuthError):
    """The OAuth callback URL is missing or carries a corrupt parameter."""

    code = "malformed_callback"

    def __init__(self, description: str) -> None:
        super().__init__("Authentication failed")
        self.description: str = description

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["description"] = self.description
        return payload


class NotAuthenticatedError(AuthError):
    """A session-bound operation was requested while logged out."""

    code = "not_authenticated"

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or "You must be logged in to do that.")


class InvalidOtpError(AuthError):
    """The one-time code failed local validation."""

    code = "invalid_otp"

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or "Please enter the complete 6-digit code")
