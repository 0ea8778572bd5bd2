"""Collaborator contracts consumed by the session core.

The core never talks HTTP itself; it awaits these protocols.  The production
implementation is :class:`hacktolive_auth.api.client.HttpAuthApi`.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from hacktolive_auth.session.models import (
    AuthResult,
    ProfilePatch,
    SocialLinksPatch,
)


@runtime_checkable
class AuthApi(Protocol):
    """Authentication endpoints of the backend.

    Every method raises :class:`~hacktolive_auth.session.errors.TransportError`
    when the call does not complete and
    :class:`~hacktolive_auth.session.errors.CredentialsRejectedError` when the
    backend rejects it.
    """

    async def login(self, email: str, password: str) -> AuthResult: ...

    async def signup(
        self, name: str, email: str, password: str, role: str | None = None
    ) -> AuthResult: ...

    async def verify_token(self, token: str) -> bool:
        """Return *True* when *token* is accepted, *False* when refused."""
        ...

    async def get_profile(self) -> dict[str, Any]: ...

    async def update_profile(self, patch: ProfilePatch) -> dict[str, Any]: ...

    async def update_social_links(self, patch: SocialLinksPatch) -> dict[str, Any]: ...

    async def change_password(self, old_password: str, new_password: str) -> None: ...


@runtime_checkable
class OtpApi(Protocol):
    """One-time code endpoints used by verification screens."""

    async def resend_code(self, contact: str) -> None: ...

    async def verify_code(self, contact: str, code: str) -> None: ...
