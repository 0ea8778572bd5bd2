from __future__ import annotations

from dataclasses import dataclass

from hacktolive_auth.api.client import HttpAuthApi
from hacktolive_auth.session.controller import AuthFlowController
from hacktolive_auth.session.notifications import NotificationSink
from hacktolive_auth.session.otp import OtpChallengeFlow
from hacktolive_auth.session.store import DiskTokenStore, MemoryTokenStore, TokenStore
from hacktolive_auth.utils.environment import SessionConfig


@dataclass(frozen=True)
class SessionAppContext:
    """
    Objects built once at startup and shared by every route handler.
    The controller is the only writer of ``store``; ``api`` reads the token
    from it for bearer authentication.
    """

    config: SessionConfig
    store: TokenStore
    api: HttpAuthApi
    controller: AuthFlowController

    @classmethod
    def build(cls, config: SessionConfig) -> SessionAppContext:
        store: TokenStore = (
            MemoryTokenStore()
            if config.ephemeral_session
            else DiskTokenStore(config.session_dir)
        )
        api = HttpAuthApi(
            config.api_url,
            token_provider=store.get_token,
            timeout=config.http_timeout,
        )
        return cls(
            config=config,
            store=store,
            api=api,
            controller=AuthFlowController(api, store),
        )

    def otp_flow(
        self, contact: str, *, notifier: NotificationSink | None = None
    ) -> OtpChallengeFlow:
        """New verification challenge for *contact* using the configured cooldown."""
        return OtpChallengeFlow(
            self.api,
            contact,
            initial=self.config.otp_cooldown,
            notifier=notifier or self.controller.notifier,
        )
