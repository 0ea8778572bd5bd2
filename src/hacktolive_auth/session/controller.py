"""AuthFlowController – single entry point for session-mutating operations.

The controller is constructed once at application start and handed to every
consumer (route handlers, views, guards).  It is the **only writer** of the
:class:`~hacktolive_auth.session.store.TokenStore`; consumers read the session
through :attr:`AuthFlowController.current_user` and :attr:`loading`.

Every operation either fully succeeds (store written, navigation triggered) or
fully fails (store untouched, error re-raised to the caller after a
notification).  The exceptions are:

* the startup check (:meth:`start`), which clears a dead session silently;
* a protected call answered with :class:`SessionExpiredError`, which clears
  the session and sends the user to the login page before re-raising.

Operations are not serialized against each other: two concurrent logins both
reach the backend and the last one to complete owns the store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, TypeVar

from hacktolive_auth.session.callback import parse_oauth_callback
from hacktolive_auth.session.errors import (
    AuthError,
    MalformedCallbackError,
    NotAuthenticatedError,
    SessionExpiredError,
)
from hacktolive_auth.session.log_utils import get_auth_logger
from hacktolive_auth.session.models import (
    AuthResult,
    ProfilePatch,
    SocialLinksPatch,
    UserProfile,
)
from hacktolive_auth.session.navigation import (
    LOGIN_PATH,
    LoggingNavigator,
    Navigator,
    dashboard_for_user,
)
from hacktolive_auth.session.notifications import (
    LoggingNotificationSink,
    Notification,
    NotificationSink,
)
from hacktolive_auth.session.store import MemoryTokenStore, TokenStore
from hacktolive_auth.session.verifier import SessionVerifier, Verification

if TYPE_CHECKING:  # pragma: no cover
    from hacktolive_auth.api.base import AuthApi

_BASE_LOGGER = "hacktolive.session.controller"
_WELCOME = "Welcome to HACKTOLIVE"

PatchT = TypeVar("PatchT", ProfilePatch, SocialLinksPatch)


class AuthFlowController:
    """Orchestrates login, signup, OAuth callback, logout and profile updates."""

    def __init__(
        self,
        api: AuthApi,
        store: TokenStore | None = None,
        *,
        navigator: Navigator | None = None,
        notifier: NotificationSink | None = None,
        verifier: SessionVerifier | None = None,
    ) -> None:
        self.api = api
        self.store = store or MemoryTokenStore()
        self.navigator = navigator or LoggingNavigator()
        self.notifier = notifier or LoggingNotificationSink()
        self.verifier = verifier or SessionVerifier(api)
        self._user: UserProfile | None = None
        self._loading = True
        self._started = False

    # ------------------------------------------------------------------ #
    # Read side                                                          #
    # ------------------------------------------------------------------ #
    @property
    def current_user(self) -> UserProfile | None:
        return self._user

    @property
    def loading(self) -> bool:
        """*True* until :meth:`start` has resolved; gate protected views on it."""
        return self._loading

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    # ------------------------------------------------------------------ #
    # Startup                                                            #
    # ------------------------------------------------------------------ #
    async def start(self) -> UserProfile | None:
        """Restore the persisted session if the backend still accepts it.

        Runs once; later calls return the current user without verifying
        again.  A refused or unverifiable session is cleared without any
        notification.
        """
        if self._started:
            return self._user
        self._started = True
        log = get_auth_logger(base_logger_name=_BASE_LOGGER, operation="start")
        try:
            token = self.store.get_token()
            saved = self.store.get_user()
            if token and saved:
                if await self.verifier.verify(token) is Verification.OK:
                    self._user = saved
                    log.info("Restored session", extra={"role": saved.role})
                else:
                    self.store.clear()
                    log.info("Discarded stale session")
            elif token or saved:
                # half a session cannot be trusted
                self.store.clear()
                log.info("Discarded incomplete session")
        finally:
            self._loading = False
        return self._user

    # ------------------------------------------------------------------ #
    # Session creation                                                   #
    # ------------------------------------------------------------------ #
    def _establish(self, result: AuthResult, operation: str) -> str:
        self.store.set_token(result.token)
        self.store.set_user(result.user)
        self._user = result.user
        target = dashboard_for_user(result.user)
        get_auth_logger(
            base_logger_name=_BASE_LOGGER,
            operation=operation,
            user_id=result.user.id,
            role=result.user.role,
        ).info("Session established, navigating to %s", target)
        self.navigator.navigate(target)
        return target

    async def login(self, email: str, password: str) -> str:
        """Authenticate with email and password.

        Returns the dashboard path navigated to.  Raises the API error after
        emitting a failure notification; the store is left untouched.
        """
        try:
            result = await self.api.login(email, password)
        except AuthError as exc:
            get_auth_logger(base_logger_name=_BASE_LOGGER, operation="login").info(
                "Login failed (%s)", exc.code
            )
            self.notifier.notify(Notification.error("Login failed", exc.reason))
            raise
        target = self._establish(result, "login")
        self.notifier.notify(Notification.success("Login successful!", _WELCOME))
        return target

    async def signup(
        self, name: str, email: str, password: str, role: str | None = None
    ) -> str:
        """Register a new account; ``role`` defaults to STUDENT on the backend."""
        try:
            result = await self.api.signup(name, email, password, role)
        except AuthError as exc:
            get_auth_logger(base_logger_name=_BASE_LOGGER, operation="signup").info(
                "Signup failed (%s)", exc.code
            )
            self.notifier.notify(Notification.error("Signup failed", exc.reason))
            raise
        target = self._establish(result, "signup")
        self.notifier.notify(Notification.success("Account created", _WELCOME))
        return target

    def consume_oauth_callback(self, callback: str | Mapping[str, str]) -> str:
        """Ingest the Google OAuth redirect.

        A malformed callback never raises: it emits a failure notification,
        navigates to the login page and returns its path.
        """
        try:
            result = parse_oauth_callback(callback)
        except MalformedCallbackError as exc:
            get_auth_logger(base_logger_name=_BASE_LOGGER, operation="oauth_callback").warning(
                "Rejected OAuth callback: %s", exc.description
            )
            self.notifier.notify(Notification.error(exc.reason, exc.description))
            self.navigator.navigate(LOGIN_PATH)
            return LOGIN_PATH
        target = self._establish(result, "oauth_callback")
        self.notifier.notify(Notification.success("Login successful!", _WELCOME))
        return target

    # ------------------------------------------------------------------ #
    # Session teardown                                                   #
    # ------------------------------------------------------------------ #
    def logout(self) -> str:
        """Forget the session and go to the login page; safe when logged out."""
        self.store.clear()
        self._user = None
        get_auth_logger(base_logger_name=_BASE_LOGGER, operation="logout").info("Logged out")
        self.navigator.navigate(LOGIN_PATH)
        return LOGIN_PATH

    def _expire(self, exc: SessionExpiredError) -> None:
        self.store.clear()
        self._user = None
        get_auth_logger(base_logger_name=_BASE_LOGGER, operation="expire").info(
            "Session expired during a protected call"
        )
        self.notifier.notify(Notification.error("Session expired", exc.reason))
        self.navigator.navigate(LOGIN_PATH)

    # ------------------------------------------------------------------ #
    # Profile                                                            #
    # ------------------------------------------------------------------ #
    def _require_user(self) -> UserProfile:
        if self._user is None:
            raise NotAuthenticatedError()
        return self._user

    async def _call_protected(
        self, operation: str, failure_title: str, call: Callable[[], Awaitable[Any]]
    ) -> Any:
        try:
            return await call()
        except SessionExpiredError as exc:
            self._expire(exc)
            raise
        except AuthError as exc:
            get_auth_logger(base_logger_name=_BASE_LOGGER, operation=operation).info(
                "%s failed (%s)", operation, exc.code
            )
            self.notifier.notify(Notification.error(failure_title, exc.reason))
            raise

    def _store_merged(self, changes: Mapping[str, Any], body: Mapping[str, Any]) -> UserProfile:
        # the session may have ended while the request was in flight
        current = self._require_user()
        merged = current.merge(changes).merge(body)
        self.store.set_user(merged)
        self._user = merged
        return merged

    async def _apply_patch(
        self,
        operation: str,
        patch: PatchT,
        call: Callable[[PatchT], Awaitable[dict[str, Any]]],
    ) -> UserProfile:
        current = self._require_user()
        if patch.is_empty():
            return current
        body = await self._call_protected(
            operation, "Profile update failed", lambda: call(patch)
        )
        merged = self._store_merged(patch.as_changes(), body or {})
        self.notifier.notify(Notification.success("Profile updated"))
        return merged

    async def update_profile(self, patch: ProfilePatch | Mapping[str, Any]) -> UserProfile:
        """Send *patch* and merge it into the stored profile.

        Fields not present in *patch* (or given as ``None``) keep their stored
        value.  An empty patch succeeds without contacting the backend.
        """
        if not isinstance(patch, ProfilePatch):
            patch = ProfilePatch.from_mapping(patch)
        return await self._apply_patch("update_profile", patch, self.api.update_profile)

    async def update_social_links(
        self, patch: SocialLinksPatch | Mapping[str, Any]
    ) -> UserProfile:
        if not isinstance(patch, SocialLinksPatch):
            patch = SocialLinksPatch.from_mapping(patch)
        return await self._apply_patch(
            "update_social_links", patch, self.api.update_social_links
        )

    async def refresh_profile(self) -> UserProfile:
        """Re-read the profile from the backend and merge it into the store."""
        self._require_user()
        body = await self._call_protected(
            "refresh_profile", "Could not load profile", self.api.get_profile
        )
        return self._store_merged({}, body)

    async def change_password(self, old_password: str, new_password: str) -> None:
        """Change the account password; a wrong old password keeps the session."""
        self._require_user()
        await self._call_protected(
            "change_password",
            "Password change failed",
            lambda: self.api.change_password(old_password, new_password),
        )
        self.notifier.notify(Notification.success("Password changed"))
