"""Shared fakes and fixtures for the session test-suite."""

from __future__ import annotations

from typing import Any

import pytest

from hacktolive_auth.session.controller import AuthFlowController
from hacktolive_auth.session.errors import AuthError
from hacktolive_auth.session.models import (
    AuthResult,
    ProfilePatch,
    SocialLinksPatch,
    UserProfile,
)
from hacktolive_auth.session.notifications import Level, Notification
from hacktolive_auth.session.store import MemoryTokenStore


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# --------------------------------------------------------------------------- #
# Fakes                                                                       #
# --------------------------------------------------------------------------- #
class FakeAuthApi:
    """In-memory AuthApi/OtpApi; set ``*_error`` attributes to make a call fail."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.auth_result: AuthResult | None = None
        self.login_error: AuthError | None = None
        self.signup_error: AuthError | None = None
        self.verify_accepts = True
        self.verify_error: AuthError | None = None
        self.profile_body: dict[str, Any] = {}
        self.profile_error: AuthError | None = None
        self.password_error: AuthError | None = None
        self.resend_error: AuthError | None = None
        self.verify_code_error: AuthError | None = None

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def called(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    async def login(self, email: str, password: str) -> AuthResult:
        self._record("login", email)
        if self.login_error:
            raise self.login_error
        assert self.auth_result is not None
        return self.auth_result

    async def signup(self, name, email, password, role=None) -> AuthResult:
        self._record("signup", name, email, role)
        if self.signup_error:
            raise self.signup_error
        assert self.auth_result is not None
        return self.auth_result

    async def verify_token(self, token: str) -> bool:
        self._record("verify_token", token)
        if self.verify_error:
            raise self.verify_error
        return self.verify_accepts

    async def get_profile(self) -> dict[str, Any]:
        self._record("get_profile")
        if self.profile_error:
            raise self.profile_error
        return dict(self.profile_body)

    async def update_profile(self, patch: ProfilePatch) -> dict[str, Any]:
        self._record("update_profile", patch)
        if self.profile_error:
            raise self.profile_error
        return dict(self.profile_body)

    async def update_social_links(self, patch: SocialLinksPatch) -> dict[str, Any]:
        self._record("update_social_links", patch)
        if self.profile_error:
            raise self.profile_error
        return dict(self.profile_body)

    async def change_password(self, old_password: str, new_password: str) -> None:
        self._record("change_password")
        if self.password_error:
            raise self.password_error

    async def resend_code(self, contact: str) -> None:
        self._record("resend_code", contact)
        if self.resend_error:
            raise self.resend_error

    async def verify_code(self, contact: str, code: str) -> None:
        self._record("verify_code", contact, code)
        if self.verify_code_error:
            raise self.verify_code_error

    async def aclose(self) -> None:
        self._record("aclose")


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.events.append(notification)

    @property
    def errors(self) -> list[Notification]:
        return [n for n in self.events if n.level is Level.ERROR]

    @property
    def successes(self) -> list[Notification]:
        return [n for n in self.events if n.level is Level.SUCCESS]


class RecordingNavigator:
    def __init__(self) -> None:
        self.history: list[str] = []

    def navigate(self, path: str) -> None:
        self.history.append(path)

    @property
    def current(self) -> str | None:
        return self.history[-1] if self.history else None


# --------------------------------------------------------------------------- #
# Fixtures                                                                    #
# --------------------------------------------------------------------------- #
def _make_user(role: str = "STUDENT", **overrides: Any) -> UserProfile:
    values: dict[str, Any] = {
        "id": 7,
        "email": "ada@example.com",
        "name": "Ada",
        "role": role,
    }
    values.update(overrides)
    return UserProfile(**values)


@pytest.fixture
def make_user():
    """Factory building a UserProfile with sensible defaults."""
    return _make_user


@pytest.fixture
def api() -> FakeAuthApi:
    return FakeAuthApi()


@pytest.fixture
def store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def controller(
    api: FakeAuthApi,
    store: MemoryTokenStore,
    navigator: RecordingNavigator,
    notifier: RecordingNotifier,
) -> AuthFlowController:
    return AuthFlowController(api, store, navigator=navigator, notifier=notifier)


# --------------------------------------------------------------------------- #
# Integration opt-in                                                          #
# --------------------------------------------------------------------------- #
def pytest_addoption(parser):
    """Add integration option to pytest."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests against a live backend",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly requested."""
    if config.getoption("--integration"):
        return
    skip_integration = pytest.mark.skip(reason="Need --integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
