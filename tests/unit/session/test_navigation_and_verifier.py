"""Unit tests for role routing and the startup token verifier."""

from __future__ import annotations

import logging

import pytest

from hacktolive_auth.session.errors import SessionExpiredError, TransportError
from hacktolive_auth.session.models import Role
from hacktolive_auth.session.navigation import (
    ADMIN_DASHBOARD,
    INSTRUCTOR_DASHBOARD,
    STUDENT_DASHBOARD,
    LoggingNavigator,
    dashboard_for,
    dashboard_for_user,
)
from hacktolive_auth.session.verifier import SessionVerifier, Verification


@pytest.mark.parametrize(
    "role, expected",
    [
        ("ADMIN", ADMIN_DASHBOARD),
        (Role.INSTRUCTOR, INSTRUCTOR_DASHBOARD),
        ("student", STUDENT_DASHBOARD),
        ("MODERATOR", STUDENT_DASHBOARD),
        (None, STUDENT_DASHBOARD),
    ],
)
def test_dashboard_for(role, expected: str) -> None:
    assert dashboard_for(role) == expected


def test_dashboard_for_user(make_user) -> None:
    assert dashboard_for_user(make_user("ADMIN")) == ADMIN_DASHBOARD


def test_logging_navigator_tracks_current() -> None:
    nav = LoggingNavigator()
    assert nav.current is None
    nav.navigate("/login")
    assert nav.current == "/login"


@pytest.mark.anyio
async def test_verifier_accepts(api) -> None:
    assert await SessionVerifier(api).verify("tok") is Verification.OK


@pytest.mark.anyio
async def test_verifier_refused(api) -> None:
    api.verify_accepts = False
    assert await SessionVerifier(api).verify("tok") is Verification.INVALID


@pytest.mark.anyio
@pytest.mark.parametrize("error", [TransportError(), SessionExpiredError()])
async def test_verifier_errors_are_terminal(api, caplog, error) -> None:
    api.verify_error = error
    caplog.set_level(logging.INFO, logger="hacktolive.session.verifier")

    assert await SessionVerifier(api).verify("secret-token-1234") is Verification.INVALID

    assert api.called("verify_token") == 1
    assert "secret-token-1234" not in caplog.text
    assert "secr****" in caplog.text
