"""Role-based post-authentication navigation."""

from __future__ import annotations

import logging
from typing import Final, Protocol, runtime_checkable

from hacktolive_auth.session.models import Role, UserProfile

_LOG = logging.getLogger("hacktolive.session.navigation")

LOGIN_PATH: Final[str] = "/login"
ADMIN_DASHBOARD: Final[str] = "/admin/dashboard"
INSTRUCTOR_DASHBOARD: Final[str] = "/instructor/dashboard"
STUDENT_DASHBOARD: Final[str] = "/student/dashboard"

_DASHBOARDS: Final[dict[Role, str]] = {
    Role.ADMIN: ADMIN_DASHBOARD,
    Role.INSTRUCTOR: INSTRUCTOR_DASHBOARD,
    Role.STUDENT: STUDENT_DASHBOARD,
}


def dashboard_for(role: str | Role | None) -> str:
    """Return the dashboard path for *role*; unknown roles land on the student one."""
    return _DASHBOARDS.get(Role.parse(role), STUDENT_DASHBOARD)


def dashboard_for_user(user: UserProfile) -> str:
    return dashboard_for(user.role)


@runtime_checkable
class Navigator(Protocol):
    """Presentation-layer router."""

    def navigate(self, path: str) -> None: ...


class LoggingNavigator(Navigator):
    """Navigator for headless use; records the last target."""

    def __init__(self) -> None:
        self.current: str | None = None

    def navigate(self, path: str) -> None:
        _LOG.debug("Navigate to %s", path)
        self.current = path
