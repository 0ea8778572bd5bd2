"""Session endpoints for a locally served HACKTOLIVE client.

Handlers are intentionally thin:

1. Read HTTP-layer parameters.
2. Delegate to the shared ``AuthFlowController``.
3. Answer with a redirect for browsers or JSON for API clients.

The base path is configurable (default: ``/auth``) so that reverse-proxies can
mount the application under arbitrary prefixes.

SECURITY NOTE
-------------
The callback query carries the session token; it is never logged.
"""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.routing import Route

from hacktolive_auth.session.controller import AuthFlowController
from hacktolive_auth.session.log_utils import get_auth_logger
from hacktolive_auth.session.navigation import dashboard_for

_BASE_LOGGER = "hacktolive.auth.routes"


def _navigate(request: Request, target: str) -> Response:
    """Redirect browsers, answer JSON to API clients.

    ``format=json`` or ``format=redirect`` overrides the Accept header.
    """
    fmt_param = request.query_params.get("format")
    accept_header = (request.headers.get("accept") or "").lower()

    if fmt_param == "json":
        return JSONResponse({"redirect": target})
    if fmt_param == "redirect" or "text/html" in accept_header:
        # 303 See Other for GET safety across methods
        return RedirectResponse(target, status_code=303)
    return JSONResponse({"redirect": target})


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", "-")


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def session_routes(controller: AuthFlowController, *, base_path: str = "/auth") -> list[Route]:
    """Return the session routes bound to *controller* under *base_path*."""

    # ----- GET /auth/google/callback -------------------------------------- #
    async def _google_callback(request: Request) -> Response:
        target = controller.consume_oauth_callback(request.query_params)
        user = controller.current_user
        get_auth_logger(
            base_logger_name=_BASE_LOGGER,
            operation="oauth_callback",
            role=user.role if user else None,
            correlation_id=_correlation_id(request),
        ).info("OAuth callback handled, redirecting to %s", target)
        return _navigate(request, target)

    # ----- POST /auth/logout ---------------------------------------------- #
    async def _logout(request: Request) -> Response:
        target = controller.logout()
        get_auth_logger(
            base_logger_name=_BASE_LOGGER,
            operation="logout",
            correlation_id=_correlation_id(request),
        ).info("Logout requested")
        return _navigate(request, target)

    # ----- GET /auth/session ---------------------------------------------- #
    async def _session(request: Request) -> Response:
        user = controller.current_user
        return JSONResponse(
            {
                "loading": controller.loading,
                "authenticated": user is not None,
                "role": user.role if user else None,
                "dashboard": dashboard_for(user.role) if user else None,
            }
        )

    return [
        Route(f"{base_path}/google/callback", _google_callback, methods=["GET"]),
        Route(f"{base_path}/logout", _logout, methods=["POST"]),
        Route(f"{base_path}/session", _session, methods=["GET"]),
    ]
