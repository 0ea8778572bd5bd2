"""Per-request correlation ids for the session endpoints.

An incoming ``X-Correlation-ID`` is reused, otherwise a UUID4 hex string is
minted.  The id is exposed to handlers as ``request.state.correlation_id``,
echoed on the response and attached to the request log line through
:func:`~hacktolive_auth.session.log_utils.get_auth_logger`, so it lines up
with the records the route handlers emit for the same request.
"""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from hacktolive_auth.session.log_utils import get_auth_logger

CORRELATION_HEADER = "X-Correlation-ID"
_BASE_LOGGER = "hacktolive.server.correlation"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag every request and response with a correlation id."""

    def __init__(self, app: ASGIApp, header_name: str = CORRELATION_HEADER) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(self.header_name) or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        response = await call_next(request)
        response.headers[self.header_name] = correlation_id
        get_auth_logger(
            base_logger_name=_BASE_LOGGER, correlation_id=correlation_id
        ).debug("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response
