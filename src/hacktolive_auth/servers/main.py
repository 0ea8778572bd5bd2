"""Starlette application hosting the session endpoints."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from hacktolive_auth.utils.environment import SessionConfig
from hacktolive_auth.utils.logging import setup_logging

from .auth import session_routes
from .context import SessionAppContext
from .correlation import CorrelationIdMiddleware

logger = logging.getLogger("hacktolive.server.main")


async def health_check(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_app(
    context: SessionAppContext | None = None,
    *,
    config: SessionConfig | None = None,
    base_path: str = "/auth",
) -> Starlette:
    """Build the application; the startup session check runs in its lifespan."""
    if context is None:
        config = config or SessionConfig.from_env()
        setup_logging(config.log_level)
        context = SessionAppContext.build(config)

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info("Session server lifespan starting...")
        user = await context.controller.start()
        logger.info(f"Startup session: {'restored' if user else 'none'}")
        try:
            yield
        finally:
            logger.info("Session server lifespan shutting down...")
            await context.api.aclose()

    app = Starlette(
        routes=[
            Route("/health", health_check, methods=["GET"]),
            *session_routes(context.controller, base_path=base_path),
        ],
        middleware=[Middleware(CorrelationIdMiddleware)],
        lifespan=lifespan,
    )
    app.state.session = context
    return app
