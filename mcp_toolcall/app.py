"""
FastAPI application factory for serving a tool registry over MCP.
"""

from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from .config import Settings, get_settings
from .jsonrpc import McpDispatcher
from .registry import ToolRegistry
from .routes import create_mcp_router
from .sessions import McpSessionManager
from ._logging import get_logger, setup_logging


async def _prune_sessions_forever(sessions: McpSessionManager, max_idle_seconds: int) -> None:
    interval = max(1.0, max_idle_seconds / 2)
    while True:
        await asyncio.sleep(interval)
        sessions.prune_idle(max_idle_seconds)


def create_app(
    registry: ToolRegistry,
    settings: Optional[Settings] = None,
    sessions: Optional[McpSessionManager] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings if settings is not None else get_settings()
    sessions = sessions if sessions is not None else McpSessionManager()
    dispatcher = McpDispatcher(registry, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings.log_level, settings.log_json)
        logger = get_logger(__name__)
        pruner = asyncio.create_task(
            _prune_sessions_forever(sessions, settings.session_idle_timeout_seconds)
        )
        logger.info(
            "Starting MCP server",
            server=settings.server_name,
            version=settings.server_version,
            tools=len(registry),
        )

        yield

        pruner.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await pruner
        logger.info("Shutting down MCP server")

    app = FastAPI(
        title=settings.server_name,
        version=settings.server_version,
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.sessions = sessions
    app.state.dispatcher = dispatcher
    app.include_router(create_mcp_router(dispatcher, sessions, settings.path))
    return app
