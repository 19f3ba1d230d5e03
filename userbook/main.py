"""Userbook: FastAPI application factory and server entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Collaborators (settings, templates, repository) are injected into create_app
      and stored on app.state; there are no process-wide singletons
    - The database is pinged on startup; an unreachable store aborts startup
    - Shutdown: uvicorn drains in-flight requests for server.shutdown_timeout
      seconds, then the lifespan disposes the connection pool
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from userbook.api.error_handlers import register_error_handlers
from userbook.api.middleware import RequestLoggingMiddleware
from userbook.api.routes import health, users
from userbook.config import Settings, get_settings
from userbook.core.repository_protocols import UserRepository
from userbook.infrastructure.database import DatabaseSessionManager
from userbook.infrastructure.observability import setup_logging
from userbook.infrastructure.user_repository import SqlUserRepository

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    repository: UserRepository | None = None,
) -> FastAPI:
    """Build the application.

    When `repository` is None the lifespan opens a pooled connection to
    `settings.database.dsn` and serves a SqlUserRepository over it.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log.level, settings.log.format)
        db_manager = None
        if app.state.repository is None:
            db = settings.database
            db_manager = DatabaseSessionManager.from_dsn(
                db.dsn,
                max_open_conns=db.max_open_conns,
                max_idle_conns=db.max_idle_conns,
                conn_max_lifetime=db.conn_max_lifetime,
            )
            if not await db_manager.health_check():
                await db_manager.close()
                raise RuntimeError("Failed to connect to database")
            app.state.repository = SqlUserRepository(
                db_manager, statement_timeout=db.statement_timeout,
            )
        logger.info("Userbook started")
        yield
        logger.info("Userbook shutting down")
        if db_manager is not None:
            await db_manager.close()
            app.state.repository = None

    app = FastAPI(title="Userbook", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=settings.templates.path)
    app.state.repository = repository

    app.add_middleware(RequestLoggingMiddleware)

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(users.router)

    register_error_handlers(app)
    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "userbook.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        timeout_graceful_shutdown=settings.server.shutdown_timeout,
        log_level=settings.log.level.lower(),
    )
