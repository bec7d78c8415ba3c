"""
Application lifecycle event handlers.

Manages startup and shutdown tasks: schema creation, configuration sanity
warnings and releasing database connections.
"""

from typing import Callable

import structlog
from fastapi import FastAPI

from db.session import close_db, init_db

logger = structlog.get_logger(__name__)


def create_start_app_handler(app: FastAPI) -> Callable:
    """Create startup event handler."""

    async def start_app() -> None:
        context = app.state.context
        settings = context.settings
        logger.info("Starting voting API...", app_env=settings.APP_ENV)

        await init_db(context.engine)

        for name in settings.uses_default_secrets:
            logger.warning("default_secret_in_use", setting=name)

        if settings.vote_window is None:
            logger.info("vote_mode", mode="once_per_identity")
        else:
            logger.info("vote_mode", mode="revote_window", window_minutes=settings.VOTE_WINDOW_MINUTES)

        logger.info("Voting API started successfully")

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    """Create shutdown event handler."""

    async def stop_app() -> None:
        logger.info("Shutting down voting API...")
        await close_db(app.state.context.engine)
        logger.info("Voting API shutdown complete")

    return stop_app
