"""
OpenMic Vote Backend Application

Staff register artists; anonymous visitors give each artist one 0-10 score;
a public leaderboard ranks artists from the stored votes.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.routes import pages_router
from api.routes import router as api_router
from core.config import Settings, get_settings
from core.context import AppContext
from core.events import create_start_app_handler, create_stop_app_handler
from core.exceptions import InvalidInputError, TooSoonError, VotingError
from core.logging import configure_logging
from core.middleware import SecurityHeadersMiddleware

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    await create_start_app_handler(app)()
    yield
    await create_stop_app_handler(app)()


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return InvalidInputError.default_message
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", InvalidInputError.default_message)
    return f"{location}: {message}" if location else message


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    application = FastAPI(
        title=settings.APP_NAME,
        description="One score per visitor per artist, with a live leaderboard",
        version="1.0.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    application.state.context = AppContext.from_settings(settings)

    application.add_middleware(SecurityHeadersMiddleware)

    application.include_router(pages_router)
    application.include_router(api_router, prefix="/api")

    @application.exception_handler(VotingError)
    async def voting_error_handler(request: Request, exc: VotingError) -> JSONResponse:
        """Structured response for every expected, user-facing failure."""
        headers = None
        if isinstance(exc, TooSoonError):
            headers = {"Retry-After": str(exc.retry_after_seconds)}
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies are InvalidInput (400), not FastAPI's default 422."""
        error = InvalidInputError(_describe_validation_error(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler to catch unhandled exceptions.

        The failure is logged with its traceback server-side; the caller only
        gets a generic Internal error.
        """
        logger.exception(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=500,
            content={
                "ok": False,
                "error": "Internal",
                "message": "An internal server error occurred. Please try again later.",
                "error_type": type(exc).__name__ if settings.DEBUG else "InternalServerError",
            },
        )

    return application


app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
