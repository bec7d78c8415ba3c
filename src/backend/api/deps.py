"""
Shared dependencies for API endpoints.

Includes:
- Access to the application context (settings, storage)
- Voter identity resolution
- Staff capability check
- Service factories
"""

from typing import Annotated

import structlog
from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.context import AppContext
from core.exceptions import ForbiddenError
from core.security import STAFF_TOKEN_TYPE, decode_token
from db.session import get_db
from services.artist_service import ArtistRegistry
from services.identity_service import IdentityResolver, VoterIdentity
from services.leaderboard_service import LeaderboardService
from services.vote_admission import Clock, VoteAdmissionService, utc_now

logger = structlog.get_logger(__name__)


# =============================================================================
# Application context
# =============================================================================


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_app_settings(context: Annotated[AppContext, Depends(get_context)]) -> Settings:
    return context.settings


def get_clock() -> Clock:
    """Time source for admission decisions (overridden in tests)."""
    return utc_now


# =============================================================================
# Voter identity
# =============================================================================


def get_identity_resolver(settings: Annotated[Settings, Depends(get_app_settings)]) -> IdentityResolver:
    return IdentityResolver(settings)


async def get_voter_identity(
    request: Request,
    response: Response,
    resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
) -> VoterIdentity:
    """Resolve the caller's identity, issuing the identification cookie if absent."""
    token = resolver.ensure_voter_cookie(request, response)
    return resolver.resolve(request, cookie_token=token)


# =============================================================================
# Staff capability
# =============================================================================


def is_staff(request: Request, settings: Settings) -> bool:
    """True when the request carries a valid, unexpired staff session token."""
    token = request.cookies.get(settings.STAFF_COOKIE_NAME)
    if not token:
        return False
    return decode_token(token, settings, expected_type=STAFF_TOKEN_TYPE) is not None


async def require_staff(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> None:
    """
    Ensure the caller is staff.

    Raises:
        ForbiddenError: If the staff session marker is missing or invalid.
    """
    if not is_staff(request, settings):
        logger.warning("non_staff_access_attempt", path=request.url.path, method=request.method)
        raise ForbiddenError()


# =============================================================================
# Services
# =============================================================================


async def get_vote_admission(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> VoteAdmissionService:
    return VoteAdmissionService(db, settings, clock=clock)


async def get_artist_registry(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ArtistRegistry:
    return ArtistRegistry(db, max_attempts=settings.SLUG_MAX_ATTEMPTS)


async def get_leaderboard_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> LeaderboardService:
    return LeaderboardService(db, order=settings.LEADERBOARD_ORDER)
