"""
API router aggregating all endpoints.
"""

from fastapi import APIRouter

from api.routes.artists import router as artists_router
from api.routes.leaderboard import router as leaderboard_router
from api.routes.pages import router as pages_router
from api.routes.staff import router as staff_router
from api.routes.votes import router as votes_router

router = APIRouter()

router.include_router(votes_router, prefix="/vote", tags=["Votes"])
router.include_router(artists_router, prefix="/artists", tags=["Artists"])
router.include_router(leaderboard_router, prefix="/leaderboard", tags=["Leaderboard"])
router.include_router(staff_router, prefix="/staff", tags=["Staff"])


@router.get("/health", tags=["Health"])
async def health_check() -> dict[str, bool]:
    """Liveness probe."""
    return {"ok": True}


__all__ = ["router", "pages_router"]
