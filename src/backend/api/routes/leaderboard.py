"""
Public leaderboard endpoint.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from api.deps import get_leaderboard_service
from schemas.artist import ArtistResponse
from schemas.leaderboard import LeaderboardResponse, LeaderboardRowResponse
from services.leaderboard_service import LeaderboardService

router = APIRouter()


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    service: Annotated[LeaderboardService, Depends(get_leaderboard_service)],
) -> LeaderboardResponse:
    """Ranked standings, recomputed from the stored votes on every request."""
    rows = await service.rank()
    return LeaderboardResponse(
        order=service.order,
        rows=[
            LeaderboardRowResponse(
                rank=position,
                artist=ArtistResponse.model_validate(row.artist),
                vote_count=row.vote_count,
                total_score=row.total_score,
                avg_score=row.avg_score,
            )
            for position, row in enumerate(rows, start=1)
        ],
    )
