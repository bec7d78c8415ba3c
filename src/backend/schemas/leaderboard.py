"""
Leaderboard schemas.

avg_score is serialized as a decimal string with two places ("8.00"),
or null for artists without votes.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from schemas.artist import ArtistResponse


class LeaderboardRowResponse(BaseModel):
    """Derived standing of one artist."""

    rank: int
    artist: ArtistResponse
    vote_count: int
    total_score: int
    avg_score: Optional[Decimal] = None


class LeaderboardResponse(BaseModel):
    order: str
    rows: list[LeaderboardRowResponse]
