"""
Artist-related Pydantic schemas.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ArtistCreate(BaseModel):
    """Schema for registering an artist (staff only)."""

    name: str = Field(..., max_length=200)


class ArtistResponse(BaseModel):
    """Public view of an artist."""

    id: int
    name: str
    slug: str
    link: str

    model_config = {"from_attributes": True}


class ArtistDetail(ArtistResponse):
    """Artist page payload: where and how to vote."""

    created_at: datetime
    vote_endpoint: str = "/api/vote"
    min_score: int = 0
    max_score: int = 10


class ArtistList(BaseModel):
    """Homepage payload."""

    artists: list[ArtistResponse]
    leaderboard: str = "/api/leaderboard"
