"""Schemas module initialization."""

from schemas.artist import ArtistCreate, ArtistDetail, ArtistList, ArtistResponse
from schemas.auth import StaffLoginRequest, StaffSessionResponse
from schemas.leaderboard import LeaderboardResponse, LeaderboardRowResponse
from schemas.vote import SubmitVoteCommand, VoteRecord, VoteResponse

__all__ = [
    "ArtistCreate",
    "ArtistDetail",
    "ArtistList",
    "ArtistResponse",
    "StaffLoginRequest",
    "StaffSessionResponse",
    "LeaderboardResponse",
    "LeaderboardRowResponse",
    "SubmitVoteCommand",
    "VoteRecord",
    "VoteResponse",
]
