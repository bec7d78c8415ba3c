"""Repositories module."""

from repositories.artist_repository import ArtistRepository
from repositories.vote_repository import ArtistTally, VoteRepository

__all__ = ["ArtistRepository", "ArtistTally", "VoteRepository"]
