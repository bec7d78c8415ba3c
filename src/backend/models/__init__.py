"""Database models module."""

from models.artist import Artist
from models.vote import MAX_SCORE, MIN_SCORE, Vote

__all__ = [
    "Artist",
    "Vote",
    "MIN_SCORE",
    "MAX_SCORE",
]
