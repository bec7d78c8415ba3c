"""
Vote repository for database operations.

The (artist_id, voter_hash) uniqueness lives in the database, so the
check-then-insert sequence is race-free: a concurrent duplicate surfaces
as DuplicateVoteError from create() instead of a second row.
"""

from datetime import datetime
from typing import Any, AsyncIterator, NamedTuple, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateVoteError
from models.artist import Artist
from models.vote import Vote
from repositories._errors import is_unique_violation


class ArtistTally(NamedTuple):
    """Raw per-artist aggregate straight from the database."""

    artist: Artist
    vote_count: int
    total_score: int


class VoteRepository:
    """Repository for vote database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_rowcount(self, result: Any) -> int:
        """Safely get rowcount from result."""
        return getattr(result, "rowcount", 0) or 0

    async def get_by_artist_and_voter(self, artist_id: int, voter_hash: str) -> Optional[Vote]:
        """Get the live vote of one voter identity for one artist."""
        result = await self.db.execute(
            select(Vote).where(Vote.artist_id == artist_id, Vote.voter_hash == voter_hash)
        )
        return result.scalar_one_or_none()

    async def get_latest_by_cookie(self, artist_id: int, cookie_guard: str) -> Optional[Vote]:
        """Most recent vote for an artist carrying the given cookie token."""
        result = await self.db.execute(
            select(Vote)
            .where(Vote.artist_id == artist_id, Vote.cookie_guard == cookie_guard)
            .order_by(Vote.created_at.desc(), Vote.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        artist_id: int,
        score: int,
        voter_hash: str,
        created_at: datetime,
        cookie_guard: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Vote:
        """
        Create a vote record.

        Raises:
            DuplicateVoteError: if this voter already has a vote for the artist.
        """
        vote = Vote(
            artist_id=artist_id,
            score=score,
            voter_hash=voter_hash,
            cookie_guard=cookie_guard,
            user_agent=user_agent,
            created_at=created_at,
        )
        self.db.add(vote)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            if is_unique_violation(exc):
                raise DuplicateVoteError(f"artist={artist_id}") from exc
            raise
        return vote

    async def supersede(
        self,
        vote: Vote,
        score: int,
        created_at: datetime,
        cookie_guard: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> bool:
        """
        Replace an aged-out vote in place (revote window mode).

        Compare-and-set on the previous created_at: returns False when another
        request superseded the same row first.
        """
        result = await self.db.execute(
            update(Vote)
            .where(Vote.id == vote.id, Vote.created_at == vote.created_at)
            .values(
                score=score,
                created_at=created_at,
                cookie_guard=cookie_guard,
                user_agent=user_agent,
            )
            .execution_options(synchronize_session=False)
        )
        return self._get_rowcount(result) == 1

    async def iter_for_artist(self, artist_id: int) -> AsyncIterator[Vote]:
        """Stream an artist's votes, oldest first. Each call starts a fresh query."""
        stream = await self.db.stream_scalars(
            select(Vote).where(Vote.artist_id == artist_id).order_by(Vote.created_at, Vote.id)
        )
        async for vote in stream:
            yield vote

    async def tally_by_artist(self) -> list[ArtistTally]:
        """Vote count and score sum for every artist, including artists without votes."""
        result = await self.db.execute(
            select(
                Artist,
                func.count(Vote.id).label("vote_count"),
                func.coalesce(func.sum(Vote.score), 0).label("total_score"),
            )
            .outerjoin(Vote, Vote.artist_id == Artist.id)
            .group_by(Artist.id)
        )
        return [
            ArtistTally(artist=row[0], vote_count=int(row[1]), total_score=int(row[2]))
            for row in result.all()
        ]
