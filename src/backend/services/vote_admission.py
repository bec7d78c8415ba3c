"""
Vote admission gate.

Decides whether a candidate vote is accepted. Rules run in a fixed order and
the first failing rule determines the rejection:

1. score (and artist_id) must be integers           -> InvalidInput
2. 0 <= score <= 10                                 -> OutOfRange
3. the artist must exist                            -> NotFound
4. no live vote for (artist, voter identity)        -> AlreadyVoted / TooSoon
5. persist; a unique-constraint race at insert time -> AlreadyVoted

With a revote window configured, a vote older than the window is superseded
in place, so there is always at most one row per (artist, voter identity).
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.exceptions import (
    AlreadyVotedError,
    DuplicateVoteError,
    InvalidInputError,
    NotFoundError,
    OutOfRangeError,
    TooSoonError,
    VotingError,
)
from models.vote import MAX_SCORE, MIN_SCORE, Vote
from repositories.artist_repository import ArtistRepository
from repositories.vote_repository import VoteRepository
from schemas.vote import as_whole_number
from services.identity_service import VoterIdentity

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_score(score: Any) -> int:
    """Check the score is an integer within [MIN_SCORE, MAX_SCORE] and return it as int."""
    score = as_whole_number(score)
    if not _is_int(score):
        raise InvalidInputError(f"Score must be an integer {MIN_SCORE}-{MAX_SCORE}")
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise OutOfRangeError(f"Score must be an integer {MIN_SCORE}-{MAX_SCORE}")
    return score


class VoteAdmissionService:
    """Accepts or rejects votes and persists the accepted ones."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        clock: Clock = utc_now,
    ):
        self.db = db
        self.vote_repo = VoteRepository(db)
        self.artist_repo = ArtistRepository(db)
        self.window: Optional[timedelta] = settings.vote_window
        self.cookie_guard_enabled = settings.COOKIE_GUARD_ENABLED
        self.clock = clock

    async def submit(self, artist_id: Any, score: Any, identity: VoterIdentity) -> Vote:
        """
        Admit a vote.

        Returns:
            The stored (new or superseding) vote.

        Raises:
            VotingError: InvalidInput, OutOfRange, NotFound, AlreadyVoted or TooSoon.
        """
        try:
            vote = await self._admit(artist_id, score, identity)
        except VotingError as exc:
            logger.info(
                "vote_rejected",
                reason=exc.kind,
                artist_id=artist_id if _is_int(artist_id) else None,
                voter=identity.short_hash,
            )
            raise

        logger.info(
            "vote_accepted",
            artist_id=vote.artist_id,
            score=vote.score,
            voter=identity.short_hash,
        )
        return vote

    async def _admit(self, artist_id: Any, score: Any, identity: VoterIdentity) -> Vote:
        score = validate_score(score)
        artist_id = as_whole_number(artist_id)
        if not _is_int(artist_id):
            raise InvalidInputError("artist_id and score are required")

        artist = await self.artist_repo.get_by_id(artist_id)
        if artist is None:
            raise NotFoundError()

        now = self.clock()
        existing = await self.vote_repo.get_by_artist_and_voter(artist_id, identity.voter_hash)
        if existing is not None:
            self._check_revote(existing, now)

        # Soft guard: same browser, different network origin
        if self.cookie_guard_enabled and identity.cookie_token:
            prior = await self.vote_repo.get_latest_by_cookie(artist_id, identity.cookie_token)
            if prior is not None and prior.voter_hash != identity.voter_hash:
                self._check_revote(prior, now)

        if existing is not None:
            return await self._supersede(existing, score, identity, now)

        try:
            vote = await self.vote_repo.create(
                artist_id=artist_id,
                score=score,
                voter_hash=identity.voter_hash,
                created_at=now,
                cookie_guard=identity.cookie_token,
                user_agent=identity.user_agent,
            )
        except DuplicateVoteError:
            # Lost the race against a concurrent submission for the same pair
            logger.info("vote_insert_conflict", artist_id=artist_id, voter=identity.short_hash)
            raise AlreadyVotedError() from None

        await self.db.commit()
        return vote

    async def _supersede(self, existing: Vote, score: int, identity: VoterIdentity, now: datetime) -> Vote:
        replaced = await self.vote_repo.supersede(
            existing,
            score=score,
            created_at=now,
            cookie_guard=identity.cookie_token,
            user_agent=identity.user_agent,
        )
        if not replaced:
            await self.db.rollback()
            raise AlreadyVotedError()

        await self.db.commit()
        await self.db.refresh(existing)
        return existing

    def _check_revote(self, previous: Vote, now: datetime) -> None:
        """Reject unless a revote window is configured and has elapsed."""
        if self.window is None:
            raise AlreadyVotedError()

        elapsed = now - as_utc(previous.created_at)
        if elapsed < self.window:
            raise TooSoonError(retry_after=self.window - elapsed)
