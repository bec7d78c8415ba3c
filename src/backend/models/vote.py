"""
Vote model.

Privacy-preserving vote storage: the caller's network origin is NEVER stored,
only a keyed one-way hash of it (voter_hash).
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base

MIN_SCORE = 0
MAX_SCORE = 10


class Vote(Base):
    """
    One accepted score for one artist from one voter identity.

    INTEGRITY:
    - At most one row per (artist_id, voter_hash), enforced by the database
    - Score is an integer in [0, 10], enforced by a CHECK constraint
    - With a revote window the row is superseded in place, never duplicated
    """

    __tablename__ = "votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    artist_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("artists.id"),
        index=True,
    )

    score: Mapped[int] = mapped_column(Integer)

    # HMAC-SHA256 hex of the caller's origin (cannot be reversed)
    voter_hash: Mapped[str] = mapped_column(String(64))

    # Opaque long-lived cookie token, used by the optional soft guard
    cookie_guard: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    user_agent: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("artist_id", "voter_hash", name="uq_votes_artist_voter"),
        CheckConstraint(f"score BETWEEN {MIN_SCORE} AND {MAX_SCORE}", name="ck_votes_score_range"),
        Index("ix_votes_artist_cookie", "artist_id", "cookie_guard"),
    )
