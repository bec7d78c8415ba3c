"""
Leaderboard aggregation.

Standings are recomputed from the votes table on every call; nothing is
cached or persisted, so the board always reflects the latest committed votes.

Ordering (LEADERBOARD_ORDER):
- "total":   total_score desc, vote_count desc, name asc, id asc
- "average": avg_score desc (no votes last), vote_count desc, name asc, id asc
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from models.artist import Artist
from repositories.vote_repository import ArtistTally, VoteRepository

TWO_PLACES = Decimal("0.01")

ORDER_TOTAL = "total"
ORDER_AVERAGE = "average"


@dataclass
class LeaderboardRow:
    """Derived standing of one artist."""

    artist: Artist
    vote_count: int
    total_score: int
    avg_score: Optional[Decimal]


def average_score(total_score: int, vote_count: int) -> Optional[Decimal]:
    """Mean score rounded half-up to two places, or None when there are no votes."""
    if vote_count == 0:
        return None
    return (Decimal(total_score) / Decimal(vote_count)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _by_total(row: LeaderboardRow) -> tuple:
    return (-row.total_score, -row.vote_count, row.artist.name.casefold(), row.artist.id)


def _by_average(row: LeaderboardRow) -> tuple:
    return (
        row.avg_score is None,
        -(row.avg_score or Decimal(0)),
        -row.vote_count,
        row.artist.name.casefold(),
        row.artist.id,
    )


SORT_KEYS = {
    ORDER_TOTAL: _by_total,
    ORDER_AVERAGE: _by_average,
}


def build_rows(tallies: list[ArtistTally], order: str = ORDER_TOTAL) -> list[LeaderboardRow]:
    """Turn raw per-artist tallies into sorted leaderboard rows."""
    rows = [
        LeaderboardRow(
            artist=tally.artist,
            vote_count=tally.vote_count,
            total_score=tally.total_score,
            avg_score=average_score(tally.total_score, tally.vote_count),
        )
        for tally in tallies
    ]
    return sorted(rows, key=SORT_KEYS[order])


class LeaderboardService:
    """Computes ranked standings from stored votes."""

    def __init__(self, db: AsyncSession, order: str = ORDER_TOTAL):
        if order not in SORT_KEYS:
            raise ValueError(f"Unknown leaderboard order: {order}")
        self.vote_repo = VoteRepository(db)
        self.order = order

    async def rank(self) -> list[LeaderboardRow]:
        tallies = await self.vote_repo.tally_by_artist()
        return build_rows(tallies, self.order)
