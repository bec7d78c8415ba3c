"""
Tests for leaderboard aggregation and ordering.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from core.security import hash_voter_origin
from repositories.vote_repository import ArtistTally
from services.artist_service import ArtistRegistry
from services.identity_service import VoterIdentity
from services.leaderboard_service import (
    ORDER_AVERAGE,
    ORDER_TOTAL,
    LeaderboardService,
    average_score,
    build_rows,
)
from services.vote_admission import VoteAdmissionService


def tally(artist_id: int, name: str, vote_count: int, total_score: int) -> ArtistTally:
    artist = SimpleNamespace(id=artist_id, name=name)
    return ArtistTally(artist=artist, vote_count=vote_count, total_score=total_score)


def names(rows) -> list[str]:
    return [row.artist.name for row in rows]


@pytest.mark.unit
class TestAverageScore:
    def test_no_votes_has_no_average(self) -> None:
        assert average_score(0, 0) is None

    def test_exact_average_keeps_two_places(self) -> None:
        assert str(average_score(16, 2)) == "8.00"

    @pytest.mark.parametrize(
        "total,count,expected",
        [
            (10, 3, Decimal("3.33")),
            (20, 3, Decimal("6.67")),
            (1, 8, Decimal("0.13")),  # 0.125 rounds half-up
            (3, 8, Decimal("0.38")),  # 0.375 rounds half-up
        ],
    )
    def test_rounds_half_up(self, total, count, expected) -> None:
        assert average_score(total, count) == expected


@pytest.mark.unit
class TestBuildRows:
    """Test derived values and ordering of leaderboard rows."""

    def test_derives_average_from_tally(self) -> None:
        [row] = build_rows([tally(1, "Ana", 2, 16)])

        assert row.vote_count == 2
        assert row.total_score == 16
        assert row.avg_score == Decimal("8.00")

    def test_orders_by_total_desc(self) -> None:
        rows = build_rows([tally(1, "Ana", 1, 5), tally(2, "Bruno", 1, 9), tally(3, "Caro", 2, 7)])
        assert names(rows) == ["Bruno", "Caro", "Ana"]

    def test_total_tie_broken_by_vote_count(self) -> None:
        rows = build_rows([tally(1, "Ana", 1, 10), tally(2, "Bruno", 2, 10)])
        assert names(rows) == ["Bruno", "Ana"]

    def test_full_tie_broken_by_name_then_id(self) -> None:
        rows = build_rows([
            tally(3, "bruno", 1, 5),
            tally(2, "Ana", 1, 5),
            tally(1, "Bruno", 1, 5),
        ])
        assert [row.artist.id for row in rows] == [2, 1, 3]

    def test_artists_without_votes_are_listed(self) -> None:
        rows = build_rows([tally(1, "Ana", 0, 0), tally(2, "Bruno", 1, 0)])

        assert names(rows) == ["Bruno", "Ana"]
        assert rows[1].avg_score is None

    def test_average_order(self) -> None:
        rows = build_rows(
            [
                tally(1, "Ana", 4, 20),  # 5.00
                tally(2, "Bruno", 1, 9),  # 9.00
                tally(3, "Caro", 0, 0),
                tally(4, "Dani", 2, 18),  # 9.00, more votes
            ],
            order=ORDER_AVERAGE,
        )
        assert names(rows) == ["Dani", "Bruno", "Ana", "Caro"]

    def test_empty(self) -> None:
        assert build_rows([]) == []

    def test_unknown_order_rejected(self) -> None:
        with pytest.raises(ValueError):
            LeaderboardService(db=None, order="median")


@pytest.mark.integration
class TestLeaderboardService:
    """Test the leaderboard against stored votes."""

    async def test_ranks_from_stored_votes(self, db_session, settings, clock) -> None:
        registry = ArtistRegistry(db_session)
        ana = await registry.create("Ana")
        bruno = await registry.create("Bruno")
        await registry.create("Caro")

        gate = VoteAdmissionService(db_session, settings, clock=clock)
        for origin, artist, score in [
            ("203.0.113.10", ana, 7),
            ("198.51.100.20", ana, 9),
            ("203.0.113.10", bruno, 10),
        ]:
            identity = VoterIdentity(voter_hash=hash_voter_origin(origin, settings.IP_SALT))
            await gate.submit(artist.id, score, identity)

        rows = await LeaderboardService(db_session, order=ORDER_TOTAL).rank()

        assert names(rows) == ["Ana", "Bruno", "Caro"]
        assert (rows[0].vote_count, rows[0].total_score, rows[0].avg_score) == (2, 16, Decimal("8.00"))
        assert (rows[2].vote_count, rows[2].total_score, rows[2].avg_score) == (0, 0, None)

    async def test_rank_is_repeatable(self, db_session) -> None:
        await ArtistRegistry(db_session).create("Ana")
        service = LeaderboardService(db_session)

        first = await service.rank()
        second = await service.rank()

        assert [(r.artist.id, r.total_score) for r in first] == [(r.artist.id, r.total_score) for r in second]
