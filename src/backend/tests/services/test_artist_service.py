"""
Tests for artist registration and slug generation.
"""

import pytest

from core.exceptions import InvalidInputError, SlugUnavailableError
from services.artist_service import ArtistRegistry, make_slug, slugify


@pytest.mark.unit
class TestSlugify:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Ana", "ana"),
            ("The Night Owls", "the-night-owls"),
            ("  DJ  Ñandú!! ", "dj-nandu"),
            ("Beyoncé & Jay-Z", "beyonce-jay-z"),
            ("!!!", "artist"),
            ("東京", "artist"),
        ],
    )
    def test_slugify(self, name, expected) -> None:
        assert slugify(name) == expected

    def test_long_names_are_truncated(self) -> None:
        slug = slugify("a" * 300)
        assert slug == "a" * 60

    def test_make_slug_appends_suffix(self) -> None:
        assert make_slug("Ana Lima", "x1y2z3w4") == "ana-lima-x1y2z3w4"


@pytest.mark.integration
class TestArtistRegistry:
    """Test artist creation against the database."""

    async def test_create_artist(self, db_session) -> None:
        artist = await ArtistRegistry(db_session).create("  Ana Lima  ")

        assert artist.id is not None
        assert artist.name == "Ana Lima"
        assert artist.slug.startswith("ana-lima-")
        assert len(artist.slug) == len("ana-lima-") + 8
        assert artist.link == f"/a/{artist.slug}"

    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_empty_name_rejected(self, db_session, name, count_artists) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            await ArtistRegistry(db_session).create(name)

        assert exc_info.value.message == "Name required"
        assert await count_artists() == 0

    async def test_overlong_name_rejected(self, db_session) -> None:
        with pytest.raises(InvalidInputError):
            await ArtistRegistry(db_session).create("x" * 201)

    async def test_same_name_gets_distinct_slugs(self, db_session) -> None:
        registry = ArtistRegistry(db_session)

        first = await registry.create("Ana")
        second = await registry.create("Ana")

        assert first.id != second.id
        assert first.slug != second.slug

    async def test_slug_collision_is_retried(self, db_session, count_artists) -> None:
        suffixes = iter(["aaaaaaaa", "aaaaaaaa", "bbbbbbbb"])
        registry = ArtistRegistry(db_session, suffix_factory=lambda: next(suffixes))

        first = await registry.create("Ana")
        first_slug = first.slug
        second = await registry.create("Ana")

        assert first_slug == "ana-aaaaaaaa"
        assert second.slug == "ana-bbbbbbbb"
        assert await count_artists() == 2

    async def test_slug_attempts_exhausted(self, db_session, count_artists) -> None:
        registry = ArtistRegistry(db_session, max_attempts=3, suffix_factory=lambda: "aaaaaaaa")
        await registry.create("Ana")

        with pytest.raises(SlugUnavailableError) as exc_info:
            await registry.create("Ana")

        assert exc_info.value.kind == "InvalidInput"
        assert await count_artists() == 1

    async def test_lookup_by_slug_and_id(self, db_session) -> None:
        registry = ArtistRegistry(db_session)
        artist = await registry.create("Bruno")

        assert (await registry.get_by_slug(artist.slug)).id == artist.id
        assert (await registry.get_by_id(artist.id)).slug == artist.slug
        assert await registry.get_by_slug("missing") is None

    async def test_list_newest_first(self, db_session) -> None:
        registry = ArtistRegistry(db_session)
        for name in ["Ana", "Bruno", "Caro"]:
            await registry.create(name)

        assert [a.name for a in await registry.list_all()] == ["Caro", "Bruno", "Ana"]
