"""
Artist repository for database operations.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateSlugError
from models.artist import Artist
from repositories._errors import is_unique_violation


class ArtistRepository:
    """Repository for artist database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, artist_id: int) -> Optional[Artist]:
        result = await self.db.execute(select(Artist).where(Artist.id == artist_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Artist]:
        result = await self.db.execute(select(Artist).where(Artist.slug == slug))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Artist]:
        """All artists, newest first."""
        result = await self.db.execute(
            select(Artist).order_by(Artist.created_at.desc(), Artist.id.desc())
        )
        return list(result.scalars().all())

    async def create(self, name: str, slug: str) -> Artist:
        """
        Insert an artist.

        Raises:
            DuplicateSlugError: if the slug is already taken. The session is
                rolled back so the caller can retry with a fresh slug.
        """
        artist = Artist(name=name, slug=slug)
        self.db.add(artist)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            if is_unique_violation(exc):
                raise DuplicateSlugError(slug) from exc
            raise
        return artist
