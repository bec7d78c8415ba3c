"""
Artist registry.

Artists get a URL-safe slug built from their name plus a short random
suffix. A slug collision at insert time is retried with a fresh suffix.
"""

import re
import unicodedata
from typing import Callable, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateSlugError, InvalidInputError, SlugUnavailableError
from core.security import generate_slug_suffix
from models.artist import Artist
from repositories.artist_repository import ArtistRepository

logger = structlog.get_logger(__name__)

MAX_NAME_LENGTH = 200
MAX_SLUG_BASE_LENGTH = 60
DEFAULT_SLUG_BASE = "artist"


def slugify(name: str) -> str:
    """Lowercase ASCII token: accents dropped, runs of other characters become '-'."""
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    base = re.sub(r"[^a-z0-9]+", "-", ascii_name.lower()).strip("-")
    return base[:MAX_SLUG_BASE_LENGTH].rstrip("-") or DEFAULT_SLUG_BASE


def make_slug(name: str, suffix: str) -> str:
    return f"{slugify(name)}-{suffix}"


class ArtistRegistry:
    """Create and look up artists."""

    def __init__(
        self,
        db: AsyncSession,
        max_attempts: int = 5,
        suffix_factory: Callable[[], str] = generate_slug_suffix,
    ):
        self.db = db
        self.repo = ArtistRepository(db)
        self.max_attempts = max_attempts
        self.suffix_factory = suffix_factory

    async def create(self, name: Optional[str]) -> Artist:
        """
        Register an artist.

        Raises:
            InvalidInputError: if the name is empty after trimming or too long.
            SlugUnavailableError: if every slug attempt collided.
        """
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Name required")
        if len(name) > MAX_NAME_LENGTH:
            raise InvalidInputError(f"Name must be at most {MAX_NAME_LENGTH} characters")

        for attempt in range(1, self.max_attempts + 1):
            slug = make_slug(name, self.suffix_factory())
            try:
                artist = await self.repo.create(name=name, slug=slug)
            except DuplicateSlugError:
                logger.warning("artist_slug_collision", slug=slug, attempt=attempt)
                continue

            await self.db.commit()
            logger.info("artist_created", artist_id=artist.id, slug=artist.slug)
            return artist

        logger.error("artist_slug_exhausted", name=name, attempts=self.max_attempts)
        raise SlugUnavailableError()

    async def list_all(self) -> list[Artist]:
        return await self.repo.list_all()

    async def get_by_id(self, artist_id: int) -> Optional[Artist]:
        return await self.repo.get_by_id(artist_id)

    async def get_by_slug(self, slug: str) -> Optional[Artist]:
        return await self.repo.get_by_slug(slug)
