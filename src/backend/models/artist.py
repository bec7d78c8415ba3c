"""
Artist model.

Artists are created by staff and never updated or deleted afterwards.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class Artist(Base):
    """A performer that can receive votes."""

    __tablename__ = "artists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200))

    # URL-safe, globally unique; normalized name plus a random suffix
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    @property
    def link(self) -> str:
        return f"/a/{self.slug}"

    def __repr__(self) -> str:
        return f"<Artist {self.slug}>"
