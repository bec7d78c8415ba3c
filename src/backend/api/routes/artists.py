"""
Artist management endpoints.

Creating artists and inspecting raw votes require the staff capability;
listing artists is public.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_artist_registry, require_staff
from core.exceptions import NotFoundError
from db.session import get_db
from repositories.vote_repository import VoteRepository
from schemas.artist import ArtistCreate, ArtistResponse
from schemas.vote import VoteRecord
from services.artist_service import ArtistRegistry

router = APIRouter()


@router.post("", response_model=ArtistResponse, dependencies=[Depends(require_staff)])
async def create_artist(
    artist_data: ArtistCreate,
    registry: Annotated[ArtistRegistry, Depends(get_artist_registry)],
) -> ArtistResponse:
    """
    Register an artist and return its shareable voting link.

    The staff check runs before the body is validated against ArtistCreate,
    so a non-staff caller gets 403 for any well-formed JSON body. A body that
    is not JSON at all is rejected while the request is decoded, ahead of
    every dependency, and answers 400 InvalidInput.
    """
    artist = await registry.create(artist_data.name)
    return ArtistResponse.model_validate(artist)


@router.get("", response_model=list[ArtistResponse])
async def list_artists(
    registry: Annotated[ArtistRegistry, Depends(get_artist_registry)],
) -> list[ArtistResponse]:
    artists = await registry.list_all()
    return [ArtistResponse.model_validate(artist) for artist in artists]


@router.get(
    "/{artist_id}/votes",
    response_model=list[VoteRecord],
    dependencies=[Depends(require_staff)],
)
async def list_artist_votes(
    artist_id: int,
    registry: Annotated[ArtistRegistry, Depends(get_artist_registry)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[VoteRecord]:
    """
    Debug view of every stored vote for one artist.

    Only an 8-character prefix of each voter hash is returned.
    """
    if await registry.get_by_id(artist_id) is None:
        raise NotFoundError()

    vote_repo = VoteRepository(db)
    return [
        VoteRecord(
            id=vote.id,
            score=vote.score,
            voter=vote.voter_hash[:8],
            created_at=vote.created_at,
        )
        async for vote in vote_repo.iter_for_artist(artist_id)
    ]
