"""
Public entry points: the artist list and the per-artist voting page.

Both are served as JSON; the voting page also hands out the voter
identification cookie so the vote request that follows carries it.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from api.deps import get_artist_registry, get_identity_resolver
from core.exceptions import NotFoundError
from schemas.artist import ArtistDetail, ArtistList, ArtistResponse
from services.artist_service import ArtistRegistry
from services.identity_service import IdentityResolver

router = APIRouter()


@router.get("/", response_model=ArtistList)
async def home(
    registry: Annotated[ArtistRegistry, Depends(get_artist_registry)],
) -> ArtistList:
    """Every artist with a link to its voting page."""
    artists = await registry.list_all()
    return ArtistList(artists=[ArtistResponse.model_validate(artist) for artist in artists])


@router.get("/a/{slug}", response_model=ArtistDetail)
async def artist_page(
    slug: str,
    request: Request,
    response: Response,
    registry: Annotated[ArtistRegistry, Depends(get_artist_registry)],
    resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
) -> ArtistDetail:
    artist = await registry.get_by_slug(slug)
    if artist is None:
        raise NotFoundError()

    resolver.ensure_voter_cookie(request, response)
    return ArtistDetail.model_validate(artist)
