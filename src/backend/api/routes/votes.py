"""
Vote submission endpoint.

Anonymous visitors cast one integer score (0-10) per artist. The caller is
identified only by a keyed hash of their network origin; see
services.identity_service.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from api.deps import get_vote_admission, get_voter_identity
from schemas.vote import SubmitVoteCommand, VoteResponse
from services.identity_service import VoterIdentity
from services.vote_admission import VoteAdmissionService

router = APIRouter()


@router.post("", response_model=VoteResponse)
async def cast_vote(
    command: SubmitVoteCommand,
    identity: Annotated[VoterIdentity, Depends(get_voter_identity)],
    admission: Annotated[VoteAdmissionService, Depends(get_vote_admission)],
) -> VoteResponse:
    """
    Cast a vote for an artist.

    Responses:
    - 200 {ok: true} when the vote is accepted
    - 400 InvalidInput / OutOfRange for a bad score
    - 404 NotFound for an unknown artist
    - 409 AlreadyVoted, or TooSoon with a retry estimate in revote-window mode
    """
    await admission.submit(command.artist_id, command.score, identity)
    return VoteResponse(ok=True)
