"""
Vote-related Pydantic schemas.

Request bodies are parsed into a strongly typed command before they reach
the admission gate. A JSON number with no fractional part (7.0) counts as an
integer; strings, booleans and 3.5 are rejected here.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, StrictInt


def as_whole_number(value: Any) -> Any:
    """Coerce integral floats such as 7.0 to int; anything else is returned unchanged."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


WholeNumber = Annotated[StrictInt, BeforeValidator(as_whole_number)]


class SubmitVoteCommand(BaseModel):
    """Schema for casting a vote: one integer score for one artist."""

    model_config = ConfigDict(extra="ignore")

    artist_id: WholeNumber
    score: WholeNumber


class VoteResponse(BaseModel):
    """Response after a vote was accepted."""

    ok: bool = True


class VoteRecord(BaseModel):
    """
    Staff debug view of a stored vote.

    PRIVACY NOTE: only a short prefix of the voter hash is exposed.
    """

    id: int
    score: int
    voter: str
    created_at: datetime
