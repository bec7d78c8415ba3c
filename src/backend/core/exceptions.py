"""
Domain errors.

Every user-facing failure is a VotingError with a machine-readable ``kind``,
the HTTP status it maps to, and a message safe to show to the caller.
Storage-level constraint violations are separate (ConstraintViolation) and
are translated by the services before they reach the API layer.
"""

import math
from datetime import timedelta

from fastapi import status


class VotingError(Exception):
    """Base class for errors returned to the caller as structured JSON."""

    kind = "Internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An internal server error occurred. Please try again later."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.kind, "message": self.message}


class InvalidInputError(VotingError):
    """Malformed or missing fields."""

    kind = "InvalidInput"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class SlugUnavailableError(InvalidInputError):
    """No free slug was found after the configured number of attempts."""

    default_message = "Could not create artist"


class OutOfRangeError(VotingError):
    kind = "OutOfRange"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Score must be an integer 0-10"


class NotFoundError(VotingError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Artist not found"


class AlreadyVotedError(VotingError):
    kind = "AlreadyVoted"
    status_code = status.HTTP_409_CONFLICT
    default_message = "You have already voted for this artist."


class TooSoonError(VotingError):
    """A vote for this artist was cast inside the revote window."""

    kind = "TooSoon"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, retry_after: timedelta):
        self.retry_after = max(retry_after, timedelta(0))
        minutes = max(1, math.ceil(self.retry_after.total_seconds() / 60))
        unit = "minute" if minutes == 1 else "minutes"
        super().__init__(
            f"You have already voted recently for this artist. Try again in about {minutes} {unit}."
        )

    @property
    def retry_after_seconds(self) -> int:
        return math.ceil(self.retry_after.total_seconds())

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["retry_after_seconds"] = self.retry_after_seconds
        return data


class UnauthorizedError(VotingError):
    kind = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid password"


class ForbiddenError(VotingError):
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Staff access required"


class ConstraintViolation(Exception):
    """A storage-level uniqueness constraint rejected a write."""


class DuplicateVoteError(ConstraintViolation):
    """A vote for this (artist, voter) pair already exists."""


class DuplicateSlugError(ConstraintViolation):
    """An artist with this slug already exists."""
