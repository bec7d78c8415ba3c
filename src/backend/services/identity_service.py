"""
Voter identity resolution.

A voter is identified by a keyed one-way hash of their network origin. Behind
a reverse proxy the first X-Forwarded-For entry is the real client; when no
origin can be determined at all the sentinel 0.0.0.0 is hashed instead, so a
request is never rejected just because its origin is unknown.

A long-lived opaque cookie token is issued alongside. It is only a secondary
signal for the optional soft guard and never replaces the origin hash.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import Request, Response

from core.config import Settings
from core.security import generate_secure_token, hash_voter_origin

UNKNOWN_ORIGIN = "0.0.0.0"
MAX_USER_AGENT_LENGTH = 255
MAX_COOKIE_TOKEN_LENGTH = 64


@dataclass(frozen=True)
class VoterIdentity:
    """Derived, non-reversible fingerprint of a voting caller."""

    voter_hash: str
    cookie_token: Optional[str] = None
    user_agent: Optional[str] = None

    @property
    def short_hash(self) -> str:
        """Prefix safe for logs."""
        return self.voter_hash[:8]


class IdentityResolver:
    """Derives VoterIdentity values from inbound requests."""

    def __init__(self, settings: Settings):
        self.salt = settings.IP_SALT
        self.trust_forwarded_for = settings.TRUST_FORWARDED_FOR
        self.cookie_name = settings.VOTER_COOKIE_NAME
        self.cookie_max_age = int(timedelta(days=settings.VOTER_COOKIE_MAX_AGE_DAYS).total_seconds())
        self.cookie_secure = settings.COOKIE_SECURE

    def client_origin(self, request: Request) -> str:
        """Extract the caller's network origin, preferring the proxy header."""
        if self.trust_forwarded_for:
            forwarded_for = request.headers.get("X-Forwarded-For", "")
            first = forwarded_for.split(",")[0].strip()
            if first:
                return first

        if request.client and request.client.host:
            return request.client.host

        return UNKNOWN_ORIGIN

    def voter_token(self, request: Request) -> Optional[str]:
        """The identification cookie sent with the request, if any."""
        token = request.cookies.get(self.cookie_name)
        if not token or len(token) > MAX_COOKIE_TOKEN_LENGTH:
            return None
        return token

    def ensure_voter_cookie(self, request: Request, response: Response) -> str:
        """Return the caller's cookie token, issuing a new one on the response if absent."""
        token = self.voter_token(request)
        if token is None:
            token = generate_secure_token(16)
            response.set_cookie(
                self.cookie_name,
                token,
                max_age=self.cookie_max_age,
                httponly=True,
                samesite="lax",
                secure=self.cookie_secure,
            )
        return token

    def resolve(self, request: Request, cookie_token: Optional[str] = None) -> VoterIdentity:
        """Build the voter identity for a request."""
        origin = self.client_origin(request)
        user_agent = request.headers.get("User-Agent") or None
        return VoterIdentity(
            voter_hash=hash_voter_origin(origin, self.salt),
            cookie_token=cookie_token if cookie_token is not None else self.voter_token(request),
            user_agent=user_agent[:MAX_USER_AGENT_LENGTH] if user_agent else None,
        )
