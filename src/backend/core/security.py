"""Security utilities for staff sessions and voter identity hashing.

Voters are anonymous: the only thing stored about them is a keyed one-way
hash of their network origin. Staff are recognised by a signed, expiring
session token kept in an HTTP-only cookie.
"""

import hashlib
import hmac
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from core.config import Settings

# Token issuer and audience for validation
TOKEN_ISSUER = "openmic-vote-api"
TOKEN_AUDIENCE = "openmic-vote-staff"

STAFF_TOKEN_TYPE = "staff"

SLUG_ALPHABET = string.digits + string.ascii_lowercase


def create_staff_token(settings: Settings, expires_delta: timedelta | None = None) -> str:
    """Create the signed session marker issued after a successful staff login."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.STAFF_SESSION_HOURS))
    to_encode = {
        "sub": "staff",
        "exp": expire,
        "iat": now,
        "type": STAFF_TOKEN_TYPE,
        "iss": TOKEN_ISSUER,
        "aud": TOKEN_AUDIENCE,
        "jti": secrets.token_urlsafe(16),
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, settings: Settings, expected_type: str | None = None) -> dict[str, Any] | None:
    """
    Decode and validate a JWT token.

    Args:
        token: The JWT token to decode
        settings: Settings holding the signing key and algorithm
        expected_type: If provided, validates the token type matches

    Returns:
        The decoded payload or None if invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=TOKEN_ISSUER,
            audience=TOKEN_AUDIENCE,
        )
        if expected_type and payload.get("type") != expected_type:
            return None
        return payload
    except JWTError:
        return None


def verify_staff_password(candidate: str, settings: Settings) -> bool:
    """Constant-time comparison against the configured staff password."""
    if not candidate:
        return False
    return hmac.compare_digest(candidate.encode(), settings.STAFF_PASS.encode())


def hash_voter_origin(origin: str, salt: str) -> str:
    """
    Derive the voter identity hash from a network origin.

    HMAC-SHA256 keyed with the server-held salt: deterministic for the same
    origin, not reversible, and useless for rainbow tables without the salt.

    Returns:
        64-character lowercase hex digest
    """
    return hmac.new(salt.encode(), origin.encode(), hashlib.sha256).hexdigest()


def generate_secure_token(length: int = 16) -> str:
    """Generate a cryptographically secure random token."""
    return secrets.token_urlsafe(length)


def generate_slug_suffix(length: int = 8) -> str:
    """Random lowercase alphanumeric suffix used to keep artist slugs unique."""
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(length))
