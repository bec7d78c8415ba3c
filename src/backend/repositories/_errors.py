"""Helpers for translating driver errors into storage-level exceptions."""

from sqlalchemy.exc import IntegrityError


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the IntegrityError came from a UNIQUE constraint (SQLite or PostgreSQL)."""
    message = str(exc.orig).lower()
    return "unique constraint" in message or "duplicate key" in message
