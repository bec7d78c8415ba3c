"""Database module."""

from db.session import close_db, create_engine, create_session_maker, get_db, init_db

__all__ = ["create_engine", "create_session_maker", "get_db", "init_db", "close_db"]
