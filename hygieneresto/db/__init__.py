"""Database package for HygieneResto."""

from .session import get_db, get_session, sessionmanager

__all__ = ["get_db", "get_session", "sessionmanager"]
