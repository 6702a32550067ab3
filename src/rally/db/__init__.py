"""
Database module for Rally.

Provides SQLAlchemy ORM models for rating state and session management.

Usage:
    from rally.db import get_session, PlayerRatingState

    with get_session() as session:
        states = session.query(PlayerRatingState).all()
"""

from rally.db.models import Base, PlayerRatingState, RatingHistory
from rally.db.session import SessionLocal, get_engine, get_session

__all__ = [
    # Base
    "Base",
    # Models
    "PlayerRatingState",
    "RatingHistory",
    # Session
    "get_session",
    "get_engine",
    "SessionLocal",
]
