"""
SQLAlchemy ORM models for Rally.

Only the rating state lives here; accounts, profiles and match media are
owned by other services and referenced by an opaque player key.

Tables:
- player_rating_states: Current rating and deviation per player
- rating_history: One row per player per rated match (audit trail)
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Float, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from rally.rating.constants import DEFAULT_RATING, DEVIATION_DEFAULTS
from rally.rating.models import RatingState


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class PlayerRatingState(Base):
    """Current RMR state per player."""

    __tablename__ = "player_rating_states"

    id: Mapped[int] = mapped_column(primary_key=True)
    player_key: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=float(DEFAULT_RATING))
    deviation: Mapped[float] = mapped_column(
        Float, nullable=False, default=DEVIATION_DEFAULTS["max_deviation"]
    )
    match_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Epoch ms of the last rated match, 0 if none yet
    last_match_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_rating_state(self) -> RatingState:
        return RatingState(
            rating=self.rating,
            deviation=self.deviation,
            last_match_timestamp=self.last_match_at_ms,
        )

    def __repr__(self) -> str:
        return (
            f"<PlayerRatingState(player_key='{self.player_key}', "
            f"rating={self.rating}, deviation={self.deviation})>"
        )


class RatingHistory(Base):
    """Rating movement for one player in one rated match."""

    __tablename__ = "rating_history"

    id: Mapped[int] = mapped_column(primary_key=True)
    player_key: Mapped[str] = mapped_column(String(64), nullable=False)
    opponent_key: Mapped[str] = mapped_column(String(64), nullable=False)
    won: Mapped[bool] = mapped_column(Boolean, nullable=False)
    rating_before: Mapped[float] = mapped_column(Float, nullable=False)
    rating_after: Mapped[float] = mapped_column(Float, nullable=False)
    deviation_before: Mapped[float] = mapped_column(Float, nullable=False)
    deviation_after: Mapped[float] = mapped_column(Float, nullable=False)
    m_total: Mapped[float] = mapped_column(Float, nullable=False)
    was_forcibly_terminated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    played_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(default=datetime.utcnow)

    __table_args__ = (
        Index("idx_rating_history_player_played", "player_key", "played_at_ms"),
    )

    @property
    def rating_change(self) -> float:
        return self.rating_after - self.rating_before

    def __repr__(self) -> str:
        return (
            f"<RatingHistory(player_key='{self.player_key}', "
            f"{self.rating_before:.0f} -> {self.rating_after:.0f})>"
        )
