"""
Value types for the RMR engine.

Everything here is immutable. A MatchRecord is built once by the scoreboard
when a match ends, handed to the engine once, and never changed. The engine
answers with a MatchEvaluation; RatingState snapshots go in and new
RatingState objects come out.
"""

from dataclasses import asdict, dataclass
from typing import Optional

SIDE_A = "A"
SIDE_B = "B"
SIDES = (SIDE_A, SIDE_B)


def other_side(side: str) -> str:
    """Return the opposing side label."""
    return SIDE_B if side == SIDE_A else SIDE_A


@dataclass(frozen=True)
class PointEvent:
    """
    One scored point, as logged by the live scoreboard.

    scoreA/scoreB are the set score *after* this point. Ordering of the
    log is guaranteed by the scoreboard and is not re-checked here.
    """
    scorer: str  # 'A' or 'B'
    score_a: int
    score_b: int
    set_index: int
    timestamp: int  # epoch ms
    rally_duration_seconds: float

    def __post_init__(self):
        if self.scorer not in SIDES:
            raise ValueError(f"scorer must be 'A' or 'B', got '{self.scorer}'")
        if self.score_a < 0 or self.score_b < 0:
            raise ValueError(f"scores must be non-negative, got {self.score_a}-{self.score_b}")
        if self.set_index < 1:
            raise ValueError(f"set_index starts at 1, got {self.set_index}")
        if self.rally_duration_seconds < 0:
            raise ValueError(
                f"rally_duration_seconds must be non-negative, got {self.rally_duration_seconds}"
            )


@dataclass(frozen=True)
class PlayerSnapshot:
    """A player's rating and deviation at the moment the match started."""
    rating: float
    deviation: float
    display_name: str = ""


@dataclass(frozen=True)
class MatchRecord:
    """A completed (or forcibly ended) match, ready to be rated."""
    side_a: PlayerSnapshot
    side_b: PlayerSnapshot
    set_wins_a: int
    set_wins_b: int
    point_log: tuple[PointEvent, ...]
    was_forcibly_terminated: bool = False

    def __post_init__(self):
        # Accept any sequence but store a tuple so the record stays immutable
        if not isinstance(self.point_log, tuple):
            object.__setattr__(self, "point_log", tuple(self.point_log))

    @property
    def total_points_a(self) -> int:
        return sum(1 for p in self.point_log if p.scorer == SIDE_A)

    @property
    def total_points_b(self) -> int:
        return sum(1 for p in self.point_log if p.scorer == SIDE_B)

    @property
    def is_tied(self) -> bool:
        return self.set_wins_a == self.set_wins_b


@dataclass(frozen=True)
class RatingState:
    """
    Persisted rating state for one player.

    Owned by the profile store; the engine only reads snapshots of it
    and returns new instances.
    """
    rating: float
    deviation: float
    last_match_timestamp: int = 0  # epoch ms, 0 = never played

    def snapshot(self, display_name: str = "") -> PlayerSnapshot:
        return PlayerSnapshot(
            rating=self.rating,
            deviation=self.deviation,
            display_name=display_name,
        )


@dataclass(frozen=True)
class FlowProfile:
    """
    Six-dimensional play-style fingerprint for the winner of one match.

    Every value is in [0, 1] except focus, which can reach 1.5.
    """
    clutch: float
    comeback: float
    consistency: float
    endurance: float
    focus: float
    tempo: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class MultiplierBreakdown:
    """Every factor that went into the winner's performance multiplier."""
    m_set: float
    m_point_diff: float
    m_flow: float
    m_total: float
    integrity: float

    @property
    def m_loser(self) -> float:
        """Complement applied to the loser (not clamped)."""
        return 2.0 - self.m_total

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class MatchEvaluation:
    """
    Result of rating one match.

    Contains the new ratings and deviations for both sides plus everything
    needed to explain how they were reached.
    """
    rating_a_before: float
    rating_b_before: float
    new_rating_a: float
    new_rating_b: float
    deviation_a_before: float
    deviation_b_before: float
    new_deviation_a: float
    new_deviation_b: float
    expected_a: float
    volatility_a: float
    volatility_b: float
    winner: Optional[str]  # None when the match was not rated (tied sets)
    flow_profile: FlowProfile
    multipliers: MultiplierBreakdown

    @property
    def rating_change_a(self) -> float:
        return self.new_rating_a - self.rating_a_before

    @property
    def rating_change_b(self) -> float:
        return self.new_rating_b - self.rating_b_before

    @property
    def was_rated(self) -> bool:
        return self.winner is not None

    @property
    def was_upset(self) -> bool:
        """Whether the lower-rated side won."""
        if self.winner == SIDE_A:
            return self.rating_a_before < self.rating_b_before
        if self.winner == SIDE_B:
            return self.rating_b_before < self.rating_a_before
        return False

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["rating_change_a"] = self.rating_change_a
        payload["rating_change_b"] = self.rating_change_b
        return payload

    def __repr__(self) -> str:
        return (
            f"<MatchEvaluation(A: {self.rating_a_before:.0f} -> {self.new_rating_a:.0f}, "
            f"B: {self.rating_b_before:.0f} -> {self.new_rating_b:.0f}, "
            f"winner={self.winner}, m_total={self.multipliers.m_total:.4f})>"
        )
