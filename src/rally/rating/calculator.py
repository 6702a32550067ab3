"""
Core RMR rating calculation.

Implements an Elo-style expected score with a deviation-driven volatility
in place of a fixed K-factor, scaled by the match performance multiplier:

  Expected score: E_A = 1 / (1 + 10^((R_B - R_A) / 400))
  Volatility:     vol = 0.08 * RD + 12
  Winner change:  +vol_winner * M_total * (1 - E_winner)
  Loser change:   -vol_loser  * (2 - M_total) * (1 - E_winner)

Winner and loser each use their own volatility and multiplier, so the
exchange is not zero-sum: an uncertain player (high RD) moves further than
a settled one, and a dominant win costs the loser less than it gains the
winner when M_total > 1.
"""

import math
from dataclasses import dataclass

from rally.rating.constants import LOGISTIC_SCALE, VOLATILITY_DEFAULTS
from rally.rating.models import SIDE_A, SIDE_B


def expected_score(
    rating_self: float,
    rating_other: float,
    scale: float = LOGISTIC_SCALE,
) -> float:
    """
    Expected score (win probability) of `self` against `other`.

    Total for any finite pair. Extreme gaps saturate to 0.0 / 1.0 instead
    of overflowing.

    Examples:
        expected_score(1000, 1000)  # -> 0.5
        expected_score(1400, 1000)  # -> ~0.909
    """
    try:
        return 1.0 / (1.0 + 10.0 ** ((rating_other - rating_self) / scale))
    except OverflowError:
        return 0.0 if rating_other > rating_self else 1.0


def calculate_volatility(
    deviation: float,
    multiplier: float = VOLATILITY_DEFAULTS["volatility_multiplier"],
    base: float = VOLATILITY_DEFAULTS["volatility_base"],
) -> float:
    """
    Rating-change scale for a player with the given deviation.

    Affine in RD: 14.4 at RD 30, 40.0 at RD 350.
    """
    return multiplier * deviation + base


def round_rating(value: float) -> float:
    """Round to the nearest whole rating point, halves toward +inf."""
    return float(math.floor(value + 0.5))


@dataclass(frozen=True)
class RatingChange:
    """Unrounded rating deltas for both sides of one match."""
    delta_a: float
    delta_b: float
    expected_a: float
    volatility_a: float
    volatility_b: float


def calculate_rating_changes(
    rating_a: float,
    rating_b: float,
    deviation_a: float,
    deviation_b: float,
    winner: str,
    m_total: float,
    scale: float = LOGISTIC_SCALE,
    volatility_multiplier: float = VOLATILITY_DEFAULTS["volatility_multiplier"],
    volatility_base: float = VOLATILITY_DEFAULTS["volatility_base"],
) -> RatingChange:
    """
    Apply the performance multiplier asymmetrically to winner and loser.

    Args:
        rating_a, rating_b: Ratings before the match
        deviation_a, deviation_b: Deviations before the match
        winner: 'A' or 'B'
        m_total: Winner's combined performance multiplier. The loser gets
                 the complement 2 - m_total, which is not clamped.

    Returns:
        RatingChange with the raw deltas (round when applying)

    Raises:
        ValueError: If winner is not 'A' or 'B'
    """
    if winner not in (SIDE_A, SIDE_B):
        raise ValueError(f"winner must be 'A' or 'B', got '{winner}'")

    exp_a = expected_score(rating_a, rating_b, scale)
    vol_a = calculate_volatility(deviation_a, volatility_multiplier, volatility_base)
    vol_b = calculate_volatility(deviation_b, volatility_multiplier, volatility_base)

    m_winner = m_total
    m_loser = 2.0 - m_total

    # Each side uses its own volatility; the surprise term is shared
    if winner == SIDE_A:
        surprise = 1.0 - exp_a
        delta_a = vol_a * m_winner * surprise
        delta_b = -vol_b * m_loser * surprise
    else:
        surprise = exp_a
        delta_a = -vol_a * m_loser * surprise
        delta_b = vol_b * m_winner * surprise

    return RatingChange(
        delta_a=delta_a,
        delta_b=delta_b,
        expected_a=exp_a,
        volatility_a=vol_a,
        volatility_b=vol_b,
    )
