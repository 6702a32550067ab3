"""
Starting rating for new players.

Everyone starts at rating 1000. New players would normally start at the
maximum deviation, but players who show they know the rules on the
onboarding quiz start with less uncertainty:

    3 correct -> RD 200
    2 correct -> RD 250
    1 correct -> RD 300
    0 correct -> RD 350
"""

from rally.rating.constants import DEFAULT_RATING, DEVIATION_DEFAULTS, PLACEMENT_DEVIATIONS
from rally.rating.models import RatingState


def initial_deviation(correct_quiz_count: int) -> float:
    """Starting deviation for a quiz result."""
    return PLACEMENT_DEVIATIONS.get(correct_quiz_count, DEVIATION_DEFAULTS["max_deviation"])


def initial_rating_state(correct_quiz_count: int = 0) -> RatingState:
    """Fresh RatingState for a player who has never played a rated match."""
    return RatingState(
        rating=float(DEFAULT_RATING),
        deviation=initial_deviation(correct_quiz_count),
        last_match_timestamp=0,
    )
