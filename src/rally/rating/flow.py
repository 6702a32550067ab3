"""
Match flow analysis.

Reads the point log and scores the match winner on six play-style
dimensions. Most are the winner's point-win rate inside a slice of the log:

- endurance: long rallies (>= 30s)
- clutch:    deuce points (both sides >= 20)
- tempo:     short rallies (< 30s)
- focus:     last-set win rate minus first-set win rate, shifted by 0.5
- comeback, consistency: fixed at 0.5 until detectors exist

A slice with no points carries no signal and scores a neutral 0.5.
Focus is the exception: an empty set counts as a 0% win rate, and the
result is floored at 0 but not capped, so it can reach 1.5.
"""

from typing import Callable, Iterable, Sequence

from rally.rating.constants import (
    COMEBACK_PLACEHOLDER,
    CONSISTENCY_PLACEHOLDER,
    FLOW_DEFAULTS,
    NEUTRAL_FLOW,
)
from rally.rating.models import SIDE_A, SIDE_B, FlowProfile, PointEvent
from rally.rating.params import DEFAULT_PARAMS, RatingParams


def determine_winner(set_wins_a: int, set_wins_b: int) -> str:
    """
    Side with more set wins. Ties resolve to 'B'.

    A tie only happens when a match is ended early with equal sets; callers
    that care should check MatchRecord.is_tied first.
    """
    return SIDE_A if set_wins_a > set_wins_b else SIDE_B


def winner_win_rate(
    points: Sequence[PointEvent],
    winner: str,
    empty_value: float = NEUTRAL_FLOW,
) -> float:
    """
    Fraction of `points` scored by `winner`.

    Returns `empty_value` when there are no points.
    """
    if not points:
        return empty_value
    wins = sum(1 for p in points if p.scorer == winner)
    return wins / len(points)


def _filtered_rate(
    point_log: Iterable[PointEvent],
    winner: str,
    predicate: Callable[[PointEvent], bool],
) -> float:
    return winner_win_rate([p for p in point_log if predicate(p)], winner)


def endurance_score(
    point_log: Sequence[PointEvent],
    winner: str,
    long_rally_seconds: float = FLOW_DEFAULTS["long_rally_seconds"],
) -> float:
    """Winner's win rate on long rallies."""
    return _filtered_rate(
        point_log, winner, lambda p: p.rally_duration_seconds >= long_rally_seconds
    )


def clutch_score(
    point_log: Sequence[PointEvent],
    winner: str,
    threshold: int = FLOW_DEFAULTS["clutch_score"],
) -> float:
    """Winner's win rate on deuce points."""
    return _filtered_rate(
        point_log, winner, lambda p: p.score_a >= threshold and p.score_b >= threshold
    )


def tempo_score(
    point_log: Sequence[PointEvent],
    winner: str,
    long_rally_seconds: float = FLOW_DEFAULTS["long_rally_seconds"],
) -> float:
    """Winner's win rate on short rallies."""
    return _filtered_rate(
        point_log, winner, lambda p: p.rally_duration_seconds < long_rally_seconds
    )


def focus_score(point_log: Sequence[PointEvent], winner: str) -> float:
    """
    Improvement of the winner from the first set to the last set.

    0.5 means no change. A winner who took 0% of set 1 and 100% of the
    final set scores 1.5.
    """
    if not point_log:
        return NEUTRAL_FLOW

    last_set = max(p.set_index for p in point_log)
    first_set_points = [p for p in point_log if p.set_index == 1]
    last_set_points = [p for p in point_log if p.set_index == last_set]

    first_rate = winner_win_rate(first_set_points, winner, empty_value=0.0)
    last_rate = winner_win_rate(last_set_points, winner, empty_value=0.0)
    return max(0.0, last_rate - first_rate + 0.5)


def comeback_score(point_log: Sequence[PointEvent], winner: str) -> float:
    """Not detected yet; always neutral."""
    return COMEBACK_PLACEHOLDER


def consistency_score(point_log: Sequence[PointEvent], winner: str) -> float:
    """Not detected yet; always neutral."""
    return CONSISTENCY_PLACEHOLDER


def analyze_flow(
    point_log: Sequence[PointEvent],
    winner: str,
    params: RatingParams = DEFAULT_PARAMS,
) -> FlowProfile:
    """
    Build the winner's FlowProfile for one match.

    Args:
        point_log: Every point of the match in scoreboard order
        winner: 'A' or 'B'
        params: Thresholds for long rallies and deuce points

    Returns:
        FlowProfile with all six dimensions

    Example:
        profile = analyze_flow(record.point_log, "B")
        profile.clutch  # B's share of points played at 20-20 or beyond
    """
    return FlowProfile(
        clutch=clutch_score(point_log, winner, params.clutch_score),
        comeback=comeback_score(point_log, winner),
        consistency=consistency_score(point_log, winner),
        endurance=endurance_score(point_log, winner, params.long_rally_seconds),
        focus=focus_score(point_log, winner),
        tempo=tempo_score(point_log, winner, params.long_rally_seconds),
    )
