"""
Performance multiplier for the match winner.

Plain Elo moves ratings by the same amount for a 21-19 21-19 squeaker and
a 21-5 21-5 rout. RMR scales the winner's gain (and, through the
complement 2 - M_total, the loser's loss) by how the match was won:

    M_set        1.25 for a 2-0 sweep, else 1.0
    M_pointDiff  1 + 0.5 * tanh((|points_A - points_B| - 5) / 10)
    M_flow       1 + sum(weight_i * flow_i)
    Integrity    0.7 if the match was ended early, else 1.0

    M_total = (0.3 * M_set + 0.2 * M_pointDiff + 0.5 * M_flow) * Integrity

For any well-formed match M_total stays within [0.7, 1.575]:
M_pointDiff is inside (0.5, 1.5) and M_flow inside [1.2, 1.8].
"""

import math

from rally.rating.constants import MULTIPLIER_DEFAULTS
from rally.rating.models import FlowProfile, MatchRecord, MultiplierBreakdown
from rally.rating.params import DEFAULT_PARAMS, RatingParams

# Operating range of M_total with the default constants
M_TOTAL_FLOOR = 0.7
M_TOTAL_CEILING = 1.575


def set_multiplier(
    set_wins_a: int,
    set_wins_b: int,
    sweep_sets: int = MULTIPLIER_DEFAULTS["sweep_sets"],
    sweep_multiplier: float = MULTIPLIER_DEFAULTS["sweep_multiplier"],
) -> float:
    """Bonus for a clean sweep by either side."""
    if (set_wins_a, set_wins_b) in ((sweep_sets, 0), (0, sweep_sets)):
        return sweep_multiplier
    return 1.0


def point_diff_multiplier(
    total_points_a: int,
    total_points_b: int,
    amplitude: float = MULTIPLIER_DEFAULTS["point_diff_amplitude"],
    pivot: float = MULTIPLIER_DEFAULTS["point_diff_pivot"],
    spread: float = MULTIPLIER_DEFAULTS["point_diff_spread"],
) -> float:
    """
    Smooth dominance multiplier from the total point differential.

    Examples:
        point_diff_multiplier(40, 40)  # -> ~0.77 (dead even)
        point_diff_multiplier(45, 40)  # -> 1.0   (pivot)
        point_diff_multiplier(42, 10)  # -> ~1.49 (rout)
    """
    diff = abs(total_points_a - total_points_b)
    return 1.0 + amplitude * math.tanh((diff - pivot) / spread)


def flow_multiplier(flow: FlowProfile, params: RatingParams = DEFAULT_PARAMS) -> float:
    """1 + weighted sum of the flow profile."""
    weighted = sum(
        weight * getattr(flow, name) for name, weight in params.flow_weights.items()
    )
    return 1.0 + weighted


def integrity_factor(
    was_forcibly_terminated: bool,
    penalty: float = MULTIPLIER_DEFAULTS["forced_termination_integrity"],
) -> float:
    """Penalty applied when the match did not finish normally."""
    return penalty if was_forcibly_terminated else 1.0


def aggregate_multipliers(
    record: MatchRecord,
    flow: FlowProfile,
    params: RatingParams = DEFAULT_PARAMS,
) -> MultiplierBreakdown:
    """
    Combine set outcome, point differential and flow into M_total.

    Args:
        record: The match being rated
        flow: Winner's flow profile for the same match
        params: Blend weights and multiplier constants

    Returns:
        MultiplierBreakdown with every intermediate value
    """
    m_set = set_multiplier(
        record.set_wins_a,
        record.set_wins_b,
        sweep_sets=params.sweep_sets,
        sweep_multiplier=params.sweep_multiplier,
    )
    m_point_diff = point_diff_multiplier(
        record.total_points_a,
        record.total_points_b,
        amplitude=params.point_diff_amplitude,
        pivot=params.point_diff_pivot,
        spread=params.point_diff_spread,
    )
    m_flow = flow_multiplier(flow, params)
    integrity = integrity_factor(
        record.was_forcibly_terminated,
        penalty=params.forced_termination_integrity,
    )

    blended = (
        params.blend_set * m_set
        + params.blend_point_diff * m_point_diff
        + params.blend_flow * m_flow
    )

    return MultiplierBreakdown(
        m_set=m_set,
        m_point_diff=m_point_diff,
        m_flow=m_flow,
        m_total=blended * integrity,
        integrity=integrity,
    )
