"""
Rating deviation (RD) updates.

RD measures how unsure we are of a player's rating. It moves two ways:

1. Post-match shrink: every scored match makes us more confident.
   flat:               RD' = max(RD * 0.95, 30)
   opponent_weighted:  RD' = max(round(RD * (1 - rate)), 30)
                       rate = 0.10 - 0.08 * min(opponent_RD / 350, 1)
   Beating or losing to a settled opponent (low RD) tells us more than
   playing another newcomer, so the weighted mode shrinks RD faster then.

2. Idle decay: time away makes us less confident again (Glicko style).
   RD' = min(sqrt(RD^2 + c^2 * t), 350)
   Where t = days idle / 30.44 (months) and c = 30.

   Applied once at session start, before a new match can be scored.
   Never lowers RD; at zero elapsed time it is the identity.
"""

import math

from rally.rating.constants import DEVIATION_DEFAULTS, MS_PER_DAY


def shrink_deviation(
    deviation: float,
    shrink_rate: float | None = None,
    min_deviation: float | None = None,
) -> float:
    """
    Flat post-match shrink, floored at the minimum deviation.

    Examples:
        shrink_deviation(300.0)  # -> 285.0
        shrink_deviation(31.0)   # -> 30.0 (floor)
    """
    if shrink_rate is None:
        shrink_rate = DEVIATION_DEFAULTS["shrink_rate"]
    if min_deviation is None:
        min_deviation = DEVIATION_DEFAULTS["min_deviation"]

    return max(deviation * (1.0 - shrink_rate), min_deviation)


def shrink_deviation_against(
    deviation: float,
    opponent_deviation: float,
    max_rate: float | None = None,
    span: float | None = None,
    min_deviation: float | None = None,
    max_deviation: float | None = None,
) -> float:
    """
    Post-match shrink weighted by how settled the opponent is.

    Shrinks by 10% against an opponent at RD 0 and by 2% against one at
    the maximum RD. The result is rounded to a whole RD point.
    """
    if max_rate is None:
        max_rate = DEVIATION_DEFAULTS["weighted_shrink_max_rate"]
    if span is None:
        span = DEVIATION_DEFAULTS["weighted_shrink_span"]
    if min_deviation is None:
        min_deviation = DEVIATION_DEFAULTS["min_deviation"]
    if max_deviation is None:
        max_deviation = DEVIATION_DEFAULTS["max_deviation"]

    uncertainty_ratio = min(max(opponent_deviation / max_deviation, 0.0), 1.0)
    reduction_rate = max_rate - span * uncertainty_ratio

    return max(float(math.floor(deviation - deviation * reduction_rate + 0.5)), min_deviation)


def decay_deviation_for_idle_time(
    current_deviation: float,
    last_match_epoch_ms: int,
    now_epoch_ms: int,
    decay_constant: float | None = None,
    period_days: float | None = None,
    max_deviation: float | None = None,
) -> float:
    """
    Grow a player's deviation for the time since their last match.

    Args:
        current_deviation: Stored deviation
        last_match_epoch_ms: When the player last finished a match.
                             0 or negative means they never have.
        now_epoch_ms: Session start time
        decay_constant: c in sqrt(RD^2 + c^2 * t). Default from DEVIATION_DEFAULTS.
        period_days: Length of one period t in days. Default from DEVIATION_DEFAULTS.
        max_deviation: Cap. Default from DEVIATION_DEFAULTS.

    Returns:
        New deviation, never below current_deviation. Callers persist it
        only if it is strictly greater than the stored value.

    Examples:
        # Same instant - no change
        decay_deviation_for_idle_time(100.0, t0, t0)  # -> 100.0

        # One month (30.44 days) idle
        decay_deviation_for_idle_time(40.0, t0, t0 + 30.44 * MS_PER_DAY)  # -> 50.0
    """
    if decay_constant is None:
        decay_constant = DEVIATION_DEFAULTS["idle_decay_constant"]
    if period_days is None:
        period_days = DEVIATION_DEFAULTS["idle_decay_period_days"]
    if max_deviation is None:
        max_deviation = DEVIATION_DEFAULTS["max_deviation"]

    if last_match_epoch_ms <= 0 or now_epoch_ms <= last_match_epoch_ms:
        return current_deviation

    # Already at or beyond the cap: pass through, never pull it down
    if current_deviation >= max_deviation:
        return current_deviation

    periods = (now_epoch_ms - last_match_epoch_ms) / (MS_PER_DAY * period_days)
    decayed = math.sqrt(current_deviation ** 2 + decay_constant ** 2 * periods)

    return max(current_deviation, min(decayed, max_deviation))
