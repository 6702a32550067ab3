"""
RMR engine - rates one finished match end to end.

Pipeline for a MatchRecord:
1. Decide the winner from set wins
2. Analyse the point log into the winner's FlowProfile
3. Aggregate set, point-differential and flow multipliers into M_total
4. Apply M_total asymmetrically to both ratings (calculator)
5. Shrink both deviations

The engine is pure: it holds only its (immutable) parameters, does no I/O
and never touches persisted state. The same record always produces the
same evaluation, so it is safe to call from any number of threads.
"""

import logging

from rally.rating.calculator import (
    calculate_rating_changes,
    calculate_volatility,
    expected_score,
    round_rating,
)
from rally.rating.deviation import (
    decay_deviation_for_idle_time,
    shrink_deviation,
    shrink_deviation_against,
)
from rally.rating.flow import analyze_flow, determine_winner
from rally.rating.margin import aggregate_multipliers
from rally.rating.models import MatchEvaluation, MatchRecord, RatingState
from rally.rating.params import DEFAULT_PARAMS, RatingParams
from rally.rating.tiers import lookup_tier

logger = logging.getLogger(__name__)


class RatingEngine:
    """
    Stateless RMR calculator bound to one parameter set.

    Usage:
        engine = RatingEngine()
        result = engine.evaluate(record)
        print(f"A: {result.rating_a_before} -> {result.new_rating_a}")
        print(f"M_total: {result.multipliers.m_total:.3f}")

        # At session start, before the player's next match
        rd = engine.decay_deviation(state.deviation, state.last_match_timestamp, now_ms)
    """

    def __init__(self, params: RatingParams | None = None):
        self.params = params or DEFAULT_PARAMS

    def evaluate(self, record: MatchRecord) -> MatchEvaluation:
        """
        Rate a finished match.

        Args:
            record: The match as logged by the scoreboard

        Returns:
            MatchEvaluation with new ratings, deviations, the flow profile
            and every multiplier

        Raises:
            ValueError: If the point log is empty (nothing to rate)
        """
        if not record.point_log:
            raise ValueError("Cannot rate a match with an empty point log")

        params = self.params
        winner = determine_winner(record.set_wins_a, record.set_wins_b)
        flow = analyze_flow(record.point_log, winner, params)
        multipliers = aggregate_multipliers(record, flow, params)

        a, b = record.side_a, record.side_b

        if record.is_tied and params.tie_policy == "no_change":
            logger.warning(
                "Tied set wins (%d-%d) for %s vs %s; ratings left unchanged",
                record.set_wins_a,
                record.set_wins_b,
                a.display_name or "A",
                b.display_name or "B",
            )
            return MatchEvaluation(
                rating_a_before=a.rating,
                rating_b_before=b.rating,
                new_rating_a=a.rating,
                new_rating_b=b.rating,
                deviation_a_before=a.deviation,
                deviation_b_before=b.deviation,
                new_deviation_a=a.deviation,
                new_deviation_b=b.deviation,
                expected_a=expected_score(a.rating, b.rating, params.logistic_scale),
                volatility_a=calculate_volatility(
                    a.deviation, params.volatility_multiplier, params.volatility_base
                ),
                volatility_b=calculate_volatility(
                    b.deviation, params.volatility_multiplier, params.volatility_base
                ),
                winner=None,
                flow_profile=flow,
                multipliers=multipliers,
            )

        change = calculate_rating_changes(
            rating_a=a.rating,
            rating_b=b.rating,
            deviation_a=a.deviation,
            deviation_b=b.deviation,
            winner=winner,
            m_total=multipliers.m_total,
            scale=params.logistic_scale,
            volatility_multiplier=params.volatility_multiplier,
            volatility_base=params.volatility_base,
        )

        new_deviation_a, new_deviation_b = self.shrink_deviations(a.deviation, b.deviation)

        result = MatchEvaluation(
            rating_a_before=a.rating,
            rating_b_before=b.rating,
            new_rating_a=round_rating(a.rating + change.delta_a),
            new_rating_b=round_rating(b.rating + change.delta_b),
            deviation_a_before=a.deviation,
            deviation_b_before=b.deviation,
            new_deviation_a=new_deviation_a,
            new_deviation_b=new_deviation_b,
            expected_a=change.expected_a,
            volatility_a=change.volatility_a,
            volatility_b=change.volatility_b,
            winner=winner,
            flow_profile=flow,
            multipliers=multipliers,
        )

        logger.debug(
            "Rated match %s vs %s: winner=%s m_total=%.4f A %+.1f B %+.1f",
            a.display_name or "A",
            b.display_name or "B",
            winner,
            multipliers.m_total,
            change.delta_a,
            change.delta_b,
        )
        return result

    def shrink_deviations(self, deviation_a: float, deviation_b: float) -> tuple[float, float]:
        """Post-match deviations for both sides, per the configured mode."""
        params = self.params
        if params.deviation_shrink_mode == "opponent_weighted":
            return (
                shrink_deviation_against(
                    deviation_a,
                    deviation_b,
                    max_rate=params.weighted_shrink_max_rate,
                    span=params.weighted_shrink_span,
                    min_deviation=params.min_deviation,
                    max_deviation=params.max_deviation,
                ),
                shrink_deviation_against(
                    deviation_b,
                    deviation_a,
                    max_rate=params.weighted_shrink_max_rate,
                    span=params.weighted_shrink_span,
                    min_deviation=params.min_deviation,
                    max_deviation=params.max_deviation,
                ),
            )

        return (
            shrink_deviation(deviation_a, params.shrink_rate, params.min_deviation),
            shrink_deviation(deviation_b, params.shrink_rate, params.min_deviation),
        )

    def decay_deviation(
        self,
        current_deviation: float,
        last_match_epoch_ms: int,
        now_epoch_ms: int,
    ) -> float:
        """Idle-time deviation growth with this engine's parameters."""
        return decay_deviation_for_idle_time(
            current_deviation,
            last_match_epoch_ms,
            now_epoch_ms,
            decay_constant=self.params.idle_decay_constant,
            period_days=self.params.idle_decay_period_days,
            max_deviation=self.params.max_deviation,
        )

    def lookup_tier(self, rating: float) -> str:
        return lookup_tier(rating)


def apply_evaluation(
    state_a: RatingState,
    state_b: RatingState,
    evaluation: MatchEvaluation,
    played_at_ms: int,
) -> tuple[RatingState, RatingState]:
    """
    New RatingState for both players after an evaluated match.

    Unrated matches (tied sets under the no-change policy) return the
    input states untouched, including their last-match timestamps.
    """
    if not evaluation.was_rated:
        return state_a, state_b

    return (
        RatingState(
            rating=evaluation.new_rating_a,
            deviation=evaluation.new_deviation_a,
            last_match_timestamp=played_at_ms,
        ),
        RatingState(
            rating=evaluation.new_rating_b,
            deviation=evaluation.new_deviation_b,
            last_match_timestamp=played_at_ms,
        ),
    )


def evaluate_match(record: MatchRecord, params: RatingParams | None = None) -> MatchEvaluation:
    """
    Rate one match with the given (or default) parameters.

    Convenience wrapper around RatingEngine for one-off calls.
    """
    return RatingEngine(params).evaluate(record)
