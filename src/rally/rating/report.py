"""Human-readable RMR analysis report for one rated match."""

import logging

from rally.rating.flow import determine_winner, winner_win_rate
from rally.rating.models import SIDE_A, MatchEvaluation, MatchRecord
from rally.rating.params import DEFAULT_PARAMS, RatingParams

logger = logging.getLogger(__name__)

_RULE = "=" * 53
_THIN = "-" * 53


def build_match_report(
    record: MatchRecord,
    evaluation: MatchEvaluation,
    params: RatingParams = DEFAULT_PARAMS,
) -> str:
    """
    Multi-line breakdown of how a match was rated.

    Recomputes the raw counts behind each flow dimension (long rallies,
    deuce points, set win rates) so the report can be read without the
    point log at hand.
    """
    name_a = record.side_a.display_name or "Side A"
    name_b = record.side_b.display_name or "Side B"
    reference = evaluation.winner or determine_winner(record.set_wins_a, record.set_wins_b)
    points = record.point_log

    long_rallies = [p for p in points if p.rally_duration_seconds >= params.long_rally_seconds]
    clutch_points = [
        p for p in points if p.score_a >= params.clutch_score and p.score_b >= params.clutch_score
    ]
    last_set = max((p.set_index for p in points), default=1)
    first_rate = winner_win_rate([p for p in points if p.set_index == 1], reference, 0.0)
    last_rate = winner_win_rate([p for p in points if p.set_index == last_set], reference, 0.0)

    if evaluation.winner is None:
        winner_line = "Not rated (tied sets)"
    else:
        winner_line = name_a if evaluation.winner == SIDE_A else name_b

    m = evaluation.multipliers
    flow = evaluation.flow_profile

    lines = [
        _RULE,
        " RMR DETAILED ANALYSIS REPORT",
        _RULE,
        f"Match:   {name_a} (A) vs {name_b} (B)",
        f"Winner:  {winner_line}",
        f"Sets:    {record.set_wins_a} : {record.set_wins_b}"
        f"  (points {record.total_points_a} : {record.total_points_b})",
        f"Forced:  {'yes' if record.was_forcibly_terminated else 'no'}",
        _THIN,
        f"Expected score A: {evaluation.expected_a:.4f}",
        f"Volatility:       A {evaluation.volatility_a:.2f} / B {evaluation.volatility_b:.2f}",
        f"Rating:  A {evaluation.rating_a_before:.0f} -> {evaluation.new_rating_a:.0f}"
        f" ({evaluation.rating_change_a:+.0f})"
        f" | B {evaluation.rating_b_before:.0f} -> {evaluation.new_rating_b:.0f}"
        f" ({evaluation.rating_change_b:+.0f})",
        f"RD:      A {evaluation.deviation_a_before:.1f} -> {evaluation.new_deviation_a:.1f}"
        f" | B {evaluation.deviation_b_before:.1f} -> {evaluation.new_deviation_b:.1f}",
        _THIN,
        f"[1] M_set        {m.m_set:.2f}",
        f"[2] M_pointDiff  {m.m_point_diff:.4f}",
        f"[3] M_flow       {m.m_flow:.4f}",
        f"    Clutch       {flow.clutch:.2f}"
        f"  ({sum(1 for p in clutch_points if p.scorer == reference)}/{len(clutch_points)} deuce points)",
        f"    Comeback     {flow.comeback:.2f}",
        f"    Consistency  {flow.consistency:.2f}",
        f"    Endurance    {flow.endurance:.2f}"
        f"  ({sum(1 for p in long_rallies if p.scorer == reference)}/{len(long_rallies)} long rallies)",
        f"    Focus        {flow.focus:.2f}"
        f"  (set 1 {first_rate:.0%} -> set {last_set} {last_rate:.0%})",
        f"    Tempo        {flow.tempo:.2f}",
        f"    Integrity    {m.integrity:.2f}",
        f"=> M_total       {m.m_total:.4f}",
        _RULE,
    ]
    return "\n".join(lines)


def log_match_report(
    record: MatchRecord,
    evaluation: MatchEvaluation,
    params: RatingParams = DEFAULT_PARAMS,
    level: int = logging.INFO,
) -> None:
    """Emit the match report through the logging system."""
    if logger.isEnabledFor(level):
        logger.log(level, "\n%s", build_match_report(record, evaluation, params))
