"""
RMR (Rally Match Rating) module.

Implements the rating engine with:
- Logistic expected score and deviation-driven volatility
- Point-log flow analysis (clutch, endurance, tempo, focus, ...)
- Performance multiplier from set outcome, point differential and flow
- Asymmetric winner/loser rating updates
- Deviation shrink after matches and growth over idle time
- Tier lookup and quiz-based placement
"""

from rally.rating.calculator import (
    RatingChange,
    calculate_rating_changes,
    calculate_volatility,
    expected_score,
)
from rally.rating.deviation import (
    decay_deviation_for_idle_time,
    shrink_deviation,
    shrink_deviation_against,
)
from rally.rating.engine import RatingEngine, apply_evaluation, evaluate_match
from rally.rating.flow import analyze_flow, determine_winner
from rally.rating.margin import aggregate_multipliers
from rally.rating.models import (
    SIDE_A,
    SIDE_B,
    FlowProfile,
    MatchEvaluation,
    MatchRecord,
    MultiplierBreakdown,
    PlayerSnapshot,
    PointEvent,
    RatingState,
)
from rally.rating.params import RatingParams
from rally.rating.placement import initial_rating_state
from rally.rating.report import build_match_report, log_match_report
from rally.rating.tiers import lookup_tier

__all__ = [
    "SIDE_A",
    "SIDE_B",
    "PointEvent",
    "PlayerSnapshot",
    "MatchRecord",
    "RatingState",
    "FlowProfile",
    "MultiplierBreakdown",
    "MatchEvaluation",
    "RatingParams",
    "RatingEngine",
    "RatingChange",
    "evaluate_match",
    "apply_evaluation",
    "expected_score",
    "calculate_volatility",
    "calculate_rating_changes",
    "analyze_flow",
    "determine_winner",
    "aggregate_multipliers",
    "shrink_deviation",
    "shrink_deviation_against",
    "decay_deviation_for_idle_time",
    "lookup_tier",
    "initial_rating_state",
    "build_match_report",
    "log_match_report",
]
