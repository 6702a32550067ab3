"""
Unit tests for match flow analysis.

Covers each flow dimension, the neutral 0.5 default when a slice of the
point log is empty, and the unclamped focus score.
"""

import pytest

from rally.rating.flow import (
    analyze_flow,
    clutch_score,
    determine_winner,
    endurance_score,
    focus_score,
    tempo_score,
    winner_win_rate,
)
from rally.rating.params import RatingParams


class TestDetermineWinner:

    @pytest.mark.parametrize(
        "wins_a, wins_b, expected",
        [(2, 0, "A"), (2, 1, "A"), (0, 2, "B"), (1, 2, "B"), (1, 1, "B"), (0, 0, "B")],
    )
    def test_more_sets_wins_ties_go_to_b(self, wins_a, wins_b, expected):
        assert determine_winner(wins_a, wins_b) == expected


class TestWinnerWinRate:

    def test_rate(self, point_log):
        points = point_log(["AABB" + "B"])
        assert winner_win_rate(points, "B") == pytest.approx(0.6)

    def test_empty_defaults_to_neutral(self):
        assert winner_win_rate([], "A") == 0.5

    def test_empty_value_override(self):
        assert winner_win_rate([], "A", empty_value=0.0) == 0.0


class TestNeutralDefaults:
    """A slice with no points carries no signal."""

    def test_no_long_rallies(self, point_log):
        points = point_log(["ABABB"], durations=29.9)
        assert endurance_score(points, "B") == 0.5

    def test_no_deuce_points(self, point_log):
        points = point_log(["AB" * 19 + "BB"])  # reaches 19-21, never 20-20
        assert clutch_score(points, "B") == 0.5

    def test_no_short_rallies(self, point_log):
        points = point_log(["ABABB"], durations=30.0)
        assert tempo_score(points, "B") == 0.5

    def test_neutral_profile(self, sweep_record):
        profile = analyze_flow(sweep_record.point_log, "B")
        assert profile.clutch == 0.5
        assert profile.endurance == 0.5
        assert profile.comeback == 0.5
        assert profile.consistency == 0.5
        assert profile.focus == 0.5


class TestRallyLengthSplit:

    def test_thirty_seconds_is_long(self, point_log):
        points = point_log(["AB"], durations=[30.0, 29.0])
        assert endurance_score(points, "A") == 1.0
        assert tempo_score(points, "A") == 0.0

    def test_mixed_durations(self, point_log):
        # A wins both long rallies, B wins all three short ones
        points = point_log(["ABABB"], durations=[45.0, 5.0, 31.0, 12.0, 8.0])
        assert endurance_score(points, "B") == 0.0
        assert tempo_score(points, "B") == 1.0
        assert endurance_score(points, "A") == 1.0

    def test_custom_threshold(self, point_log):
        points = point_log(["AB"], durations=[15.0, 25.0])
        params = RatingParams(long_rally_seconds=20.0)
        profile = analyze_flow(points, "B", params)
        assert profile.endurance == 1.0
        assert profile.tempo == 0.0


class TestClutch:

    def test_deuce_points_counted(self, point_log):
        # 20-20 reached on B's point, then B wins 20-21 and 20-22
        points = point_log(["AB" * 20 + "BB"])
        assert clutch_score(points, "B") == 1.0
        assert clutch_score(points, "A") == 0.0

    def test_split_deuce(self, point_log):
        # 20-20 (B), 21-20 (A), 21-21 (B), 22-21 (A), 23-21 (A)
        points = point_log(["AB" * 20 + "ABAA"])
        assert clutch_score(points, "A") == pytest.approx(3 / 5)


class TestFocus:

    def test_identical_sets_are_neutral(self, point_log):
        points = point_log(["AAB", "AAB"])
        assert focus_score(points, "A") == pytest.approx(0.5)

    def test_improvement_rewarded(self, point_log):
        # Winner B: 0% in set 1, 100% in set 3
        points = point_log(["A" * 21, "B" * 21, "B" * 21])
        assert focus_score(points, "B") == pytest.approx(1.5)

    def test_collapse_floored_at_zero(self, point_log):
        points = point_log(["B" * 21, "A" * 21])
        assert focus_score(points, "B") == 0.0

    def test_single_set_is_neutral(self, point_log):
        """Forced termination inside set 1: first and last set coincide."""
        points = point_log(["ABBA"])
        assert focus_score(points, "A") == pytest.approx(0.5)

    def test_empty_log_is_neutral(self):
        assert focus_score((), "A") == 0.5


class TestAnalyzeFlow:

    def test_sweep_tempo_is_overall_win_rate(self, sweep_record):
        """Every rally is short, so tempo is the winner's overall share."""
        profile = analyze_flow(sweep_record.point_log, "B")
        assert profile.tempo == pytest.approx(42 / 72)

    def test_profile_dict(self, sweep_record):
        profile = analyze_flow(sweep_record.point_log, "B")
        assert set(profile.to_dict()) == {
            "clutch",
            "comeback",
            "consistency",
            "endurance",
            "focus",
            "tempo",
        }

    def test_placeholders_ignore_input(self, point_log):
        points = point_log(["A" * 21, "B" * 21, "B" * 21], durations=40.0)
        profile = analyze_flow(points, "B")
        assert profile.comeback == 0.5
        assert profile.consistency == 0.5
