"""Unit tests for the performance multiplier aggregation."""

import math

import pytest

from rally.rating.flow import analyze_flow
from rally.rating.margin import (
    M_TOTAL_CEILING,
    M_TOTAL_FLOOR,
    aggregate_multipliers,
    flow_multiplier,
    integrity_factor,
    point_diff_multiplier,
    set_multiplier,
)
from rally.rating.models import FlowProfile
from rally.rating.params import RatingParams


def neutral_profile():
    return FlowProfile(
        clutch=0.5, comeback=0.5, consistency=0.5, endurance=0.5, focus=0.5, tempo=0.5
    )


class TestSetMultiplier:

    @pytest.mark.parametrize(
        "wins_a, wins_b, expected",
        [(2, 0, 1.25), (0, 2, 1.25), (2, 1, 1.0), (1, 2, 1.0), (1, 1, 1.0), (1, 0, 1.0)],
    )
    def test_sweep_bonus(self, wins_a, wins_b, expected):
        assert set_multiplier(wins_a, wins_b) == expected


class TestPointDiffMultiplier:

    def test_pivot_is_neutral(self):
        assert point_diff_multiplier(45, 40) == pytest.approx(1.0)

    def test_zero_difference(self):
        assert point_diff_multiplier(40, 40) == pytest.approx(1 + 0.5 * math.tanh(-0.5))

    def test_symmetric_in_sides(self):
        assert point_diff_multiplier(30, 42) == point_diff_multiplier(42, 30)

    def test_bounded(self):
        assert 0.5 < point_diff_multiplier(0, 0) < 1.0
        assert 1.0 < point_diff_multiplier(200, 0) <= 1.5

    def test_monotonic_in_difference(self):
        values = [point_diff_multiplier(diff, 0) for diff in range(0, 40)]
        assert values == sorted(values)


class TestFlowMultiplier:

    def test_neutral_profile(self):
        """All six at 0.5 with weights summing to 0.95."""
        assert flow_multiplier(neutral_profile()) == pytest.approx(1.475)

    def test_applied_weights_sum_to_095(self):
        assert sum(RatingParams().flow_weights.values()) == pytest.approx(0.95)

    def test_max_run_not_applied(self):
        assert "max_run" not in RatingParams().flow_weights

    def test_weights_are_injectable(self):
        params = RatingParams(weight_clutch=0.0)
        profile = FlowProfile(
            clutch=1.0, comeback=0.0, consistency=0.0, endurance=0.0, focus=0.0, tempo=0.0
        )
        assert flow_multiplier(profile, params) == 1.0
        assert flow_multiplier(profile) == pytest.approx(1.25)


class TestIntegrity:

    def test_forced(self):
        assert integrity_factor(True) == 0.7

    def test_completed(self):
        assert integrity_factor(False) == 1.0


class TestAggregate:

    def test_sweep_breakdown(self, sweep_record):
        flow = analyze_flow(sweep_record.point_log, "B")
        m = aggregate_multipliers(sweep_record, flow)

        expected_pd = 1 + 0.5 * math.tanh(0.7)
        expected_flow = 1 + 0.25 * 0.5 + 0.2 * 0.5 + 0.2 * 0.5 + 0.15 * 0.5 + 0.1 * 0.5 + 0.05 * (42 / 72)

        assert m.m_set == 1.25
        assert m.m_point_diff == pytest.approx(expected_pd)
        assert m.m_flow == pytest.approx(expected_flow)
        assert m.integrity == 1.0
        assert m.m_total == pytest.approx(0.3 * 1.25 + 0.2 * expected_pd + 0.5 * expected_flow)

    def test_forced_scales_total(self, match_record):
        sets = ["AB" * 15 + "B" * 6, "AB" * 15 + "B" * 6]
        normal = match_record(sets, 0, 2)
        forced = match_record(sets, 0, 2, forced=True)

        m_normal = aggregate_multipliers(normal, analyze_flow(normal.point_log, "B"))
        m_forced = aggregate_multipliers(forced, analyze_flow(forced.point_log, "B"))

        assert m_forced.m_total == pytest.approx(0.7 * m_normal.m_total)
        assert m_forced.m_total < m_normal.m_total

    def test_loser_complement(self, sweep_record):
        m = aggregate_multipliers(sweep_record, neutral_profile())
        assert m.m_loser == pytest.approx(2.0 - m.m_total)


class TestOperatingRange:
    """M_total stays inside [0.7, 1.575] even with the unclamped focus score."""

    @pytest.mark.parametrize(
        "sets, wins_a, wins_b, forced, durations",
        [
            # Winner B loses set 1 21-0 then wins the rest 21-0: focus = 1.5
            (["A" * 21, "B" * 21, "B" * 21], 1, 2, False, 40.0),
            (["A" * 21, "B" * 21, "B" * 21], 1, 2, True, 5.0),
            # Reverse collapse: focus floored at 0
            (["B" * 21, "A" * 10 + "B" * 21], 0, 2, False, 10.0),
            # Dead-even forced stop
            (["AB" * 10], 0, 1, True, 12.0),
            # Single point
            (["A"], 1, 0, True, 3.0),
            # Long deuce battle
            (["AB" * 25 + "AA", "AB" * 25 + "AA"], 2, 0, False, 31.0),
        ],
    )
    def test_within_range(self, match_record, sets, wins_a, wins_b, forced, durations):
        record = match_record(sets, wins_a, wins_b, forced=forced, durations=durations)
        winner = "A" if wins_a > wins_b else "B"
        m = aggregate_multipliers(record, analyze_flow(record.point_log, winner))

        assert M_TOTAL_FLOOR - 1e-9 <= m.m_total <= M_TOTAL_CEILING + 1e-9
        assert math.isfinite(m.m_total)

    def test_bounds_are_reachable_in_the_limit(self):
        """Extreme profiles land on the documented bounds."""
        lowest = FlowProfile(
            clutch=0.0, comeback=0.5, consistency=0.5, endurance=0.0, focus=0.0, tempo=0.0
        )
        highest = FlowProfile(
            clutch=1.0, comeback=0.5, consistency=0.5, endurance=1.0, focus=1.5, tempo=1.0
        )
        low = 0.7 * (0.3 * 1.0 + 0.2 * 0.5 + 0.5 * flow_multiplier(lowest))
        high = 0.3 * 1.25 + 0.2 * 1.5 + 0.5 * flow_multiplier(highest)

        assert low == pytest.approx(M_TOTAL_FLOOR)
        assert high == pytest.approx(M_TOTAL_CEILING)
