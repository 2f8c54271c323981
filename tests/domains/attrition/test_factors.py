import pytest

from attrition_pipeline.domains.attrition.factors import (
    absenteeism_from_rate,
    absenteeism_score,
    consistency_score,
    leave_pattern_from_ratio,
    leave_pattern_score,
    recent_trend_score,
    trend_from_delta,
)
from tests.factories import A, P, PL, UL, make_history


@pytest.mark.parametrize(
    "rate, expected",
    [(0.0, 0.0), (0.02, 16.0), (0.05, 40.0), (0.09, 40.0), (0.10, 65.0), (0.15, 85.0), (0.20, 100.0), (0.9, 100.0)],
)
def test_absenteeism_steps(rate, expected):
    assert absenteeism_from_rate(rate) == pytest.approx(expected)


def test_absenteeism_ramp_meets_first_step():
    assert 0.05 * 800 == pytest.approx(absenteeism_from_rate(0.05))
    assert absenteeism_from_rate(0.0499) < 40


def test_absenteeism_counts_only_absent_days():
    records = make_history([A] + [PL, UL] * 2 + [P] * 15)
    assert absenteeism_score(records) == pytest.approx(40.0)


def test_absenteeism_of_no_records_is_zero():
    assert absenteeism_score([]) == 0.0


@pytest.mark.parametrize(
    "ratio, expected",
    [(0.0, 0.0), (0.1, 10.0), (0.2, 30.0), (0.4, 50.0), (0.6, 70.0), (0.8, 90.0), (1.0, 90.0)],
)
def test_leave_pattern_steps(ratio, expected):
    assert leave_pattern_from_ratio(ratio) == pytest.approx(expected)


def test_leave_pattern_without_leave_is_zero():
    assert leave_pattern_score(make_history([P, A, A, P])) == 0.0


def test_leave_pattern_ignores_absences():
    records = make_history([PL, PL, PL, PL, UL, A, A, A])
    assert leave_pattern_score(records) == pytest.approx(30.0)


def test_consistency_needs_two_weeks():
    assert consistency_score(make_history([A, P, A, P, A])) == 0.0


def test_consistency_of_steady_attendance_is_zero():
    assert consistency_score(make_history([A, P, P, P, P] * 6)) == pytest.approx(0.0)


def test_consistency_of_alternating_weeks_is_capped():
    assert consistency_score(make_history([A] * 5 + [P] * 5)) == pytest.approx(100.0)


def test_consistency_scales_standard_deviation():
    # weekly rates [0.2, 0.0] have a population std of 0.1
    assert consistency_score(make_history([A] + [P] * 9)) == pytest.approx(20.0)


def test_consistency_keeps_trailing_partial_week():
    assert consistency_score(make_history([P] * 5 + [A])) == pytest.approx(100.0)


def test_trend_needs_twenty_records():
    assert recent_trend_score(make_history([P] * 4 + [A] * 15)) == 0.0


def test_trend_rises_with_recent_absence():
    assert recent_trend_score(make_history([P] * 15 + [A] * 3 + [P] * 12)) == pytest.approx(100.0)
    assert recent_trend_score(make_history([P] * 15 + [A] + [P] * 14)) == pytest.approx(50.0)


def test_improving_trend_scores_zero():
    assert recent_trend_score(make_history([A] * 15 + [P] * 15)) == 0.0


def test_trend_with_short_previous_window():
    # 20 records: previous window holds only the first five
    records = make_history([P] * 5 + [A] * 3 + [P] * 12)
    assert recent_trend_score(records) == pytest.approx(100.0)


@pytest.mark.parametrize(
    "delta, expected",
    [(-0.3, 0.0), (0.0, 0.0), (0.02, 10.0), (0.05, 50.0), (0.10, 75.0), (0.15, 100.0)],
)
def test_trend_steps(delta, expected):
    assert trend_from_delta(delta) == pytest.approx(expected)
