"""Attendance risk factors.

Each factor maps an employee's date-ordered records to a 0-100 score where
higher means more attrition risk. The signals follow Job Embeddedness
(absence and unplanned leave), Conservation of Resources (erratic weeks) and
Effort-Reward Imbalance (recent deterioration).
"""

from typing import TypeAlias
from collections.abc import Sequence

import numpy as np

from attrition_pipeline.domains.attendance.models import AttendanceRecord
from attrition_pipeline.utils.transforms import chunk_rates
from attrition_pipeline.utils.types import AttendanceStatus

Score: TypeAlias = float

WEEK_LENGTH = 5
TREND_MIN_RECORDS = 20
TREND_WINDOW = 15


def _absent_flags(records: Sequence[AttendanceRecord]) -> list[bool]:
    return [r.status is AttendanceStatus.ABSENT for r in records]


def _absent_rate(records: Sequence[AttendanceRecord]) -> float:
    if not records:
        return 0.0
    return sum(_absent_flags(records)) / len(records)


def absenteeism_from_rate(absent_rate: float) -> Score:
    """Stepped above 5%; the linear ramp below meets the 40 step at exactly 5%."""
    match absent_rate:
        case r if r >= 0.20:
            return 100.0
        case r if r >= 0.15:
            return 85.0
        case r if r >= 0.10:
            return 65.0
        case r if r >= 0.05:
            return 40.0
        case r:
            return r * 800


def absenteeism_score(records: Sequence[AttendanceRecord]) -> Score:
    return absenteeism_from_rate(_absent_rate(records))


def leave_pattern_from_ratio(unplanned_ratio: float) -> Score:
    match unplanned_ratio:
        case r if r >= 0.80:
            return 90.0
        case r if r >= 0.60:
            return 70.0
        case r if r >= 0.40:
            return 50.0
        case r if r >= 0.20:
            return 30.0
        case r:
            return r * 100


def leave_pattern_score(records: Sequence[AttendanceRecord]) -> Score:
    """Share of leave days that were unplanned; no leave at all scores zero."""
    leaves = [r for r in records if r.status.is_leave]
    if not leaves:
        return 0.0
    unplanned = sum(1 for r in leaves if r.status is AttendanceStatus.UNPLANNED_LEAVE)
    return leave_pattern_from_ratio(unplanned / len(leaves))


def consistency_score(records: Sequence[AttendanceRecord]) -> Score:
    """Spread of weekly absence rates over consecutive five-record weeks."""
    weekly = chunk_rates(_absent_flags(records), WEEK_LENGTH)
    if len(weekly) < 2:
        return 0.0
    std_dev = float(np.std(weekly))
    return min(std_dev * 200, 100.0)


def trend_from_delta(trend: float) -> Score:
    match trend:
        case t if t >= 0.15:
            return 100.0
        case t if t >= 0.10:
            return 75.0
        case t if t >= 0.05:
            return 50.0
        case t if t > 0:
            return t * 500
        case _:
            return 0.0


def recent_trend_score(records: Sequence[AttendanceRecord]) -> Score:
    """Last three weeks against the three before; improvement scores zero."""
    if len(records) < TREND_MIN_RECORDS:
        return 0.0
    recent = records[-TREND_WINDOW:]
    previous = records[-2 * TREND_WINDOW:-TREND_WINDOW]
    return trend_from_delta(_absent_rate(recent) - _absent_rate(previous))
