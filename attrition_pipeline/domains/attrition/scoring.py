"""Attrition risk scoring for a single employee."""

import logging
import math
from collections.abc import Sequence
from datetime import date

import pandas as pd

from attrition_pipeline.domains.attendance.models import AttendanceRecord
from attrition_pipeline.domains.attendance.store import AttendanceStore
from attrition_pipeline.domains.attrition.factors import (
    absenteeism_score,
    consistency_score,
    leave_pattern_score,
    recent_trend_score,
)
from attrition_pipeline.domains.attrition.models import (
    AttendanceStatistics,
    RiskAssessment,
    RiskFactorScores,
)
from attrition_pipeline.errors import EmployeeNotFound
from attrition_pipeline.utils.types import AttendanceStatus, DateRange, RiskLevel, classify_risk

logger = logging.getLogger(__name__)

FACTOR_WEIGHTS: dict[str, float] = {
    "absenteeism": 0.35,
    "leave_pattern": 0.25,
    "consistency": 0.25,
    "recent_trend": 0.15,
}

RECOMMENDATIONS: dict[RiskLevel, str] = {
    RiskLevel.HIGH: (
        "URGENT: Schedule immediate 1-on-1 meeting. Investigate causes of absenteeism. "
        "Consider retention strategies."
    ),
    RiskLevel.MODERATE: (
        "MONITOR: Regular check-ins recommended. Address any workplace concerns proactively."
    ),
    RiskLevel.LOW: (
        "LOW RISK: Continue standard engagement practices. Employee shows stable attendance."
    ),
    RiskLevel.INSUFFICIENT_DATA: "Need at least 3 months of attendance data",
}


def round_score(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def scoring_window(months: int, as_of: date | None = None) -> DateRange:
    """Inclusive ``[as_of - months, as_of]`` in calendar months."""
    end = pd.Timestamp(as_of) if as_of else pd.Timestamp.now().normalize()
    start = end - pd.DateOffset(months=months)
    return start.date(), end.date()


def attendance_statistics(records: Sequence[AttendanceRecord]) -> AttendanceStatistics:
    total = len(records)
    counts = {status: 0 for status in AttendanceStatus}
    for record in records:
        counts[record.status] += 1

    present = counts[AttendanceStatus.PRESENT]
    absent = counts[AttendanceStatus.ABSENT]
    return AttendanceStatistics(
        total_days=total,
        present_days=present,
        absent_days=absent,
        planned_leave_days=counts[AttendanceStatus.PLANNED_LEAVE],
        unplanned_leave_days=counts[AttendanceStatus.UNPLANNED_LEAVE],
        attendance_rate=f"{present / total * 100:.2f}%",
        absenteeism_rate=f"{absent / total * 100:.2f}%",
    )


def composite_score(factors: RiskFactorScores) -> float:
    return (
        factors.absenteeism * FACTOR_WEIGHTS["absenteeism"]
        + factors.leave_pattern * FACTOR_WEIGHTS["leave_pattern"]
        + factors.consistency * FACTOR_WEIGHTS["consistency"]
        + factors.recent_trend * FACTOR_WEIGHTS["recent_trend"]
    )


def score(
    records: Sequence[AttendanceRecord],
    months: int = 3,
    employee_id: str | None = None,
    name: str | None = None,
) -> RiskAssessment:
    """Score one employee's date-ordered records from a ``months``-long window.

    Identity is taken from the latest record unless given explicitly, so an
    empty window still yields a named ``Insufficient Data`` assessment.
    """
    latest = records[-1] if records else None
    employee_id = employee_id or (latest.employee_id if latest else "")
    name = name or (latest.employee_name if latest else "")

    if not records:
        logger.debug("No attendance in the last %d months for %s", months, employee_id)
        return RiskAssessment(
            employee_id=employee_id,
            name=name,
            score=0.0,
            risk_level=RiskLevel.INSUFFICIENT_DATA,
            factors=None,
            statistics=None,
            recommendation=RECOMMENDATIONS[RiskLevel.INSUFFICIENT_DATA],
        )

    raw = RiskFactorScores(
        absenteeism=absenteeism_score(records),
        leave_pattern=leave_pattern_score(records),
        consistency=consistency_score(records),
        recent_trend=recent_trend_score(records),
    )
    composite = composite_score(raw)
    # classified before rounding; the rounded value is only for display
    level = classify_risk(composite)

    return RiskAssessment(
        employee_id=employee_id,
        name=name,
        department=latest.department,
        score=round_score(composite),
        risk_level=level,
        factors=RiskFactorScores(
            absenteeism=round_score(raw.absenteeism),
            leave_pattern=round_score(raw.leave_pattern),
            consistency=round_score(raw.consistency),
            recent_trend=round_score(raw.recent_trend),
        ),
        statistics=attendance_statistics(records),
        recommendation=RECOMMENDATIONS[level],
    )


def score_employee(
    store: AttendanceStore,
    organization_id: str,
    employee_id: str,
    months: int = 3,
    as_of: date | None = None,
) -> RiskAssessment:
    """Fetch an employee's windowed records from ``store`` and score them."""
    if not store.has_employee(organization_id, employee_id):
        raise EmployeeNotFound(organization_id, employee_id)

    start, end = scoring_window(months, as_of)
    records = store.fetch_records(organization_id, employee_id, start, end)
    name = None
    if not records:
        history = store.fetch_records(organization_id, employee_id, date.min, end)
        name = history[-1].employee_name if history else None
    assessment = score(records, months, employee_id=employee_id, name=name)
    logger.debug(
        "Scored %s over %s..%s: %.1f (%s)",
        employee_id, start, end, assessment.score, assessment.risk_level,
    )
    return assessment
