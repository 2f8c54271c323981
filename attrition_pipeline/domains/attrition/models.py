"""Risk assessment types and the pandera schema for exported reports."""

from typing import TypeAlias
from dataclasses import dataclass
from datetime import datetime

from pandera import Check, Column, DataFrameSchema

from attrition_pipeline.utils.types import RiskLevel

Score: TypeAlias = float
WireDict: TypeAlias = dict[str, str | int | float | dict | list | None]


@dataclass(frozen=True)
class RiskFactorScores:
    absenteeism: Score
    leave_pattern: Score
    consistency: Score
    recent_trend: Score

    def to_dict(self) -> dict[str, Score]:
        return {
            "absenteeism": self.absenteeism,
            "leavePattern": self.leave_pattern,
            "consistency": self.consistency,
            "recentTrend": self.recent_trend,
        }


@dataclass(frozen=True)
class AttendanceStatistics:
    total_days: int
    present_days: int
    absent_days: int
    planned_leave_days: int
    unplanned_leave_days: int
    attendance_rate: str
    absenteeism_rate: str

    def to_dict(self) -> dict[str, int | str]:
        return {
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "absentDays": self.absent_days,
            "plannedLeaveDays": self.planned_leave_days,
            "unplannedLeaveDays": self.unplanned_leave_days,
            "attendanceRate": self.attendance_rate,
            "absenteeismRate": self.absenteeism_rate,
        }


@dataclass(frozen=True)
class RiskAssessment:
    employee_id: str
    name: str
    score: Score
    risk_level: RiskLevel
    factors: RiskFactorScores | None
    statistics: AttendanceStatistics | None
    recommendation: str
    department: str | None = None

    def to_dict(self) -> WireDict:
        return {
            "employeeId": self.employee_id,
            "name": self.name,
            "department": self.department,
            "score": self.score,
            "riskLevel": self.risk_level.value,
            "factors": self.factors.to_dict() if self.factors else {},
            "statistics": self.statistics.to_dict() if self.statistics else {},
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class RiskSummary:
    high: int
    moderate: int
    low: int
    insufficient_data: int

    def to_dict(self) -> dict[str, int]:
        return {
            "high": self.high,
            "moderate": self.moderate,
            "low": self.low,
            "insufficientData": self.insufficient_data,
        }


@dataclass(frozen=True)
class CompanyRiskReport:
    """Ranked snapshot for one organization. Never mutated once built."""

    organization_id: str
    period: int
    total_employees: int
    summary: RiskSummary
    employees: tuple[RiskAssessment, ...]
    generated_at: datetime

    def to_dict(self) -> WireDict:
        return {
            "organizationId": self.organization_id,
            "generatedAt": self.generated_at.isoformat(),
            "period": f"{self.period} months",
            "totalEmployees": self.total_employees,
            "summary": self.summary.to_dict(),
            "employees": [e.to_dict() for e in self.employees],
        }


_SCORE = Check.in_range(0, 100)

REPORT_SCHEMA = DataFrameSchema(
    columns={
        "rank": Column(int, Check.greater_than_or_equal_to(1)),
        "employee_id": Column(str),
        "name": Column(str),
        "department": Column(str),
        "score": Column(float, _SCORE),
        "risk_level": Column(str, Check.isin([level.value for level in RiskLevel])),
        "absenteeism": Column(float, _SCORE, nullable=True),
        "leave_pattern": Column(float, _SCORE, nullable=True),
        "consistency": Column(float, _SCORE, nullable=True),
        "recent_trend": Column(float, _SCORE, nullable=True),
        "total_days": Column(int, Check.greater_than_or_equal_to(0)),
        "absent_days": Column(int, Check.greater_than_or_equal_to(0)),
        "attendance_rate": Column(str),
        "absenteeism_rate": Column(str),
        "recommendation": Column(str),
    },
    strict=False,
    coerce=True,
)
