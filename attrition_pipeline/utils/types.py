"""Shared type definitions for the pipeline."""

from typing import TypeAlias
from datetime import date, datetime
from enum import StrEnum

import pandas as pd


RawRow: TypeAlias = dict[str, str]
RowFrame: TypeAlias = pd.DataFrame
EmployeeID: TypeAlias = str
OrganizationID: TypeAlias = str
DateRange: TypeAlias = tuple[date, date]
Timestamp: TypeAlias = datetime


class AttendanceStatus(StrEnum):
    PRESENT = "Present"
    PLANNED_LEAVE = "Planned Leave"
    UNPLANNED_LEAVE = "Unplanned Leave"
    ABSENT = "Absent"

    @property
    def is_leave(self) -> bool:
        return self in (AttendanceStatus.PLANNED_LEAVE, AttendanceStatus.UNPLANNED_LEAVE)


class RiskLevel(StrEnum):
    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"
    INSUFFICIENT_DATA = "Insufficient Data"


def classify_risk(score: float) -> RiskLevel:
    match score:
        case s if s >= 70:
            return RiskLevel.HIGH
        case s if s >= 40:
            return RiskLevel.MODERATE
        case _:
            return RiskLevel.LOW
