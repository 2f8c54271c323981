"""Typed attendance records, validation results and the pandera boundary schema."""

from typing import TypeAlias
from dataclasses import dataclass, field
from datetime import date, datetime

import pandas as pd
from pandera import Check, Column, DataFrameSchema

from attrition_pipeline.domains.attendance.rules import (
    DUPLICATE_KEY,
    EMAIL_PATTERN,
    VALID_STATUSES,
)
from attrition_pipeline.utils.types import AttendanceStatus
from attrition_pipeline.utils.validators import validate_dataframe

IssueCode: TypeAlias = str  # "missing" | "too_long" | "format" | "weekend" | "not_allowed" | "notice" | "duplicate"


@dataclass(frozen=True)
class AttendanceRecord:
    employee_id: str
    employee_name: str
    date: date
    status: AttendanceStatus
    informed_time: datetime | None
    department: str
    manager_email: str

    @property
    def key(self) -> tuple[str, date]:
        return (self.employee_id, self.date)

    @property
    def is_absent(self) -> bool:
        return self.status is AttendanceStatus.ABSENT

    def to_dict(self) -> dict[str, str | None]:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "informedTime": self.informed_time.isoformat() if self.informed_time else None,
            "department": self.department,
            "managerEmail": self.manager_email,
        }


@dataclass(frozen=True)
class FieldIssue:
    field: str
    code: IssueCode
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code, "message": self.message}


@dataclass(frozen=True)
class RowValidationError:
    """Every rule a single file row failed. ``row`` counts the header as row 1."""

    row: int
    issues: tuple[FieldIssue, ...]

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]

    @property
    def is_duplicate(self) -> bool:
        return any(issue.code == "duplicate" for issue in self.issues)

    def to_dict(self) -> dict:
        return {
            "row": self.row,
            "errors": self.messages,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True)
class EmployeeVolumeWarning:
    """Advisory: the employee's valid day count sits outside the expected window."""

    employee_id: str
    found: int
    minimum: int
    maximum: int

    @property
    def message(self) -> str:
        return (
            "Employee must have approximately 63 working days of data "
            f"(3 months, 5-day week). Found {self.found} days."
        )

    def to_dict(self) -> dict:
        return {
            "employee": self.employee_id,
            "errors": [self.message],
            "found": self.found,
            "expectedRange": [self.minimum, self.maximum],
        }


ValidationError: TypeAlias = RowValidationError | EmployeeVolumeWarning


@dataclass(frozen=True)
class ParseResult:
    """``invalid_records`` counts every entry in ``errors``, volume warnings included."""

    valid_records: tuple[AttendanceRecord, ...]
    invalid_records: int
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def row_errors(self) -> list[RowValidationError]:
        return [e for e in self.errors if isinstance(e, RowValidationError)]

    @property
    def volume_warnings(self) -> list[EmployeeVolumeWarning]:
        return [e for e in self.errors if isinstance(e, EmployeeVolumeWarning)]

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "validRecords": [r.to_dict() for r in self.valid_records],
            "invalidRecords": self.invalid_records,
            "errors": [e.to_dict() for e in self.errors],
        }


# Shape of normalized records at the ingestion boundary.
ATTENDANCE_SCHEMA = DataFrameSchema(
    columns={
        "employee_id": Column(str, Check.str_length(min_value=1, max_value=20)),
        "employee_name": Column(str, Check.str_length(min_value=1, max_value=100)),
        "date": Column("datetime64[ns]"),
        "status": Column(str, Check.isin(list(VALID_STATUSES))),
        "informed_time": Column("datetime64[ns]", nullable=True),
        "department": Column(str, Check.str_length(min_value=1, max_value=50)),
        "manager_email": Column(str, Check.str_matches(EMAIL_PATTERN)),
    },
    unique=list(DUPLICATE_KEY),
    strict=False,
    coerce=True,
)


def check_normalized_frame(df: pd.DataFrame) -> pd.DataFrame:
    return validate_dataframe(df, ATTENDANCE_SCHEMA, name="attendance")
