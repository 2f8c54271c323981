"""Declarative rule table for attendance uploads.

Column requirements, per-field constraints and cross-field notice rules.
Nothing in here has behavior; ``validate.py`` interprets these tables.
"""

from dataclasses import dataclass
from datetime import timedelta

from attrition_pipeline.utils.types import AttendanceStatus

REQUIRED_COLUMNS: tuple[str, ...] = (
    "employee_id",
    "employee_name",
    "date",
    "status",
    "informed_time",
    "department",
    "manager_email",
)

VALID_STATUSES: tuple[str, ...] = tuple(s.value for s in AttendanceStatus)

DATE_FORMAT = "%Y-%m-%d"
WEEKEND_DAYS = frozenset({5, 6})  # Saturday, Sunday

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

DUPLICATE_KEY: tuple[str, str] = ("employee_id", "date")


@dataclass(frozen=True)
class FieldRule:
    column: str
    required: bool = True
    max_length: int | None = None
    pattern: str | None = None
    pattern_message: str | None = None


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("employee_id", max_length=20),
    FieldRule("employee_name", max_length=100),
    FieldRule("department", max_length=50),
    FieldRule(
        "manager_email",
        pattern=EMAIL_PATTERN,
        pattern_message="manager_email must be a valid email address",
    ),
)


@dataclass(frozen=True)
class NoticeRule:
    """How far the informed timestamp may sit from the leave date.

    ``strictly_before`` requires notice ahead of the day itself; otherwise
    the absolute distance must not exceed ``max_distance``.
    """

    status: AttendanceStatus
    message: str
    strictly_before: bool = False
    max_distance: timedelta | None = None


NOTICE_RULES: dict[AttendanceStatus, NoticeRule] = {
    AttendanceStatus.PLANNED_LEAVE: NoticeRule(
        status=AttendanceStatus.PLANNED_LEAVE,
        strictly_before=True,
        message="informed_time must be before the leave date for planned leave",
    ),
    AttendanceStatus.UNPLANNED_LEAVE: NoticeRule(
        status=AttendanceStatus.UNPLANNED_LEAVE,
        max_distance=timedelta(hours=24),
        message="informed_time must be within 24 hours of date for unplanned leave",
    ),
}

# ~63 working days in three months of five-day weeks, with tolerance.
MIN_DAYS_PER_EMPLOYEE = 55
MAX_DAYS_PER_EMPLOYEE = 70
