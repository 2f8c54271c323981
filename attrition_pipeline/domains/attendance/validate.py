"""Row-level and employee-level validation of attendance uploads.

Each rule from ``rules.py`` is evaluated as a vectorized mask over the whole
frame; failing row indices collect ``FieldIssue`` entries. Rows with any
issue are rejected. The volume check runs afterwards over surviving records
and only reports.
"""

from typing import TypeAlias
import logging
from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from attrition_pipeline.domains.attendance.models import (
    AttendanceRecord,
    EmployeeVolumeWarning,
    FieldIssue,
    RowValidationError,
)
from attrition_pipeline.domains.attendance.rules import (
    DATE_FORMAT,
    DUPLICATE_KEY,
    FIELD_RULES,
    MAX_DAYS_PER_EMPLOYEE,
    MIN_DAYS_PER_EMPLOYEE,
    NOTICE_RULES,
    VALID_STATUSES,
    WEEKEND_DAYS,
    FieldRule,
)
from attrition_pipeline.domains.attendance.transform import records_to_raw_frame
from attrition_pipeline.utils.types import AttendanceStatus

logger = logging.getLogger(__name__)

IssueMap: TypeAlias = dict[int, list[FieldIssue]]

HEADER_OFFSET = 2  # header line plus 1-based numbering

_RULES_BY_COLUMN = {rule.column: rule for rule in FIELD_RULES}
_LEAVE_STATUSES = [s.value for s in AttendanceStatus if s.is_leave]


@dataclass(frozen=True)
class RowCheck:
    errors: list[RowValidationError]
    valid_rows: pd.DataFrame


def parse_timestamp(value: str) -> pd.Timestamp:
    """Parse a free-form timestamp into a naive UTC ``Timestamp`` or ``NaT``."""
    if not value:
        return pd.NaT
    try:
        ts = pd.Timestamp(value)
    except ValueError:
        return pd.NaT
    if ts is pd.NaT:
        return pd.NaT
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    try:
        return ts.as_unit("ns")
    except ValueError:  # out of bounds for nanosecond precision
        return pd.NaT


def _flag(issues: IssueMap, mask: pd.Series, column: str, code: str, message: str) -> None:
    for idx in mask.index[mask]:
        issues[idx].append(FieldIssue(field=column, code=code, message=message))


def _check_field(issues: IssueMap, raw: pd.DataFrame, rule: FieldRule) -> None:
    values = raw[rule.column]
    missing = values == ""
    if rule.required:
        message = rule.pattern_message if rule.pattern_message else f"{rule.column} is required"
        _flag(issues, missing, rule.column, "missing", message)
    if rule.max_length is not None:
        too_long = ~missing & (values.str.len() > rule.max_length)
        _flag(issues, too_long, rule.column, "too_long",
              f"{rule.column} must be max {rule.max_length} characters")
    if rule.pattern is not None:
        mismatch = ~missing & ~values.str.match(rule.pattern)
        _flag(issues, mismatch, rule.column, "format",
              rule.pattern_message or f"{rule.column} has an invalid format")


def _check_date(issues: IssueMap, raw: pd.DataFrame) -> pd.Series:
    parsed = pd.to_datetime(raw["date"], format=DATE_FORMAT, errors="coerce")
    bad = parsed.isna()
    weekend = ~bad & parsed.dt.dayofweek.isin(sorted(WEEKEND_DAYS))
    _flag(issues, bad, "date", "format", "date must be in YYYY-MM-DD format")
    _flag(issues, weekend, "date", "weekend", "date cannot be a weekend (Saturday/Sunday)")
    return parsed


def _check_status(issues: IssueMap, raw: pd.DataFrame) -> None:
    bad = ~raw["status"].isin(VALID_STATUSES)
    _flag(issues, bad, "status", "not_allowed", f"status must be one of: {', '.join(VALID_STATUSES)}")


def _check_informed_time(issues: IssueMap, raw: pd.DataFrame, dates: pd.Series) -> pd.Series:
    present = raw["informed_time"] != ""
    parsed = pd.Series(
        [parse_timestamp(v) for v in raw["informed_time"]],
        index=raw.index,
        dtype="datetime64[ns]",
    )
    is_leave = raw["status"].isin(_LEAVE_STATUSES)

    _flag(issues, is_leave & ~present, "informed_time", "missing",
          "informed_time is required for leave records")
    _flag(issues, is_leave & present & parsed.isna(), "informed_time", "format",
          "informed_time must be valid datetime")

    comparable = parsed.notna() & dates.notna()
    for status, rule in NOTICE_RULES.items():
        applies = comparable & (raw["status"] == status.value)
        if rule.strictly_before:
            violation = applies & (parsed >= dates)
        else:
            violation = applies & ((dates - parsed).abs() > rule.max_distance)
        _flag(issues, violation, "informed_time", "notice", rule.message)

    return parsed


def _check_duplicates(issues: IssueMap, raw: pd.DataFrame) -> None:
    """First occurrence of a key wins, whatever else is wrong with it."""
    repeated = raw.duplicated(subset=list(DUPLICATE_KEY), keep="first")
    _flag(issues, repeated, "employee_id", "duplicate", "duplicate employee_id + date combination")


def validate_rows(raw: pd.DataFrame) -> RowCheck:
    """Evaluate every row against the rule table.

    ``raw`` holds trimmed strings for every required column on a
    ``RangeIndex``. Returns the row errors in file order together with the
    surviving rows, whose ``date`` and ``informed_time`` are already parsed.
    """
    issues: IssueMap = defaultdict(list)

    _check_field(issues, raw, _RULES_BY_COLUMN["employee_id"])
    _check_field(issues, raw, _RULES_BY_COLUMN["employee_name"])
    dates = _check_date(issues, raw)
    _check_status(issues, raw)
    informed = _check_informed_time(issues, raw, dates)
    _check_field(issues, raw, _RULES_BY_COLUMN["department"])
    _check_field(issues, raw, _RULES_BY_COLUMN["manager_email"])
    _check_duplicates(issues, raw)

    errors = [
        RowValidationError(row=idx + HEADER_OFFSET, issues=tuple(issues[idx]))
        for idx in sorted(issues)
    ]
    rejected = raw.index.isin(list(issues))
    valid_rows = raw.assign(date=dates, informed_time=informed)[~rejected]

    if errors:
        logger.warning("Rejected %d of %d attendance rows", len(errors), len(raw))
    return RowCheck(errors=errors, valid_rows=valid_rows)


def check_volume(
    records: Iterable[AttendanceRecord],
    minimum: int = MIN_DAYS_PER_EMPLOYEE,
    maximum: int = MAX_DAYS_PER_EMPLOYEE,
) -> list[EmployeeVolumeWarning]:
    """Flag employees whose valid day count sits outside ``[minimum, maximum]``.

    Flagged employees keep their records.
    """
    counts = Counter(record.employee_id for record in records)
    warnings = [
        EmployeeVolumeWarning(employee_id=emp, found=n, minimum=minimum, maximum=maximum)
        for emp, n in counts.items()
        if n < minimum or n > maximum
    ]
    for warning in warnings:
        logger.info("Volume warning for %s: %d valid days", warning.employee_id, warning.found)
    return warnings


def validate_records(records: Iterable[AttendanceRecord]) -> list[RowValidationError]:
    """Re-run the row rules over already-normalized records."""
    return validate_rows(records_to_raw_frame(records)).errors
