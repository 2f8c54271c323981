"""Normalize validated attendance rows into typed records and back."""

import logging
from collections.abc import Iterable

import pandas as pd

from attrition_pipeline.domains.attendance.models import AttendanceRecord, check_normalized_frame
from attrition_pipeline.domains.attendance.rules import REQUIRED_COLUMNS
from attrition_pipeline.utils.types import AttendanceStatus

logger = logging.getLogger(__name__)


def _to_datetime(value: pd.Timestamp):
    return None if pd.isna(value) else value.to_pydatetime()


def normalize_attendance_rows(valid_rows: pd.DataFrame) -> tuple[AttendanceRecord, ...]:
    """Turn rows that passed validation into ``AttendanceRecord`` objects.

    Expects ``date`` and ``informed_time`` already parsed. Emails are
    lowercased; every other text field is kept as trimmed on read.
    """
    df = valid_rows[list(REQUIRED_COLUMNS)].copy()
    df["manager_email"] = df["manager_email"].str.lower()
    df = check_normalized_frame(df)

    records = tuple(
        AttendanceRecord(
            employee_id=row.employee_id,
            employee_name=row.employee_name,
            date=row.date.date(),
            status=AttendanceStatus(row.status),
            informed_time=_to_datetime(row.informed_time),
            department=row.department,
            manager_email=row.manager_email,
        )
        for row in df.itertuples(index=False)
    )
    logger.info("Normalized %d attendance records", len(records))
    return records


def records_to_raw_frame(records: Iterable[AttendanceRecord]) -> pd.DataFrame:
    """Render records back into the string layout of an upload."""
    return pd.DataFrame(
        [
            {
                "employee_id": r.employee_id,
                "employee_name": r.employee_name,
                "date": r.date.isoformat(),
                "status": r.status.value,
                "informed_time": r.informed_time.isoformat() if r.informed_time else "",
                "department": r.department,
                "manager_email": r.manager_email,
            }
            for r in records
        ],
        columns=list(REQUIRED_COLUMNS),
        dtype=object,
    )
