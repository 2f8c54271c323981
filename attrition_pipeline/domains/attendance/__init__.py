"""Attendance domain pipeline.

Parses uploaded attendance sheets, validates them against the rule table,
and loads the surviving records into an attendance store.
"""

from typing import TypeAlias
from datetime import date

from attrition_pipeline.config import IngestConfig
from attrition_pipeline.domains.attendance.ingest import parse
from attrition_pipeline.domains.attendance.models import (
    AttendanceRecord,
    EmployeeVolumeWarning,
    FieldIssue,
    ParseResult,
    RowValidationError,
)
from attrition_pipeline.domains.attendance.store import AttendanceStore, InMemoryAttendanceStore
from attrition_pipeline.domains.attendance.validate import validate_records
from attrition_pipeline.errors import IngestError

UploadOutcome: TypeAlias = dict[str, str | int | list[dict]]


def _parse(file_bytes: bytes, filename: str, ingest: IngestConfig | None) -> ParseResult:
    if ingest is None:
        return parse(file_bytes, filename)
    return parse(file_bytes, filename, ingest.max_upload_bytes, ingest.allowed_extensions)


def validate(file_bytes: bytes, filename: str, ingest: IngestConfig | None = None) -> UploadOutcome:
    """Check an upload without loading it anywhere.

    Returns ``status`` "ok", "partial" (row errors or volume warnings next to
    valid rows) or "error" (the file could not be processed at all).
    """
    try:
        result = _parse(file_bytes, filename, ingest)
    except IngestError as exc:
        return {"status": "error", **exc.to_dict()}

    if result.valid:
        return {"status": "ok", "rows": len(result.valid_records)}
    return {
        "status": "partial",
        "rows": len(result.valid_records),
        "rejected": len(result.row_errors),
        "errors": [e.to_dict() for e in result.errors],
    }


def run(
    store: AttendanceStore,
    organization_id: str,
    file_bytes: bytes,
    filename: str,
    ingest: IngestConfig | None = None,
) -> UploadOutcome:
    """Parse an upload and upsert its valid records into ``store``.

    Fatal file errors propagate. The summary lists every processed record and,
    only when there are any, the collected errors.
    """
    result = _parse(file_bytes, filename, ingest)
    processed = store.upsert_records(organization_id, result.valid_records)

    summary: UploadOutcome = {
        "processed": processed,
        "records": [r.to_dict() for r in result.valid_records],
    }
    if result.errors:
        summary["errors"] = [e.to_dict() for e in result.errors]
    return summary


def list_attendance(
    store: AttendanceStore,
    organization_id: str,
    employee_id: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[dict]:
    """Stored attendance for an organization, newest first, as wire dicts."""
    return [r.to_dict() for r in store.query_records(organization_id, employee_id, start, end)]
