"""Ingest uploaded attendance files (CSV or Excel) into validated records."""

import logging

import pandas as pd

from attrition_pipeline.domains.attendance.models import ParseResult
from attrition_pipeline.domains.attendance.rules import REQUIRED_COLUMNS
from attrition_pipeline.domains.attendance.transform import normalize_attendance_rows
from attrition_pipeline.domains.attendance.validate import check_volume, validate_rows
from attrition_pipeline.errors import EmptyFile, FileTooLarge, MissingColumns, UnsupportedFormat
from attrition_pipeline.utils.io import read_csv_bytes, read_excel_bytes
from attrition_pipeline.utils.transforms import normalize_columns

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
SUPPORTED_EXTENSIONS = ("csv", "xlsx", "xls")


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def read_upload(file_bytes: bytes, filename: str) -> pd.DataFrame:
    """Read an upload into a frame of trimmed strings with normalized headers."""
    match file_extension(filename):
        case "csv":
            df = read_csv_bytes(file_bytes)
        case "xlsx" | "xls" as ext:
            df = read_excel_bytes(file_bytes, ext)
        case ext:
            raise UnsupportedFormat(ext)

    df = normalize_columns(df)
    logger.info("Read %d rows from %s", len(df), filename)
    return df


def parse(
    file_bytes: bytes,
    filename: str,
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    allowed_extensions: tuple[str, ...] = SUPPORTED_EXTENSIONS,
) -> ParseResult:
    """Validate an uploaded attendance file and normalize its valid rows.

    Whole-file problems raise an ``IngestError`` before any row is looked
    at. Row problems and volume warnings come back inside the result next
    to whatever rows survived.
    """
    if file_extension(filename) not in allowed_extensions:
        raise UnsupportedFormat(file_extension(filename))
    if len(file_bytes) > max_upload_bytes:
        raise FileTooLarge(len(file_bytes), max_upload_bytes)

    raw = read_upload(file_bytes, filename)
    if raw.empty:
        raise EmptyFile()

    missing = set(REQUIRED_COLUMNS) - set(raw.columns)
    if missing:
        raise MissingColumns(missing)

    raw = raw[list(REQUIRED_COLUMNS)].reset_index(drop=True)
    check = validate_rows(raw)
    records = normalize_attendance_rows(check.valid_rows)
    warnings = check_volume(records)

    errors = (*check.errors, *warnings)
    result = ParseResult(valid_records=records, invalid_records=len(errors), errors=errors)
    logger.info(
        "Parsed %s: %d valid rows, %d rejected, %d volume warnings",
        filename,
        len(records),
        len(check.errors),
        len(warnings),
    )
    return result
