"""Shared utilities for the data pipeline."""

from attrition_pipeline.utils.io import read_csv_bytes, read_excel_bytes, write_output
from attrition_pipeline.utils.transforms import chunk_rates, normalize_columns
from attrition_pipeline.utils.validators import SchemaViolation, validate_dataframe
from attrition_pipeline.utils.types import AttendanceStatus, RiskLevel, classify_risk
