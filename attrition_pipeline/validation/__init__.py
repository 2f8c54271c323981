"""Reporting for attendance upload validation results."""

from attrition_pipeline.validation.reporters import build_validation_report, format_validation_error, save_report
