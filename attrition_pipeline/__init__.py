"""Attendance ingestion and attrition-risk scoring pipeline."""

__version__ = "0.4.0"
