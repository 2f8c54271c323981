"""Error taxonomy for the attendance and attrition pipeline.

Only whole-file problems and missing employees are raised. Row-level issues
and volume warnings are returned as values alongside the valid data.
"""

from typing import TypeAlias

ErrorContext: TypeAlias = dict[str, str | int | list[str]]


class AttritionPipelineError(Exception):
    """Base class for every error the pipeline raises."""

    def context(self) -> ErrorContext:
        return {}

    def to_dict(self) -> ErrorContext:
        return {"kind": type(self).__name__, "message": str(self), **self.context()}


class IngestError(AttritionPipelineError):
    """The uploaded file cannot be processed at all."""


class UnsupportedFormat(IngestError):
    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(
            f"Unsupported file format '.{extension}'. Only CSV and Excel files are allowed."
        )

    def context(self) -> ErrorContext:
        return {"extension": self.extension}


class MissingColumns(IngestError):
    def __init__(self, missing: set[str]) -> None:
        self.missing = frozenset(missing)
        super().__init__(f"Missing required columns: {', '.join(sorted(self.missing))}")

    def context(self) -> ErrorContext:
        return {"missing": sorted(self.missing)}


class EmptyFile(IngestError):
    def __init__(self) -> None:
        super().__init__("File is empty")


class FileTooLarge(IngestError):
    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"File is {size} bytes, limit is {limit} bytes")

    def context(self) -> ErrorContext:
        return {"size": self.size, "limit": self.limit}


class FileReadError(IngestError):
    def __init__(self, file_format: str, reason: str) -> None:
        self.file_format = file_format
        self.reason = reason
        super().__init__(f"{file_format} parsing failed: {reason}")

    def context(self) -> ErrorContext:
        return {"format": self.file_format}


class EmployeeNotFound(AttritionPipelineError):
    def __init__(self, organization_id: str, employee_id: str) -> None:
        self.organization_id = organization_id
        self.employee_id = employee_id
        super().__init__(f"Employee not found: {employee_id}")

    def context(self) -> ErrorContext:
        return {"organizationId": self.organization_id, "employeeId": self.employee_id}
