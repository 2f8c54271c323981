"""Upload validation reporting and formatting.

Converts ingestion results into pipeline-friendly formats for the CLI,
logs, and rejection files handed back to whoever uploaded the sheet.
"""

from typing import TypeAlias
import json
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from attrition_pipeline.domains.attendance.models import (
    EmployeeVolumeWarning,
    ParseResult,
    RowValidationError,
    ValidationError,
)

ReportFormat: TypeAlias = str  # "table" | "json" | "summary"

console = Console()


def format_validation_error(error: ValidationError) -> dict[str, str | int]:
    """Flatten one error into a single display row."""
    match error:
        case RowValidationError(row=row, issues=issues):
            return {
                "scope": f"row {row}",
                "fields": ", ".join(dict.fromkeys(i.field for i in issues)),
                "codes": ", ".join(dict.fromkeys(i.code for i in issues)),
                "detail": "; ".join(i.message for i in issues),
            }
        case EmployeeVolumeWarning(employee_id=emp):
            return {
                "scope": f"employee {emp}",
                "fields": "",
                "codes": "volume",
                "detail": error.message,
            }
        case _:
            raise TypeError(f"Unknown validation error: {error!r}")


def build_validation_report(
    source: str,
    result: ParseResult,
    output_format: ReportFormat = "table",
) -> str:
    rows = [format_validation_error(e) for e in result.errors]

    match output_format:
        case "json":
            return _to_json(source, result, rows)
        case "summary":
            return _to_summary(source, result, rows)
        case "table" | _:
            return _to_table(source, result, rows)


def _to_json(source: str, result: ParseResult, rows: list[dict]) -> str:
    report = {
        "source": source,
        "timestamp": datetime.now().isoformat(),
        "valid": result.valid,
        "validRecords": len(result.valid_records),
        "invalidRecords": result.invalid_records,
        "errors": rows,
    }
    return json.dumps(report, indent=2)


def _to_summary(source: str, result: ParseResult, rows: list[dict]) -> str:
    lines = [
        f"[{source}] {len(result.valid_records)} valid rows, "
        f"{len(result.row_errors)} rejected, {len(result.volume_warnings)} volume warnings"
    ]
    for r in rows:
        lines.append(f"  {r['scope']}: {r['detail']}")
    return "\n".join(lines)


def _to_table(source: str, result: ParseResult, rows: list[dict]) -> str:
    table = Table(title=f"Validation: {source}")
    table.add_column("Scope", style="cyan")
    table.add_column("Fields")
    table.add_column("Codes", style="bold")
    table.add_column("Detail")

    for r in rows:
        style = "yellow" if r["codes"] == "volume" else "red"
        table.add_row(r["scope"], r["fields"], f"[{style}]{r['codes']}[/{style}]", r["detail"])

    buf = Console(file=None, force_terminal=False, width=140)
    with buf.capture() as capture:
        buf.print(table)
        buf.print(
            f"{len(result.valid_records)} valid rows, {len(result.row_errors)} rejected "
            f"({'PASSED' if result.valid else 'ISSUES FOUND'})"
        )
    return capture.get()


def save_report(
    report: str,
    output_dir: Path,
    source: str,
    fmt: ReportFormat = "json",
) -> Path:
    """Persist a validation report to disk."""
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    stem = Path(source).stem

    match fmt:
        case "json":
            path = output_dir / f"{stem}_validation_{timestamp}.json"
        case _:
            path = output_dir / f"{stem}_validation_{timestamp}.txt"

    path.write_text(report)
    console.print(f"  Report saved: {path}")
    return path
