"""Export attrition reports to tabular destinations."""

from typing import TypeAlias
import json
import logging
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.table import Table

from attrition_pipeline.domains.attrition.models import REPORT_SCHEMA, CompanyRiskReport
from attrition_pipeline.utils.io import write_output
from attrition_pipeline.utils.types import RiskLevel
from attrition_pipeline.utils.validators import validate_dataframe

ExportFormat: TypeAlias = str  # "csv" | "json" | "excel"

logger = logging.getLogger(__name__)

console = Console()

_LEVEL_STYLE = {
    RiskLevel.HIGH: "red",
    RiskLevel.MODERATE: "yellow",
    RiskLevel.LOW: "green",
    RiskLevel.INSUFFICIENT_DATA: "dim",
}


def report_to_frame(report: CompanyRiskReport) -> pd.DataFrame:
    """One row per ranked employee with factor and statistic columns."""
    rows = []
    for rank, a in enumerate(report.employees, start=1):
        factors = a.factors
        stats = a.statistics
        rows.append({
            "rank": rank,
            "employee_id": a.employee_id,
            "name": a.name,
            "department": a.department or "",
            "score": a.score,
            "risk_level": a.risk_level.value,
            "absenteeism": factors.absenteeism if factors else None,
            "leave_pattern": factors.leave_pattern if factors else None,
            "consistency": factors.consistency if factors else None,
            "recent_trend": factors.recent_trend if factors else None,
            "total_days": stats.total_days if stats else 0,
            "absent_days": stats.absent_days if stats else 0,
            "attendance_rate": stats.attendance_rate if stats else "",
            "absenteeism_rate": stats.absenteeism_rate if stats else "",
            "recommendation": a.recommendation,
        })

    df = pd.DataFrame(rows, columns=list(REPORT_SCHEMA.columns))
    if df.empty:
        return df
    return validate_dataframe(df, REPORT_SCHEMA, name="attrition report")


def department_summary(report: CompanyRiskReport) -> pd.DataFrame:
    """Per-department head count, mean score and count per risk level."""
    df = report_to_frame(report)
    if df.empty:
        return pd.DataFrame(columns=["department", "employees", "mean_score"])

    counts = pd.crosstab(df["department"], df["risk_level"])
    summary = df.groupby("department").agg(
        employees=("employee_id", "count"),
        mean_score=("score", "mean"),
    )
    summary["mean_score"] = summary["mean_score"].round(1)
    summary = summary.join(counts).fillna(0).reset_index()
    return summary.sort_values("mean_score", ascending=False, kind="stable").reset_index(drop=True)


def write_report(
    report: CompanyRiskReport,
    output_dir: Path,
    fmt: ExportFormat = "excel",
) -> Path:
    """Write the ranked employee table; json output carries the full snapshot."""
    stamp = report.generated_at.strftime("%Y%m%d_%H%M%S")
    path = Path(output_dir) / f"attrition_{report.organization_id}_{stamp}"

    match fmt:
        case "json":
            path = path.with_suffix(".json")
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(report.to_dict(), indent=2))
            console.print(f"  Wrote {len(report.employees)} assessments to {path}")
        case "csv" | "excel":
            path = write_output(report_to_frame(report), path, fmt)
        case other:
            raise ValueError(f"Export format not supported: {other}")

    logger.info("Exported attrition report for %s to %s", report.organization_id, path)
    return path


def render_report_table(report: CompanyRiskReport, limit: int | None = None) -> Table:
    table = Table(title=f"Attrition risk: {report.organization_id} ({report.period} months)")
    table.add_column("#", justify="right")
    table.add_column("Employee", style="cyan")
    table.add_column("Name")
    table.add_column("Department")
    table.add_column("Score", justify="right")
    table.add_column("Level", style="bold")
    table.add_column("Absent", justify="right")

    employees = report.employees[:limit] if limit else report.employees
    for rank, a in enumerate(employees, start=1):
        style = _LEVEL_STYLE[a.risk_level]
        table.add_row(
            str(rank),
            a.employee_id,
            a.name,
            a.department or "-",
            f"{a.score:.1f}",
            f"[{style}]{a.risk_level.value}[/{style}]",
            a.statistics.absenteeism_rate if a.statistics else "-",
        )
    return table
