"""Attrition risk domain pipeline.

Scores each employee's recent attendance into a composite risk score and
rolls the results up into a ranked company report.
"""

from datetime import date

from attrition_pipeline.domains.attendance.store import AttendanceStore
from attrition_pipeline.domains.attrition.export import department_summary, report_to_frame, write_report
from attrition_pipeline.domains.attrition.models import (
    AttendanceStatistics,
    CompanyRiskReport,
    RiskAssessment,
    RiskFactorScores,
)
from attrition_pipeline.domains.attrition.report import (
    generate_report,
    high_risk,
    publish_report,
    report_history,
)
from attrition_pipeline.domains.attrition.scoring import score, score_employee
from attrition_pipeline.domains.attrition.store import InMemoryReportStore, ReportStore, StoredReport


def validate(store: AttendanceStore, organization_id: str) -> dict[str, str | int]:
    """Check that the organization has attendance to score."""
    employees = store.list_employees(organization_id)
    if not employees:
        return {"status": "skipped", "reason": f"no attendance loaded for {organization_id}"}
    return {"status": "ok", "employees": len(employees)}


def run(
    store: ReportStore,
    organization_id: str,
    months: int = 3,
    as_of: date | None = None,
    max_workers: int | None = None,
) -> tuple[str, CompanyRiskReport]:
    """Generate and persist the attrition report for one organization."""
    return publish_report(store, organization_id, months, as_of=as_of, max_workers=max_workers)
