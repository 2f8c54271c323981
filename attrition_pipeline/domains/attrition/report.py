"""Company-wide attrition report: score every employee, rank, summarize."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime

from attrition_pipeline.domains.attendance.store import AttendanceStore
from attrition_pipeline.domains.attrition.models import (
    CompanyRiskReport,
    RiskAssessment,
    RiskSummary,
)
from attrition_pipeline.domains.attrition.scoring import score_employee
from attrition_pipeline.domains.attrition.store import ReportStore, StoredReport
from attrition_pipeline.utils.types import RiskLevel

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4
DEFAULT_HIGH_RISK_THRESHOLD = 70


def _summarize(assessments: list[RiskAssessment]) -> RiskSummary:
    levels = [a.risk_level for a in assessments]
    return RiskSummary(
        high=levels.count(RiskLevel.HIGH),
        moderate=levels.count(RiskLevel.MODERATE),
        low=levels.count(RiskLevel.LOW),
        insufficient_data=levels.count(RiskLevel.INSUFFICIENT_DATA),
    )


def generate_report(
    store: AttendanceStore,
    organization_id: str,
    months: int = 3,
    as_of: date | None = None,
    max_workers: int | None = None,
) -> CompanyRiskReport:
    """Score every employee of ``organization_id`` and rank them by score.

    Employees are scored concurrently; results keep discovery order until
    the stable sort, so the ranking does not depend on completion order.
    An employee whose scoring raises is logged and left out.
    """
    employee_ids = store.list_employees(organization_id)

    def _score_one(employee_id: str) -> RiskAssessment | None:
        try:
            return score_employee(store, organization_id, employee_id, months, as_of)
        except Exception:
            logger.exception("Error calculating risk for employee %s", employee_id)
            return None

    with ThreadPoolExecutor(max_workers=max_workers or DEFAULT_MAX_WORKERS) as executor:
        outcomes = list(executor.map(_score_one, employee_ids))

    scored = [a for a in outcomes if a is not None]
    ranked = sorted(scored, key=lambda a: a.score, reverse=True)

    report = CompanyRiskReport(
        organization_id=organization_id,
        period=months,
        total_employees=len(employee_ids),
        summary=_summarize(ranked),
        employees=tuple(ranked),
        generated_at=datetime.now(),
    )
    logger.info(
        "Attrition report for %s: %d employees, %d scored, %d high risk",
        organization_id,
        report.total_employees,
        len(ranked),
        report.summary.high,
    )
    return report


def publish_report(
    store: ReportStore,
    organization_id: str,
    months: int = 3,
    as_of: date | None = None,
    max_workers: int | None = None,
) -> tuple[str, CompanyRiskReport]:
    """Generate a report and hand the snapshot to the store."""
    report = generate_report(store, organization_id, months, as_of, max_workers)
    report_id = store.save_report(report)
    return report_id, report


def high_risk(
    report: CompanyRiskReport,
    threshold: float = DEFAULT_HIGH_RISK_THRESHOLD,
) -> list[RiskAssessment]:
    """Assessments at or above ``threshold``, in report order. No rescoring."""
    return [a for a in report.employees if a.score >= threshold]


def report_history(
    store: ReportStore,
    organization_id: str,
    limit: int = 10,
) -> list[StoredReport]:
    return store.list_reports(organization_id, limit=limit)
