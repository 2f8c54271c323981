"""Persistence of published attrition reports."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from attrition_pipeline.domains.attendance.store import AttendanceStore, InMemoryAttendanceStore
from attrition_pipeline.domains.attrition.models import CompanyRiskReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredReport:
    report_id: str
    organization_id: str
    saved_at: datetime
    report: CompanyRiskReport


class ReportStore(AttendanceStore, Protocol):
    """An attendance store that also keeps report snapshots."""

    def save_report(self, report: CompanyRiskReport) -> str: ...

    def list_reports(self, organization_id: str, limit: int = 10) -> list[StoredReport]:
        """Saved snapshots, newest first."""
        ...


class InMemoryReportStore(InMemoryAttendanceStore):
    def __init__(self) -> None:
        super().__init__()
        self._reports: list[StoredReport] = []

    def save_report(self, report: CompanyRiskReport) -> str:
        stored = StoredReport(
            report_id=uuid.uuid4().hex,
            organization_id=report.organization_id,
            saved_at=datetime.now(),
            report=report,
        )
        with self._lock:
            self._reports.append(stored)
        logger.info("Saved attrition report %s for %s", stored.report_id, report.organization_id)
        return stored.report_id

    def list_reports(self, organization_id: str, limit: int = 10) -> list[StoredReport]:
        with self._lock:
            matching = [r for r in self._reports if r.organization_id == organization_id]
        return list(reversed(matching))[:limit]
