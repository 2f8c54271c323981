from datetime import datetime

from attrition_pipeline.domains.attendance.store import AttendanceStore
from attrition_pipeline.domains.attrition.models import CompanyRiskReport, RiskSummary
from attrition_pipeline.domains.attrition.store import InMemoryReportStore


def _empty_report(organization_id: str) -> CompanyRiskReport:
    return CompanyRiskReport(
        organization_id=organization_id,
        period=3,
        total_employees=0,
        summary=RiskSummary(high=0, moderate=0, low=0, insufficient_data=0),
        employees=(),
        generated_at=datetime(2024, 6, 1, 9, 0),
    )


def test_reports_listed_newest_first_and_limited(store):
    first = store.save_report(_empty_report("acme"))
    second = store.save_report(_empty_report("acme"))
    store.save_report(_empty_report("globex"))

    history = store.list_reports("acme")
    assert [r.report_id for r in history] == [second, first]
    assert [r.report_id for r in store.list_reports("acme", limit=1)] == [second]
    assert first != second


def test_saved_snapshot_keeps_report_identity(store):
    report = _empty_report("acme")
    report_id = store.save_report(report)

    stored = store.list_reports("acme")[0]
    assert stored.report_id == report_id
    assert stored.organization_id == "acme"
    assert stored.report is report


def test_report_store_is_an_attendance_store():
    store: AttendanceStore = InMemoryReportStore()
    assert store.list_employees("acme") == []
    assert store.query_records("acme") == []
