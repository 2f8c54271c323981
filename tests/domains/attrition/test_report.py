import dataclasses
import logging
from datetime import date

import pytest

from attrition_pipeline.domains import attrition
from attrition_pipeline.domains.attrition.report import (
    generate_report,
    high_risk,
    publish_report,
    report_history,
)
from attrition_pipeline.domains.attrition.store import InMemoryReportStore
from attrition_pipeline.utils.types import RiskLevel
from tests.factories import AS_OF, A, P, UL, make_history, make_record


class FlakyStore(InMemoryReportStore):
    def __init__(self, failing: str) -> None:
        super().__init__()
        self.failing = failing

    def fetch_records(self, organization_id, employee_id, start, end):
        if employee_id == self.failing:
            raise RuntimeError("storage timeout")
        return super().fetch_records(organization_id, employee_id, start, end)


def _load_company(store) -> None:
    store.upsert_records("acme", make_history([P] * 63, employee_id="STEADY"))
    store.upsert_records("acme", make_history(([A] * 5 + [UL] * 5) * 6, employee_id="RISKY"))
    store.upsert_records("acme", make_history([A] + [P] * 19, employee_id="MILD"))
    store.upsert_records("acme", make_history([P] * 63, employee_id="TWIN"))
    store.upsert_records("acme", [make_record("STALE", date(2023, 1, 2))])


def test_report_ranks_by_score_descending(store):
    _load_company(store)

    report = generate_report(store, "acme", as_of=AS_OF)

    scores = [a.score for a in report.employees]
    assert scores == sorted(scores, reverse=True)
    assert report.employees[0].employee_id == "RISKY"
    assert report.total_employees == 5
    assert report.period == 3


def test_ties_keep_discovery_order(store):
    _load_company(store)

    report = generate_report(store, "acme", as_of=AS_OF)

    tail = [a.employee_id for a in report.employees if a.score == 0.0]
    assert tail == ["STEADY", "TWIN", "STALE"]


def test_summary_counts_every_level(store):
    _load_company(store)

    summary = generate_report(store, "acme", as_of=AS_OF).summary

    assert summary.high == 1
    assert summary.insufficient_data == 1
    assert summary.high + summary.moderate + summary.low + summary.insufficient_data == 5


def test_failing_employee_is_logged_and_left_out(caplog):
    store = FlakyStore(failing="RISKY")
    _load_company(store)

    with caplog.at_level(logging.ERROR):
        report = generate_report(store, "acme", as_of=AS_OF)

    assert "RISKY" not in [a.employee_id for a in report.employees]
    assert len(report.employees) == 4
    assert report.total_employees == 5
    assert "Error calculating risk for employee RISKY" in caplog.text


def test_worker_count_does_not_change_the_report(store):
    _load_company(store)

    sequential = generate_report(store, "acme", as_of=AS_OF, max_workers=1)
    parallel = generate_report(store, "acme", as_of=AS_OF, max_workers=8)

    assert sequential.employees == parallel.employees
    assert sequential.summary == parallel.summary


def test_empty_organization_produces_empty_report(store):
    report = generate_report(store, "nobody", as_of=AS_OF)

    assert report.total_employees == 0
    assert report.employees == ()
    assert report.to_dict()["period"] == "3 months"


def test_high_risk_filters_without_rescoring(store):
    _load_company(store)
    report = generate_report(store, "acme", as_of=AS_OF)

    assert [a.employee_id for a in high_risk(report)] == ["RISKY"]
    assert high_risk(report, threshold=0) == list(report.employees)
    assert high_risk(report, threshold=100) == []


def test_high_risk_threshold_is_inclusive(store):
    _load_company(store)
    report = generate_report(store, "acme", as_of=AS_OF)
    top = report.employees[0]

    assert high_risk(report, threshold=top.score) == [top]


def test_published_reports_are_listed_newest_first(store):
    _load_company(store)

    first_id, _ = publish_report(store, "acme", as_of=AS_OF)
    second_id, second = publish_report(store, "acme", as_of=AS_OF)

    history = report_history(store, "acme")
    assert [r.report_id for r in history] == [second_id, first_id]
    assert history[0].report is second
    assert report_history(store, "acme", limit=1)[0].report_id == second_id


def test_report_snapshot_is_immutable(store):
    _load_company(store)
    report = generate_report(store, "acme", as_of=AS_OF)

    with pytest.raises(dataclasses.FrozenInstanceError):
        report.period = 6
    with pytest.raises(dataclasses.FrozenInstanceError):
        report.employees[0].score = 0.0


def test_insufficient_data_sorts_with_zero_score(store):
    _load_company(store)
    report = generate_report(store, "acme", as_of=AS_OF)

    stale = next(a for a in report.employees if a.employee_id == "STALE")
    assert stale.risk_level is RiskLevel.INSUFFICIENT_DATA
    assert report.employees[-1] is stale


def test_domain_run_publishes_for_the_window(store):
    _load_company(store)

    report_id, report = attrition.run(store, "acme", as_of=AS_OF, max_workers=2)

    assert report.employees[0].employee_id == "RISKY"
    assert report_history(store, "acme")[0].report_id == report_id


def test_domain_validate_skips_empty_organization(store):
    assert attrition.validate(store, "acme")["status"] == "skipped"
    _load_company(store)
    assert attrition.validate(store, "acme") == {"status": "ok", "employees": 5}
