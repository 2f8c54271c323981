from datetime import date

from attrition_pipeline.domains.attendance.store import InMemoryAttendanceStore
from tests.factories import A, P, make_history, make_record


def test_upsert_replaces_same_employee_day(store):
    store.upsert_records("acme", [make_record("E1", date(2024, 3, 4), P)])
    written = store.upsert_records("acme", [make_record("E1", date(2024, 3, 4), A)])

    assert written == 1
    records = store.fetch_records("acme", "E1", date(2024, 1, 1), date(2024, 12, 31))
    assert [r.status for r in records] == [A]


def test_organizations_are_isolated(store):
    store.upsert_records("acme", make_history([P] * 3, employee_id="E1"))
    store.upsert_records("globex", make_history([P] * 3, employee_id="E2"))

    assert store.list_employees("acme") == ["E1"]
    assert store.has_employee("globex", "E2")
    assert not store.has_employee("acme", "E2")
    assert store.list_employees("initech") == []


def test_fetch_is_inclusive_and_date_ordered(store):
    days = [date(2024, 3, 6), date(2024, 3, 4), date(2024, 3, 5), date(2024, 3, 7)]
    store.upsert_records("acme", [make_record("E1", d) for d in days])

    records = store.fetch_records("acme", "E1", date(2024, 3, 4), date(2024, 3, 6))

    assert [r.date for r in records] == [date(2024, 3, 4), date(2024, 3, 5), date(2024, 3, 6)]


def test_fetch_for_unknown_employee_is_empty(store):
    assert store.fetch_records("acme", "nobody", date.min, date.max) == []


def test_query_spans_employees_newest_first():
    store = InMemoryAttendanceStore()
    store.upsert_records("acme", make_history([P] * 3, employee_id="E1"))
    store.upsert_records("acme", make_history([A] * 2, employee_id="E2"))
    store.upsert_records("globex", make_history([P] * 4, employee_id="E9"))

    records = store.query_records("acme")

    assert len(records) == 5
    assert [r.date for r in records] == sorted((r.date for r in records), reverse=True)
    assert {r.employee_id for r in records} == {"E1", "E2"}


def test_query_filters_by_employee_and_inclusive_bounds(store):
    days = [date(2024, 3, 4), date(2024, 3, 5), date(2024, 3, 6), date(2024, 3, 7)]
    store.upsert_records("acme", [make_record("E1", d) for d in days])
    store.upsert_records("acme", [make_record("E2", d) for d in days])

    records = store.query_records("acme", employee_id="E1", start=date(2024, 3, 5), end=date(2024, 3, 6))

    assert [(r.employee_id, r.date) for r in records] == [
        ("E1", date(2024, 3, 6)),
        ("E1", date(2024, 3, 5)),
    ]
    assert [r.date for r in store.query_records("acme", end=date(2024, 3, 4))] == [date(2024, 3, 4)] * 2
    assert store.query_records("acme", employee_id="ghost") == []
