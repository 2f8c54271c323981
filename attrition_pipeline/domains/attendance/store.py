"""Attendance store contract and an in-memory implementation.

The pipeline never talks to a database directly; callers inject anything
that satisfies ``AttendanceStore``.
"""

import logging
import threading
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Protocol

from attrition_pipeline.domains.attendance.models import AttendanceRecord

logger = logging.getLogger(__name__)


class AttendanceStore(Protocol):
    def upsert_records(self, organization_id: str, records: Iterable[AttendanceRecord]) -> int:
        """Insert or replace records keyed by employee and date; returns the count written."""
        ...

    def list_employees(self, organization_id: str) -> list[str]: ...

    def has_employee(self, organization_id: str, employee_id: str) -> bool: ...

    def fetch_records(
        self,
        organization_id: str,
        employee_id: str,
        start: date,
        end: date,
    ) -> Sequence[AttendanceRecord]:
        """Records with ``start <= date <= end``, oldest first."""
        ...

    def query_records(
        self,
        organization_id: str,
        employee_id: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> Sequence[AttendanceRecord]:
        """Organization-wide read, newest first. Every filter is optional."""
        ...


class InMemoryAttendanceStore:
    """Dict-backed store. Writes are serialized per instance."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # organization -> employee -> date -> record
        self._records: dict[str, dict[str, dict[date, AttendanceRecord]]] = {}

    def upsert_records(self, organization_id: str, records: Iterable[AttendanceRecord]) -> int:
        written = 0
        with self._lock:
            org = self._records.setdefault(organization_id, {})
            for record in records:
                org.setdefault(record.employee_id, {})[record.date] = record
                written += 1
        logger.info("Upserted %d attendance records for %s", written, organization_id)
        return written

    def list_employees(self, organization_id: str) -> list[str]:
        with self._lock:
            return list(self._records.get(organization_id, {}))

    def has_employee(self, organization_id: str, employee_id: str) -> bool:
        with self._lock:
            return employee_id in self._records.get(organization_id, {})

    def fetch_records(
        self,
        organization_id: str,
        employee_id: str,
        start: date,
        end: date,
    ) -> list[AttendanceRecord]:
        with self._lock:
            days = dict(self._records.get(organization_id, {}).get(employee_id, {}))
        return [days[d] for d in sorted(days) if start <= d <= end]

    def query_records(
        self,
        organization_id: str,
        employee_id: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[AttendanceRecord]:
        with self._lock:
            employees = self._records.get(organization_id, {})
            selected = [employees.get(employee_id, {})] if employee_id else list(employees.values())
            records = [r for days in selected for r in days.values()]

        matching = [
            r for r in records
            if (start is None or r.date >= start) and (end is None or r.date <= end)
        ]
        # same-day records keep employee discovery order
        return sorted(matching, key=lambda r: r.date, reverse=True)
