from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from intern_attendance.attendance.model import AttendanceRecord
from intern_attendance.attendance.service import AttendanceService
from intern_attendance.core.enums import Session, VerificationStatus
from intern_attendance.verification.service import VerificationService


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryAttendance:
    """Thread-safe stand-in for MySQLAttendanceRepository."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[int, AttendanceRecord] = {}
        self._by_key: dict[tuple[int, int, date], int] = {}
        self._id = 0

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_id.get(int(record_id))

    def get_for_key(self, subject_id: int, organization_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            record_id = self._by_key.get((subject_id, organization_id, attendance_date))
            return self._by_id.get(record_id) if record_id else None

    def create_if_absent(self, *, subject_id: int, organization_id: int, attendance_date: date) -> bool:
        with self._lock:
            key = (subject_id, organization_id, attendance_date)
            if key in self._by_key:
                return False
            self._id += 1
            self._by_id[self._id] = AttendanceRecord(
                record_id=self._id,
                subject_id=subject_id,
                organization_id=organization_id,
                attendance_date=attendance_date,
            )
            self._by_key[key] = self._id
            return True

    def update_session(self, *, record_id: int, expected_version: int, write) -> bool:
        with self._lock:
            rec = self._by_id.get(record_id)
            if rec is None or rec.version != expected_version:
                return False
            prefix = "am" if write.session == Session.AM else "pm"
            changes = {
                f"{prefix}_time_in": write.time_in,
                f"{prefix}_time_out": write.time_out,
                f"{prefix}_status": write.status,
                "overall_status": write.overall_status,
                "total_hours": write.total_hours,
                "version": rec.version + 1,
            }
            if write.reset_verification:
                changes.update(verification_status=VerificationStatus.PENDING, verified_by=None, verified_at=None)
            self._by_id[record_id] = replace(rec, **changes)
            return True

    def _bump(self, record_id: int, **changes) -> bool:
        with self._lock:
            rec = self._by_id.get(int(record_id))
            if rec is None:
                return False
            self._by_id[rec.record_id] = replace(rec, version=rec.version + 1, **changes)
            return True

    def update_notes(self, *, record_id: int, notes) -> bool:
        return self._bump(record_id, notes=notes)

    def update_verification(self, *, record_id: int, status, verified_by, verified_at, remarks) -> bool:
        return self._bump(
            record_id,
            verification_status=status,
            verified_by=verified_by,
            verified_at=verified_at,
            verification_remarks=remarks,
        )

    def update_remarks(self, *, record_id: int, remarks) -> bool:
        return self._bump(record_id, verification_remarks=remarks)

    def list_for_subject(self, *, subject_id, organization_id, date_from=None, date_to=None):
        with self._lock:
            items = [
                r
                for r in self._by_id.values()
                if r.subject_id == subject_id
                and r.organization_id == organization_id
                and (date_from is None or r.attendance_date >= date_from)
                and (date_to is None or r.attendance_date <= date_to)
            ]
        items.sort(key=lambda r: r.attendance_date, reverse=True)
        return items

    def list_for_organization(self, *, organization_id, date_from, date_to, verification_status=None):
        with self._lock:
            items = [
                r
                for r in self._by_id.values()
                if r.organization_id == organization_id
                and date_from <= r.attendance_date <= date_to
                and (verification_status is None or r.verification_status == verification_status)
            ]
        items.sort(key=lambda r: (-r.attendance_date.toordinal(), r.subject_id))
        return items


@pytest.fixture()
def clock():
    return FixedClock(datetime(2026, 2, 2, 8, 5, 0))


@pytest.fixture()
def repo():
    return InMemoryAttendance()


@pytest.fixture()
def service(repo, clock):
    return AttendanceService(repo, clock=clock)


@pytest.fixture()
def verification(repo, clock):
    return VerificationService(repo, clock=clock)
