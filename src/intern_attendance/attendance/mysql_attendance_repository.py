from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Session, SessionStatus, VerificationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, SessionWrite
from .repository import AttendanceRepository
from .timecodec import ClockTime, parse_canonical_time

_COLUMNS = """
    record_id, subject_id, organization_id, attendance_date,
    am_time_in, am_time_out, pm_time_in, pm_time_out,
    am_status, pm_status, overall_status, total_hours, notes,
    verification_status, verified_by, verified_at, verification_remarks,
    version, created_at, updated_at
"""

_SESSION_COLUMNS = {
    Session.AM: ("am_time_in", "am_time_out", "am_status"),
    Session.PM: ("pm_time_in", "pm_time_out", "pm_status"),
}


def _time_param(value: Optional[ClockTime]):
    return value.to_time() if value is not None else None


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        subject_id=int(r["subject_id"]),
        organization_id=int(r["organization_id"]),
        attendance_date=r["attendance_date"],
        am_time_in=parse_canonical_time(r.get("am_time_in")),
        am_time_out=parse_canonical_time(r.get("am_time_out")),
        pm_time_in=parse_canonical_time(r.get("pm_time_in")),
        pm_time_out=parse_canonical_time(r.get("pm_time_out")),
        am_status=SessionStatus(r.get("am_status") or SessionStatus.NOT_MARKED.value),
        pm_status=SessionStatus(r.get("pm_status") or SessionStatus.NOT_MARKED.value),
        overall_status=SessionStatus(r.get("overall_status") or SessionStatus.NOT_MARKED.value),
        total_hours=float(r.get("total_hours") or 0),
        notes=r.get("notes"),
        verification_status=VerificationStatus(r.get("verification_status") or VerificationStatus.PENDING.value),
        verified_by=int(r["verified_by"]) if r.get("verified_by") is not None else None,
        verified_at=r.get("verified_at"),
        verification_remarks=r.get("verification_remarks"),
        version=int(r.get("version") or 0),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_key(self, subject_id: int, organization_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE subject_id=%s AND organization_id=%s AND attendance_date=%s
                """,
                (int(subject_id), int(organization_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_if_absent(self, *, subject_id: int, organization_id: int, attendance_date: date) -> bool:
        # The unique key on (subject_id, organization_id, attendance_date) makes this idempotent.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(subject_id, organization_id, attendance_date)
                VALUES(%s,%s,%s)
                """,
                (int(subject_id), int(organization_id), attendance_date),
            )
            return cur.rowcount > 0

    def update_session(self, *, record_id: int, expected_version: int, write: SessionWrite) -> bool:
        in_col, out_col, status_col = _SESSION_COLUMNS[write.session]
        assignments = [
            f"{in_col}=%s",
            f"{out_col}=%s",
            f"{status_col}=%s",
            "overall_status=%s",
            "total_hours=%s",
            "version=version+1",
        ]
        if write.reset_verification:
            assignments += ["verification_status='pending'", "verified_by=NULL", "verified_at=NULL"]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance_records
                SET {", ".join(assignments)}
                WHERE record_id=%s AND version=%s
                """,
                (
                    _time_param(write.time_in),
                    _time_param(write.time_out),
                    write.status.value,
                    write.overall_status.value,
                    float(write.total_hours),
                    int(record_id),
                    int(expected_version),
                ),
            )
            return cur.rowcount > 0

    def update_notes(self, *, record_id: int, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET notes=%s, version=version+1 WHERE record_id=%s",
                (notes, int(record_id)),
            )
            return cur.rowcount > 0

    def update_verification(
        self,
        *,
        record_id: int,
        status: VerificationStatus,
        verified_by: int,
        verified_at: datetime,
        remarks: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET verification_status=%s, verified_by=%s, verified_at=%s,
                    verification_remarks=%s, version=version+1
                WHERE record_id=%s
                """,
                (status.value, int(verified_by), verified_at, remarks, int(record_id)),
            )
            return cur.rowcount > 0

    def update_remarks(self, *, record_id: int, remarks: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET verification_remarks=%s, version=version+1 WHERE record_id=%s",
                (remarks, int(record_id)),
            )
            return cur.rowcount > 0

    def list_for_subject(
        self,
        *,
        subject_id: int,
        organization_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["subject_id=%s", "organization_id=%s"]
        params: list[object] = [int(subject_id), int(organization_id)]

        if date_from is not None:
            clauses.append("attendance_date >= %s")
            params.append(date_from)
        if date_to is not None:
            clauses.append("attendance_date <= %s")
            params.append(date_to)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY attendance_date DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_organization(
        self,
        *,
        organization_id: int,
        date_from: date,
        date_to: date,
        verification_status: Optional[VerificationStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["organization_id=%s", "attendance_date BETWEEN %s AND %s"]
        params: list[object] = [int(organization_id), date_from, date_to]

        if verification_status is not None:
            clauses.append("verification_status=%s")
            params.append(verification_status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY attendance_date DESC, subject_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
