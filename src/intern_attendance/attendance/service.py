from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import local_clock
from ..common.validators import clean_text, require_date_range
from ..core.constants import MAX_WRITE_ATTEMPTS, STANDARD_WORKDAY_HOURS
from ..core.enums import Session, SessionStatus
from ..core.exceptions import (
    ConcurrentModification,
    InvalidSessionTransition,
    RecordNotFound,
    ValidationError,
)
from .aggregator import SessionAggregator, SessionInput, ensure_session_writable
from .model import (
    AttendanceRecord,
    AttendanceStats,
    HoursProgress,
    SessionTimes,
    SessionWrite,
    WorkingHours,
)
from .repository import AttendanceRepository
from .timecodec import ClockTime, coerce_clock_time

logger = logging.getLogger(__name__)


def _other(session: Session) -> Session:
    return Session.PM if session == Session.AM else Session.AM


def _carried_assertion(status: SessionStatus) -> Optional[SessionStatus]:
    # Stored assertions survive recomputation; present/not_marked are re-derived.
    if status == SessionStatus.LATE or status.is_terminal:
        return status
    return None


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        aggregator: SessionAggregator | None = None,
        working_hours: WorkingHours | None = None,
        clock: Callable[[], datetime] | None = None,
        max_write_attempts: int = MAX_WRITE_ATTEMPTS,
    ):
        self._attendance = attendance
        self._aggregator = aggregator or SessionAggregator()
        self._working_hours = working_hours or WorkingHours()
        self._clock = clock or local_clock()
        self._max_write_attempts = int(max_write_attempts)

    def today(self) -> date:
        return self._clock().date()

    def ensure_record(self, subject_id: int, organization_id: int, attendance_date: date) -> AttendanceRecord:
        created = self._attendance.create_if_absent(
            subject_id=int(subject_id),
            organization_id=int(organization_id),
            attendance_date=attendance_date,
        )
        if created:
            logger.info(
                "Attendance record created subject=%s organization=%s date=%s",
                subject_id,
                organization_id,
                attendance_date.isoformat(),
            )

        record = self._attendance.get_for_key(int(subject_id), int(organization_id), attendance_date)
        if not record:
            raise RecordNotFound(f"No attendance record for subject {subject_id} on {attendance_date.isoformat()}")
        return record

    def upsert_session(
        self,
        *,
        subject_id: int,
        organization_id: int,
        attendance_date: date,
        session: Session | str,
        time_in=None,
        time_out=None,
        asserted_status: SessionStatus | str | None = None,
    ) -> AttendanceRecord:
        """Create the day's record if needed and update one session only.

        ``None`` times leave the stored value unchanged. Re-sending the same
        inputs is a no-op.
        """

        try:
            session = Session(session)
            asserted = SessionStatus(asserted_status) if asserted_status is not None else None
        except ValueError as e:
            raise ValidationError(str(e))

        if asserted == SessionStatus.NOT_MARKED:
            raise ValidationError("Clearing a session status is an administrative override")

        afternoon = session == Session.PM
        new_in = coerce_clock_time(time_in, afternoon_session=afternoon)
        new_out = coerce_clock_time(time_out, afternoon_session=afternoon)

        if asserted is not None and asserted.is_terminal and (new_in is not None or new_out is not None):
            raise InvalidSessionTransition(
                f"{session.value} session cannot be marked {asserted.value} and receive times"
            )

        record = self.ensure_record(subject_id, organization_id, attendance_date)

        for _ in range(self._max_write_attempts):
            write = self._plan_session_write(record, session, new_in, new_out, asserted)
            if write is None:
                return record

            if self._attendance.update_session(record_id=record.record_id, expected_version=record.version, write=write):
                updated = self._attendance.get_by_id(record.record_id)
                if not updated:
                    raise RecordNotFound(f"Attendance record {record.record_id} disappeared")
                return updated

            logger.debug("Version conflict on record=%s session=%s; re-reading", record.record_id, session.value)
            fresh = self._attendance.get_by_id(record.record_id)
            if not fresh:
                raise RecordNotFound(f"Attendance record {record.record_id} disappeared")
            record = fresh

        raise ConcurrentModification(f"Attendance record {record.record_id} kept changing; try again")

    def _plan_session_write(
        self,
        record: AttendanceRecord,
        session: Session,
        new_in: Optional[ClockTime],
        new_out: Optional[ClockTime],
        asserted: Optional[SessionStatus],
    ) -> Optional[SessionWrite]:
        current_times = record.times_for(session)
        current_status = record.status_for(session)

        if new_in is not None or new_out is not None:
            ensure_session_writable(session, current_status)
        if current_status.is_terminal and asserted is not None and not asserted.is_terminal:
            raise InvalidSessionTransition(
                f"{session.value} session is marked {current_status.value}; it cannot become {asserted.value}"
            )

        if asserted is not None and asserted.is_terminal:
            times = SessionTimes()
            session_asserted = asserted
        else:
            times = SessionTimes(
                new_in if new_in is not None else current_times.time_in,
                new_out if new_out is not None else current_times.time_out,
            )
            session_asserted = asserted if asserted is not None else _carried_assertion(current_status)

        other = _other(session)
        inputs = {
            session: SessionInput(times, session_asserted),
            other: SessionInput(record.times_for(other), _carried_assertion(record.status_for(other))),
        }
        day = self._aggregator.aggregate(inputs[Session.AM], inputs[Session.PM])
        new_status = day.am_status if session == Session.AM else day.pm_status

        session_changed = times != current_times or new_status != current_status
        if (
            not session_changed
            and day.overall_status == record.overall_status
            and day.total_hours == record.total_hours
        ):
            return None

        return SessionWrite(
            session=session,
            time_in=times.time_in,
            time_out=times.time_out,
            status=new_status,
            overall_status=day.overall_status,
            total_hours=day.total_hours,
            reset_verification=session_changed,
        )

    def clock_in(
        self,
        subject_id: int,
        organization_id: int,
        *,
        now: datetime | None = None,
        asserted_status: SessionStatus | str | None = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        current = ClockTime(now.hour, now.minute)
        hours = self._working_hours
        if not hours.is_open_at(current):
            raise ValidationError(
                f"Clock-in is accepted between {hours.start.to_12h()} and {hours.end.to_12h()}"
            )
        session = hours.session_for(current)

        existing = self._attendance.get_for_key(int(subject_id), int(organization_id), now.date())
        if existing and existing.times_for(session).time_in is not None:
            raise ValidationError(f"Already clocked in for the {session.value} session today")

        return self.upsert_session(
            subject_id=subject_id,
            organization_id=organization_id,
            attendance_date=now.date(),
            session=session,
            time_in=current,
            asserted_status=asserted_status,
        )

    def clock_out(self, subject_id: int, organization_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or self._clock()
        current = ClockTime(now.hour, now.minute)

        record = self._attendance.get_for_key(int(subject_id), int(organization_id), now.date())
        if not record:
            raise ValidationError("Not clocked in today")

        # The session for the current time wins; otherwise the latest open one.
        preferred = self._working_hours.session_for(current)
        for session in (preferred, Session.PM, Session.AM):
            if record.times_for(session).is_open and not record.status_for(session).is_terminal:
                return self.upsert_session(
                    subject_id=subject_id,
                    organization_id=organization_id,
                    attendance_date=now.date(),
                    session=session,
                    time_out=current,
                )

        raise ValidationError("No open session to clock out of")

    def update_notes(
        self,
        subject_id: int,
        organization_id: int,
        attendance_date: date,
        notes: Optional[str],
    ) -> AttendanceRecord:
        record = self._attendance.get_for_key(int(subject_id), int(organization_id), attendance_date)
        if not record:
            raise RecordNotFound(f"No attendance record for subject {subject_id} on {attendance_date.isoformat()}")

        self._attendance.update_notes(record_id=record.record_id, notes=clean_text(notes))
        return self._attendance.get_by_id(record.record_id) or record

    def get_by_subject_and_range(
        self,
        subject_id: int,
        organization_id: int,
        date_from: date,
        date_to: date,
    ) -> Sequence[AttendanceRecord]:
        require_date_range(date_from, date_to)
        return self._attendance.list_for_subject(
            subject_id=int(subject_id),
            organization_id=int(organization_id),
            date_from=date_from,
            date_to=date_to,
        )

    def get_record(self, record_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise RecordNotFound(f"Attendance record {record_id} not found")
        return record

    def get_today(self, organization_id: int, *, today: date | None = None) -> Sequence[AttendanceRecord]:
        today = today or self.today()
        return self._attendance.list_for_organization(
            organization_id=int(organization_id),
            date_from=today,
            date_to=today,
        )

    def get_stats(self, organization_id: int, date_from: date, date_to: date) -> AttendanceStats:
        require_date_range(date_from, date_to)
        rows = self._attendance.list_for_organization(
            organization_id=int(organization_id),
            date_from=date_from,
            date_to=date_to,
        )
        counts = Counter(r.overall_status for r in rows)
        return AttendanceStats(
            total_records=len(rows),
            present=counts[SessionStatus.PRESENT],
            late=counts[SessionStatus.LATE],
            absent=counts[SessionStatus.ABSENT],
            leave=counts[SessionStatus.LEAVE],
            sick=counts[SessionStatus.SICK],
            not_marked=counts[SessionStatus.NOT_MARKED],
            total_hours=round(sum(r.total_hours for r in rows), 4),
        )

    def get_hours_progress(self, subject_id: int, organization_id: int, required_hours: float) -> HoursProgress:
        required = float(required_hours)
        if required < 0:
            raise ValidationError("required_hours must not be negative")

        rows = self._attendance.list_for_subject(subject_id=int(subject_id), organization_id=int(organization_id))
        accumulated = round(sum(r.total_hours for r in rows), 4)
        remaining = max(0.0, required - accumulated)
        return HoursProgress(
            required_hours=required,
            accumulated_hours=accumulated,
            remaining_hours=remaining,
            remaining_days=math.ceil(remaining / STANDARD_WORKDAY_HOURS),
        )
