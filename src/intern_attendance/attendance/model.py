from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Session, SessionStatus, VerificationStatus
from ..core.exceptions import ValidationError
from .timecodec import ClockTime


@dataclass(frozen=True)
class SessionTimes:
    time_in: Optional[ClockTime] = None
    time_out: Optional[ClockTime] = None

    @property
    def has_any(self) -> bool:
        return self.time_in is not None or self.time_out is not None

    @property
    def is_open(self) -> bool:
        return self.time_in is not None and self.time_out is None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one intern's attendance for one calendar day."""

    record_id: int
    subject_id: int
    organization_id: int
    attendance_date: date
    am_time_in: Optional[ClockTime] = None
    am_time_out: Optional[ClockTime] = None
    pm_time_in: Optional[ClockTime] = None
    pm_time_out: Optional[ClockTime] = None
    am_status: SessionStatus = SessionStatus.NOT_MARKED
    pm_status: SessionStatus = SessionStatus.NOT_MARKED
    overall_status: SessionStatus = SessionStatus.NOT_MARKED
    total_hours: float = 0.0
    notes: Optional[str] = None
    verification_status: VerificationStatus = VerificationStatus.PENDING
    verified_by: Optional[int] = None
    verified_at: Optional[datetime] = None
    verification_remarks: Optional[str] = None
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def times_for(self, session: Session) -> SessionTimes:
        if session == Session.AM:
            return SessionTimes(self.am_time_in, self.am_time_out)
        return SessionTimes(self.pm_time_in, self.pm_time_out)

    def status_for(self, session: Session) -> SessionStatus:
        return self.am_status if session == Session.AM else self.pm_status


@dataclass(frozen=True)
class SessionWrite:
    """Columns written by a session-scoped update (one session only)."""

    session: Session
    time_in: Optional[ClockTime]
    time_out: Optional[ClockTime]
    status: SessionStatus
    overall_status: SessionStatus
    total_hours: float
    reset_verification: bool


@dataclass(frozen=True)
class AttendanceStats:
    """Read-model: per-status counts for an organization and date range."""

    total_records: int
    present: int
    late: int
    absent: int
    leave: int
    sick: int
    not_marked: int
    total_hours: float


@dataclass(frozen=True)
class HoursProgress:
    required_hours: float
    accumulated_hours: float
    remaining_hours: float
    remaining_days: int


@dataclass(frozen=True)
class WorkingHours:
    """Organization day layout: AM runs start..break_start, PM break_end..end."""

    start: ClockTime = ClockTime(7, 0)
    break_start: ClockTime = ClockTime(11, 0)
    break_end: ClockTime = ClockTime(13, 0)
    end: ClockTime = ClockTime(19, 0)

    def __post_init__(self) -> None:
        if not (self.start < self.break_start <= self.break_end < self.end):
            raise ValidationError("Working hours must satisfy start < break_start <= break_end < end")

    def is_open_at(self, now: ClockTime) -> bool:
        return self.start <= now < self.end

    def session_for(self, now: ClockTime) -> Session:
        return Session.AM if now < self.break_start else Session.PM


@dataclass(frozen=True)
class TimelineInterval:
    start_minute: int
    end_minute: int
    session: Session
