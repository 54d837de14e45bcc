from __future__ import annotations

from datetime import date

import pytest

from intern_attendance.attendance.model import AttendanceRecord, TimelineInterval
from intern_attendance.attendance.timecodec import ClockTime
from intern_attendance.attendance.timeline import project
from intern_attendance.core.enums import Session


def _record(am=(None, None), pm=(None, None)):
    return AttendanceRecord(
        record_id=1,
        subject_id=7,
        organization_id=3,
        attendance_date=date(2026, 2, 2),
        am_time_in=am[0],
        am_time_out=am[1],
        pm_time_in=pm[0],
        pm_time_out=pm[1],
    )


def test_two_completed_sessions():
    rec = _record(am=(ClockTime(8, 0), ClockTime(12, 0)), pm=(ClockTime(13, 0), ClockTime(17, 0)))

    assert project(rec) == [
        TimelineInterval(480, 720, Session.AM),
        TimelineInterval(780, 1020, Session.PM),
    ]


def test_open_sessions_are_skipped():
    rec = _record(am=(ClockTime(8, 0), None), pm=(ClockTime(13, 0), ClockTime(15, 0)))

    assert project(rec) == [TimelineInterval(780, 900, Session.PM)]


def test_clipped_to_day_window():
    rec = _record(am=(ClockTime(6, 30), ClockTime(9, 0)))

    assert project(rec) == [TimelineInterval(420, 540, Session.AM)]


def test_interval_outside_window_is_dropped():
    rec = _record(am=(ClockTime(5, 0), ClockTime(6, 0)))

    assert project(rec) == []


def test_overlapping_pm_starts_at_am_end():
    rec = _record(am=(ClockTime(8, 0), ClockTime(13, 0)), pm=(ClockTime(12, 30), ClockTime(17, 0)))

    intervals = project(rec)

    assert intervals[1] == TimelineInterval(780, 1020, Session.PM)
    assert intervals[0].end_minute <= intervals[1].start_minute


def test_custom_window_and_record_untouched():
    rec = _record(am=(ClockTime(8, 0), ClockTime(12, 0)))

    assert project(rec, window_start=540, window_end=660) == [TimelineInterval(540, 660, Session.AM)]
    assert rec.am_time_in == ClockTime(8, 0)


def test_empty_window_is_rejected():
    with pytest.raises(ValueError):
        project(_record(), window_start=600, window_end=600)
