from __future__ import annotations

from typing import List

from ..core.constants import DAY_WINDOW_END_MINUTE, DAY_WINDOW_START_MINUTE
from ..core.enums import Session
from .model import AttendanceRecord, TimelineInterval


def project(
    record: AttendanceRecord,
    *,
    window_start: int = DAY_WINDOW_START_MINUTE,
    window_end: int = DAY_WINDOW_END_MINUTE,
) -> List[TimelineInterval]:
    """Turn a record's completed sessions into display intervals.

    At most one interval per session, AM first, clipped to the day window and
    never overlapping. The record is not modified.
    """

    if window_start >= window_end:
        raise ValueError("window_start must be before window_end")

    intervals: List[TimelineInterval] = []
    for session in (Session.AM, Session.PM):
        times = record.times_for(session)
        if times.time_in is None or times.time_out is None:
            continue

        start = max(times.time_in.minute_of_day, window_start)
        end = min(times.time_out.minute_of_day, window_end)
        if intervals:
            start = max(start, intervals[-1].end_minute)
        if end <= start:
            continue
        intervals.append(TimelineInterval(start_minute=start, end_minute=end, session=session))

    return intervals
