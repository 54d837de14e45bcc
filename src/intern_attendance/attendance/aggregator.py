from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Session, SessionStatus
from ..core.exceptions import InvalidSessionTransition
from .factory import SessionStrategyFactory
from .model import SessionTimes
from .timecodec import ClockTime


@dataclass(frozen=True)
class SessionInput:
    times: SessionTimes
    asserted: Optional[SessionStatus] = None


@dataclass(frozen=True)
class DayAggregate:
    am_status: SessionStatus
    pm_status: SessionStatus
    overall_status: SessionStatus
    am_hours: Optional[float]
    pm_hours: Optional[float]
    total_hours: float


def session_duration_minutes(time_in: Optional[ClockTime], time_out: Optional[ClockTime]) -> Optional[int]:
    if time_in is None or time_out is None:
        return None
    return max(0, time_out.minute_of_day - time_in.minute_of_day)


def session_duration_hours(time_in: Optional[ClockTime], time_out: Optional[ClockTime]) -> Optional[float]:
    """(out - in) in hours, never negative; None while an endpoint is missing."""
    minutes = session_duration_minutes(time_in, time_out)
    return None if minutes is None else minutes / 60


def total_hours(am: SessionTimes, pm: SessionTimes) -> float:
    minutes = [
        m
        for m in (
            session_duration_minutes(am.time_in, am.time_out),
            session_duration_minutes(pm.time_in, pm.time_out),
        )
        if m is not None
    ]
    # ClockTime has minute resolution, so the sum is already whole minutes.
    return sum(minutes) / 60


def resolve_overall_status(am: SessionStatus, pm: SessionStatus) -> SessionStatus:
    """Summarize a day from its two session statuses (first match wins)."""

    if am == SessionStatus.ABSENT and pm == SessionStatus.ABSENT:
        return SessionStatus.ABSENT

    clocked_or_unmarked = {SessionStatus.NOT_MARKED, SessionStatus.PRESENT, SessionStatus.LATE}
    if (am.is_attended and pm in clocked_or_unmarked) or (pm.is_attended and am in clocked_or_unmarked):
        if SessionStatus.LATE in (am, pm):
            return SessionStatus.LATE
        return SessionStatus.PRESENT

    for status, other in ((am, pm), (pm, am)):
        if status in (SessionStatus.LEAVE, SessionStatus.SICK) and other != SessionStatus.ABSENT:
            return status

    return SessionStatus.NOT_MARKED


def ensure_session_writable(session: Session, status: SessionStatus) -> None:
    if status.is_terminal:
        raise InvalidSessionTransition(
            f"{session.value} session is marked {status.value}; time entries are not accepted"
        )


class SessionAggregator:
    """Derive session statuses, durations and the day summary from four times."""

    def __init__(self, strategy_factory: SessionStrategyFactory | None = None):
        self._factory = strategy_factory or SessionStrategyFactory()

    def session_status(self, session_input: SessionInput) -> SessionStatus:
        strategy = self._factory.for_session(times=session_input.times, asserted=session_input.asserted)
        return strategy.decide(times=session_input.times)

    def aggregate(self, am: SessionInput, pm: SessionInput) -> DayAggregate:
        am_status = self.session_status(am)
        pm_status = self.session_status(pm)
        return DayAggregate(
            am_status=am_status,
            pm_status=pm_status,
            overall_status=resolve_overall_status(am_status, pm_status),
            am_hours=session_duration_hours(am.times.time_in, am.times.time_out),
            pm_hours=session_duration_hours(pm.times.time_in, pm.times.time_out),
            total_hours=total_hours(am.times, pm.times),
        )
