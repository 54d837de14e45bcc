from intern_attendance.attendance.factory import SessionStrategyFactory
from intern_attendance.attendance.model import SessionTimes
from intern_attendance.attendance.strategies.late_strategy import LateStrategy
from intern_attendance.attendance.strategies.normal_strategy import PresentStrategy
from intern_attendance.attendance.strategies.terminal_strategy import TerminalStatusStrategy
from intern_attendance.attendance.strategies.unmarked_strategy import NotMarkedStrategy
from intern_attendance.attendance.timecodec import ClockTime
from intern_attendance.core.enums import SessionStatus


def test_factory_clocked_session_is_present():
    times = SessionTimes(ClockTime(8, 0), None)

    strategy = SessionStrategyFactory().for_session(times=times, asserted=None)

    assert isinstance(strategy, PresentStrategy)
    assert strategy.decide(times=times) == SessionStatus.PRESENT


def test_factory_late_only_when_asserted():
    times = SessionTimes(ClockTime(9, 30), ClockTime(12, 0))

    strategy = SessionStrategyFactory().for_session(times=times, asserted=SessionStatus.LATE)

    assert isinstance(strategy, LateStrategy)


def test_factory_empty_session_is_not_marked():
    strategy = SessionStrategyFactory().for_session(times=SessionTimes(), asserted=SessionStatus.LATE)

    assert isinstance(strategy, NotMarkedStrategy)


def test_factory_terminal_assertion_wins():
    times = SessionTimes(ClockTime(13, 0), None)

    strategy = SessionStrategyFactory().for_session(times=times, asserted=SessionStatus.SICK)

    assert isinstance(strategy, TerminalStatusStrategy)
    assert strategy.decide(times=times) == SessionStatus.SICK
