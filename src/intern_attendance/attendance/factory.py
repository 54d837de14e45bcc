from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import SessionStatus
from .model import SessionTimes
from .strategies.base import SessionStatusStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import PresentStrategy
from .strategies.terminal_strategy import TerminalStatusStrategy
from .strategies.unmarked_strategy import NotMarkedStrategy


@dataclass
class SessionStrategyFactory:
    """Factory Pattern: choose the status strategy for one session.

    Late is an assertion made by a caller, never derived from clock thresholds.
    """

    def for_session(self, *, times: SessionTimes, asserted: Optional[SessionStatus]) -> SessionStatusStrategy:
        if asserted is not None and asserted.is_terminal:
            return TerminalStatusStrategy(asserted)
        if not times.has_any:
            return NotMarkedStrategy()
        if asserted == SessionStatus.LATE:
            return LateStrategy()
        return PresentStrategy()
