from __future__ import annotations

from ...core.enums import SessionStatus
from ..model import SessionTimes
from .base import SessionStatusStrategy


class TerminalStatusStrategy(SessionStatusStrategy):
    """Absent, leave or sick: the asserted status is kept as is."""

    def __init__(self, status: SessionStatus):
        if not status.is_terminal:
            raise ValueError(f"{status.value} is not a terminal session status")
        self._status = status

    def decide(self, *, times: SessionTimes) -> SessionStatus:
        return self._status
