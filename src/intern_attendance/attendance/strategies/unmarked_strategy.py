from __future__ import annotations

from ...core.enums import SessionStatus
from ..model import SessionTimes
from .base import SessionStatusStrategy


class NotMarkedStrategy(SessionStatusStrategy):
    def decide(self, *, times: SessionTimes) -> SessionStatus:
        return SessionStatus.NOT_MARKED
