from __future__ import annotations

from ...core.enums import SessionStatus
from ..model import SessionTimes
from .base import SessionStatusStrategy


class LateStrategy(SessionStatusStrategy):
    """Clocked session that an upstream caller asserted as late."""

    def decide(self, *, times: SessionTimes) -> SessionStatus:
        return SessionStatus.LATE
