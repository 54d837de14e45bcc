from __future__ import annotations

from ...core.enums import SessionStatus
from ..model import SessionTimes
from .base import SessionStatusStrategy


class PresentStrategy(SessionStatusStrategy):
    """Session with at least one clock time."""

    def decide(self, *, times: SessionTimes) -> SessionStatus:
        return SessionStatus.PRESENT
