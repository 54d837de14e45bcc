from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import SessionStatus
from ..model import SessionTimes


class SessionStatusStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a session's status."""

    @abstractmethod
    def decide(self, *, times: SessionTimes) -> SessionStatus:
        raise NotImplementedError
