from __future__ import annotations

from enum import Enum


class Session(str, Enum):
    """One of the two daily attendance windows."""

    AM = "AM"
    PM = "PM"


class SessionStatus(str, Enum):
    """Per-session (and overall day) attendance status stored in the DB."""

    NOT_MARKED = "not_marked"
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    LEAVE = "leave"
    SICK = "sick"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def is_attended(self) -> bool:
        return self in (SessionStatus.PRESENT, SessionStatus.LATE)


TERMINAL_STATUSES = frozenset({SessionStatus.ABSENT, SessionStatus.LEAVE, SessionStatus.SICK})


class VerificationStatus(str, Enum):
    """Supervisor verification state of a day's record."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DENIED = "denied"
