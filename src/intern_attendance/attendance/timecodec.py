"""Time normalization for attendance sessions.

Session endpoints submit times as 12-hour text ("08:00 AM"), sometimes without
the AM/PM marker. Everything stored by the engine is a canonical 24-hour
``ClockTime``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import time, timedelta
from typing import Any, Optional

from ..core.constants import PLACEHOLDER_TIMES
from ..core.exceptions import MalformedTime

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{1,2})\s*([AaPp][Mm])?$")


@dataclass(frozen=True, order=True)
class ClockTime:
    """Canonical time of day (24-hour)."""

    hour: int
    minute: int
    # Set when AM/PM was inferred from the session instead of an explicit marker.
    inferred: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise MalformedTime(f"Time out of range: {self.hour}:{self.minute}")

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def to_24h(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def to_12h(self) -> str:
        hour12 = self.hour % 12 or 12
        period = "AM" if self.hour < 12 else "PM"
        return f"{hour12:02d}:{self.minute:02d} {period}"

    def to_time(self) -> time:
        return time(hour=self.hour, minute=self.minute)


def is_placeholder(value: Optional[str]) -> bool:
    return value is None or value.strip() in PLACEHOLDER_TIMES


def parse_clock_time(value: Optional[str], *, afternoon_session: Optional[bool] = None) -> Optional[ClockTime]:
    """Parse "hh:mm" with an optional AM/PM marker into a ClockTime.

    An explicit marker is authoritative. Without one, ``afternoon_session``
    decides: hours 1-11 of an afternoon session move to the afternoon, 12 stays
    noon. Such results are flagged ``inferred`` and logged for audit.

    Returns None for empty/placeholder input ("not set").
    """

    if is_placeholder(value):
        return None

    text = value.strip()
    match = _TIME_RE.match(text)
    if not match:
        raise MalformedTime(f"Invalid time (hh:mm AM/PM): {value!r}")

    hour = int(match.group(1))
    minute = int(match.group(2))
    marker = match.group(3)

    if not 0 <= hour <= 12 or not 0 <= minute <= 59:
        raise MalformedTime(f"Invalid time (hh:mm AM/PM): {value!r}")

    if marker is not None:
        if hour == 0:
            raise MalformedTime(f"Hour 0 is not valid with an AM/PM marker: {value!r}")
        if marker.upper() == "AM":
            return ClockTime(0 if hour == 12 else hour, minute)
        return ClockTime(hour if hour == 12 else hour + 12, minute)

    if afternoon_session is None:
        raise MalformedTime(f"Time without AM/PM marker needs a session: {value!r}")

    if afternoon_session and 1 <= hour <= 11:
        hour += 12

    parsed = ClockTime(hour, minute, inferred=True)
    logger.warning(
        "Low-confidence time parse: %r read as %s (afternoon_session=%s)",
        value,
        parsed.to_24h(),
        afternoon_session,
    )
    return parsed


def parse_canonical_time(value: Any) -> Optional[ClockTime]:
    """Read a stored 24-hour value.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, ClockTime):
        return value

    if isinstance(value, time):
        return ClockTime(value.hour, value.minute)

    if isinstance(value, timedelta):
        total_minutes = (int(value.total_seconds()) % 86400) // 60
        return ClockTime(total_minutes // 60, total_minutes % 60)

    if isinstance(value, str):
        if is_placeholder(value):
            return None
        parts = value.strip().split(":")
        if len(parts) < 2 or len(parts) > 3:
            raise MalformedTime(f"Invalid time string: {value!r}")
        try:
            return ClockTime(int(parts[0]), int(parts[1]))
        except ValueError:
            raise MalformedTime(f"Invalid time string: {value!r}")

    raise MalformedTime(f"Unsupported time value type: {type(value)!r}")


def coerce_clock_time(value: Any, *, afternoon_session: bool) -> Optional[ClockTime]:
    """Accept a ClockTime, a datetime.time or boundary text."""

    if value is None or isinstance(value, ClockTime):
        return value
    if isinstance(value, time):
        return ClockTime(value.hour, value.minute)
    if isinstance(value, str):
        match = _TIME_RE.match(value.strip())
        # Unambiguous 24-hour input ("13:30") passes through as canonical.
        if match and match.group(3) is None and int(match.group(1)) > 12:
            return parse_canonical_time(value)
        return parse_clock_time(value, afternoon_session=afternoon_session)
    raise MalformedTime(f"Unsupported time value type: {type(value)!r}")


def format_12h(value: Optional[ClockTime]) -> str:
    """Display label used by list views; "--:--" when not set."""
    return value.to_12h() if value else "--:--"
