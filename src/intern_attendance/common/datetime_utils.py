from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time in the organization's timezone (naive).

    Note: Wrapped so tests can substitute a fixed clock.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def local_clock(tz_name: str = DEFAULT_TIMEZONE):
    """Return a zero-argument clock bound to a timezone."""

    def _clock() -> datetime:
        return now_local(tz_name)

    return _clock
