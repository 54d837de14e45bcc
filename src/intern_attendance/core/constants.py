"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Manila"
DEFAULT_HISTORY_DAYS = 30

# Display window for timelines, in minutes of day (07:00 - 24:00).
DAY_WINDOW_START_MINUTE = 7 * 60
DAY_WINDOW_END_MINUTE = 24 * 60

STANDARD_WORKDAY_HOURS = 8
MAX_WRITE_ATTEMPTS = 5

PLACEHOLDER_TIMES = frozenset({"", "--:--"})
