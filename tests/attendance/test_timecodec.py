from __future__ import annotations

import logging
from datetime import time, timedelta

import pytest

from intern_attendance.attendance.timecodec import (
    ClockTime,
    coerce_clock_time,
    format_12h,
    parse_canonical_time,
    parse_clock_time,
)
from intern_attendance.core.exceptions import MalformedTime


@pytest.mark.parametrize(
    "text, expected",
    [
        ("12:00 AM", (0, 0)),
        ("12:00 PM", (12, 0)),
        ("01:30 PM", (13, 30)),
        ("11:59 am", (11, 59)),
        ("8:05 pm", (20, 5)),
        ("08:00AM", (8, 0)),
        ("  07:45 AM  ", (7, 45)),
    ],
)
def test_marker_is_authoritative(text, expected):
    parsed = parse_clock_time(text, afternoon_session=True)
    assert (parsed.hour, parsed.minute) == expected
    assert parsed.inferred is False


@pytest.mark.parametrize("text", [None, "", "   ", "--:--"])
def test_placeholder_means_not_set(text):
    assert parse_clock_time(text, afternoon_session=False) is None


def test_afternoon_hint_moves_morning_hours():
    parsed = parse_clock_time("01:15", afternoon_session=True)
    assert parsed == ClockTime(13, 15)
    assert parsed.inferred is True


def test_twelve_without_marker_stays_noon():
    assert parse_clock_time("12:30", afternoon_session=True) == ClockTime(12, 30)
    assert parse_clock_time("12:30", afternoon_session=False) == ClockTime(12, 30)


def test_morning_hint_keeps_hour():
    assert parse_clock_time("08:00", afternoon_session=False) == ClockTime(8, 0)


def test_inferred_parse_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="intern_attendance.attendance.timecodec"):
        parse_clock_time("03:00", afternoon_session=True)
    assert "Low-confidence" in caplog.text


@pytest.mark.parametrize("text", ["13:00 PM", "8", "08:60 AM", "ab:cd", "0:15 AM", "08:00 XM", "-1:00"])
def test_malformed_times(text):
    with pytest.raises(MalformedTime):
        parse_clock_time(text, afternoon_session=False)


def test_missing_marker_without_hint_is_rejected():
    with pytest.raises(MalformedTime):
        parse_clock_time("08:00")


def test_display_labels():
    assert ClockTime(0, 5).to_12h() == "12:05 AM"
    assert ClockTime(12, 0).to_12h() == "12:00 PM"
    assert ClockTime(13, 30).to_12h() == "01:30 PM"
    assert ClockTime(9, 7).to_24h() == "09:07"
    assert format_12h(None) == "--:--"


def test_canonical_storage_values():
    assert parse_canonical_time("08:30:00") == ClockTime(8, 30)
    assert parse_canonical_time(timedelta(hours=13, minutes=5)) == ClockTime(13, 5)
    assert parse_canonical_time(time(7, 45)) == ClockTime(7, 45)
    assert parse_canonical_time(None) is None
    with pytest.raises(MalformedTime):
        parse_canonical_time("25:00")


def test_coerce_accepts_unambiguous_24h_text():
    assert coerce_clock_time("13:30", afternoon_session=False) == ClockTime(13, 30)
    assert coerce_clock_time("01:30 PM", afternoon_session=False) == ClockTime(13, 30)
    assert coerce_clock_time(ClockTime(9, 0), afternoon_session=True) == ClockTime(9, 0)
