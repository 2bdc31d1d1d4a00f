"""
Time Rules Module

Canonical working-hour rules: expected hours per weekday and actual hours
between two wall-clock punches. Every other layer calls these functions
instead of re-implementing the rules.
"""

import re
from datetime import date, datetime, time
from typing import Any, Optional

# Sunday=0 ... Saturday=6
WEEKDAY_NAMES = (
    "Sunday", "Monday", "Tuesday", "Wednesday",
    "Thursday", "Friday", "Saturday",
)

SUNDAY = 0
SATURDAY = 6

SUNDAY_HOURS = 0.0
SATURDAY_HOURS = 4.0
WEEKDAY_HOURS = 8.5

CLOCK_TIME_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')

# Tried in order; month-first wins over day-first for ambiguous slashes
DATE_FORMATS = (
    '%Y-%m-%d',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%Y/%m/%d',
    '%m/%d/%Y',
    '%d/%m/%Y',
    '%b %d, %Y',
    '%d %b %Y',
)


def sunday_index(day: date) -> int:
    """Weekday of a date with Sunday=0 ... Saturday=6."""
    return (day.weekday() + 1) % 7


def day_name(day: date) -> str:
    return WEEKDAY_NAMES[sunday_index(day)]


def expected_hours_for(day: date) -> float:
    """
    Scheduled hours for a calendar day.

    Sunday = 0h, Saturday = 4h, Monday-Friday = 8.5h.
    """
    index = sunday_index(day)
    if index == SUNDAY:
        return SUNDAY_HOURS
    if index == SATURDAY:
        return SATURDAY_HOURS
    return WEEKDAY_HOURS


def parse_clock_time(value: Any) -> Optional[time]:
    """
    Parse a 24-hour HH:MM clock string.

    Returns None for missing, empty or malformed values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None

    match = CLOCK_TIME_PATTERN.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def actual_hours_for(in_time: Optional[str], out_time: Optional[str]) -> float:
    """
    Hours worked between clock-in and clock-out on the same day.

    Missing or unparseable punches give 0. An out-time earlier than the
    in-time (overnight shift) clamps to 0 instead of wrapping to the next
    day. No rounding is applied.
    """
    if not in_time or not out_time:
        return 0.0

    start = parse_clock_time(in_time)
    end = parse_clock_time(out_time)
    if start is None or end is None:
        return 0.0

    return max(0.0, (_minutes(end) - _minutes(start)) / 60)


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Parse a date cell value.

    Accepts date/datetime objects and the text formats in DATE_FORMATS.
    Returns None when the value cannot be read as a calendar day; the
    current date is never used as a fallback.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    str_val = value.strip()
    if not str_val:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(str_val, fmt).date()
        except ValueError:
            continue
    return None
