"""
Record Classifier Module

Turns one raw spreadsheet row into a classified AttendanceRecord.
"""

from collections.abc import Mapping
from datetime import datetime, time
from typing import Any, Iterable, List, Optional

from .entities import (
    AttendanceRecord, EMPLOYEE_NAME_FIELD, DATE_FIELD,
    IN_TIME_FIELD, OUT_TIME_FIELD, INVALID_DAY_TYPE
)
from .exceptions import InvalidInputError
from .time_rules import (
    actual_hours_for, day_name, expected_hours_for, parse_calendar_date
)

# Tolerance band around expected hours for overtime and undertime
TOLERANCE_HOURS = 0.5


def _clock_text(value: Any) -> Optional[str]:
    """Normalize a punch cell to text; time objects become HH:MM."""
    if value is None:
        return None
    if isinstance(value, (datetime, time)):
        return value.strftime('%H:%M')
    if isinstance(value, str):
        return value
    return str(value)


def _employee_name(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def classify(row: Mapping) -> AttendanceRecord:
    """
    Classify a single attendance row.

    Args:
        row: Mapping with at least "Employee Name", "Date", "In-Time"
            and "Out-Time" (missing keys count as empty)

    Returns:
        AttendanceRecord with expected/actual hours, weekday and flags

    Raises:
        InvalidInputError: If row is not a mapping
    """
    if not isinstance(row, Mapping):
        raise InvalidInputError(f"Attendance row must be a mapping, got {type(row).__name__}")

    raw_date = row.get(DATE_FIELD)
    in_time = _clock_text(row.get(IN_TIME_FIELD))
    out_time = _clock_text(row.get(OUT_TIME_FIELD))
    actual = actual_hours_for(in_time, out_time)

    work_date = parse_calendar_date(raw_date)
    if work_date is None:
        # Invalid dates carry no schedule and no flags
        return AttendanceRecord(
            employee_name=_employee_name(row.get(EMPLOYEE_NAME_FIELD)),
            date=raw_date,
            in_time=in_time,
            out_time=out_time,
            work_date=None,
            expected_hours=0.0,
            actual_hours=actual,
            day_type=INVALID_DAY_TYPE,
            source_row=dict(row),
        )

    expected = expected_hours_for(work_date)

    return AttendanceRecord(
        employee_name=_employee_name(row.get(EMPLOYEE_NAME_FIELD)),
        date=raw_date,
        in_time=in_time,
        out_time=out_time,
        work_date=work_date,
        expected_hours=expected,
        actual_hours=actual,
        day_type=day_name(work_date),
        is_leave=expected > 0 and actual == 0,
        is_overtime=actual > expected + TOLERANCE_HOURS,
        is_undertime=expected > 0 and actual < expected - TOLERANCE_HOURS,
        source_row=dict(row),
    )


def classify_rows(rows: Iterable[Mapping]) -> List[AttendanceRecord]:
    """
    Classify every row, preserving input order.

    Raises:
        InvalidInputError: If rows is None or a row is not a mapping
    """
    if rows is None:
        raise InvalidInputError("No attendance rows supplied")
    return [classify(row) for row in rows]
