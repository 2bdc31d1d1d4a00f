"""
View Projection Module

Search, status filter and sort helpers for displaying and exporting
classified records. All functions return new lists and never modify the
records or summaries they are given.
"""

from typing import Any, Callable, Dict, List, Optional

from .entities import (
    AttendanceRecord, EmployeeSummary, ProductivityTier,
    EMPLOYEE_NAME_FIELD, DATE_FIELD, IN_TIME_FIELD, OUT_TIME_FIELD,
    EXPECTED_COLUMN, ACTUAL_COLUMN
)
from .time_rules import parse_clock_time

STATUS_FILTERS: Dict[str, Callable[[AttendanceRecord], bool]] = {
    "all": lambda r: True,
    "leave": lambda r: r.is_leave,
    "present": lambda r: r.has_valid_date and not r.is_leave,
    "overtime": lambda r: r.is_overtime,
    "undertime": lambda r: r.is_undertime,
}

RECORD_SORT_KEYS: Dict[str, Callable[[AttendanceRecord], Any]] = {
    EMPLOYEE_NAME_FIELD: lambda r: r.employee_name.casefold(),
    DATE_FIELD: lambda r: r.work_date,
    IN_TIME_FIELD: lambda r: parse_clock_time(r.in_time),
    OUT_TIME_FIELD: lambda r: parse_clock_time(r.out_time),
    EXPECTED_COLUMN: lambda r: r.expected_hours,
    ACTUAL_COLUMN: lambda r: r.actual_hours,
    "productivity": lambda r: r.productivity_pct,
    "status": lambda r: r.status.value,
}

EMPLOYEE_SORT_KEYS: Dict[str, Callable[[EmployeeSummary], Any]] = {
    "name": lambda e: e.name.casefold(),
    "total_actual_hours": lambda e: e.total_actual_hours,
    "total_expected_hours": lambda e: e.total_expected_hours,
    "productivity": lambda e: e.productivity_pct,
    "leave_count": lambda e: e.leave_count,
    "overtime_count": lambda e: e.overtime_count,
    "undertime_count": lambda e: e.undertime_count,
}


def filter_records(
    records: List[AttendanceRecord],
    search_term: str = "",
    status: str = "all"
) -> List[AttendanceRecord]:
    """
    Filter records by employee name and status.

    Args:
        records: Classified records
        search_term: Case-insensitive substring of the employee name
        status: One of "all", "leave", "present", "overtime", "undertime".
            "present" only matches records with a valid date.

    Returns:
        Matching records in their original order

    Raises:
        ValueError: If status is not a known filter
    """
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status}")

    matches_status = STATUS_FILTERS[status]
    needle = (search_term or "").casefold()
    return [
        r for r in records
        if needle in r.employee_name.casefold() and matches_status(r)
    ]


def _sorted_with_missing_last(items: list, key: Callable, direction: str) -> list:
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unknown sort direction: {direction}")

    present = [item for item in items if key(item) is not None]
    missing = [item for item in items if key(item) is None]
    present.sort(key=key, reverse=(direction == "desc"))
    return present + missing


def sort_records(
    records: List[AttendanceRecord],
    key: Optional[str] = None,
    direction: str = "asc"
) -> List[AttendanceRecord]:
    """
    Sort records by a column.

    Records without a value for the column (invalid date, missing punch)
    always go last. With no key the input order is kept.

    Returns:
        Sorted list (new list, does not modify original)
    """
    if not key:
        return list(records)
    if key not in RECORD_SORT_KEYS:
        raise ValueError(f"Unknown sort key: {key}")
    return _sorted_with_missing_last(list(records), RECORD_SORT_KEYS[key], direction)


def sort_employees(
    employees: List[EmployeeSummary],
    key: Optional[str] = None,
    direction: str = "asc"
) -> List[EmployeeSummary]:
    """Sort employee summaries; with no key first-seen order is kept."""
    if not key:
        return list(employees)
    if key not in EMPLOYEE_SORT_KEYS:
        raise ValueError(f"Unknown sort key: {key}")
    return _sorted_with_missing_last(list(employees), EMPLOYEE_SORT_KEYS[key], direction)


def productivity_tier(
    pct: float,
    green_threshold: float = 100,
    yellow_threshold: float = 80
) -> ProductivityTier:
    """
    Get color tier for a productivity percentage.

    Args:
        pct: Productivity percentage
        green_threshold: Lowest value shown green (default 100%)
        yellow_threshold: Lowest value shown yellow (default 80%)
    """
    if pct >= green_threshold:
        return ProductivityTier.GREEN
    elif pct >= yellow_threshold:
        return ProductivityTier.YELLOW
    else:
        return ProductivityTier.RED
