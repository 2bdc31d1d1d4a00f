"""
Domain Entities Module

Core domain entities using dataclasses for the leave analyzer.
These entities represent the core business concepts independent of infrastructure.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum, auto
from typing import Any, Dict, List, Optional


# Source row columns (contract with the input workbook, kept verbatim)
EMPLOYEE_NAME_FIELD = "Employee Name"
DATE_FIELD = "Date"
IN_TIME_FIELD = "In-Time"
OUT_TIME_FIELD = "Out-Time"

REQUIRED_FIELDS = (EMPLOYEE_NAME_FIELD, DATE_FIELD, IN_TIME_FIELD, OUT_TIME_FIELD)

# Derived columns appended on export
EXPECTED_COLUMN = "exp"
ACTUAL_COLUMN = "act"
IS_LEAVE_COLUMN = "isLeave"
IS_OVERTIME_COLUMN = "isOvertime"
IS_UNDERTIME_COLUMN = "isUndertime"
DAY_TYPE_COLUMN = "dayType"

DERIVED_COLUMNS = (
    EXPECTED_COLUMN, ACTUAL_COLUMN,
    IS_LEAVE_COLUMN, IS_OVERTIME_COLUMN, IS_UNDERTIME_COLUMN,
    DAY_TYPE_COLUMN,
)

INVALID_DAY_TYPE = "Invalid"


class AttendanceStatus(Enum):
    """Display badge for a single record."""
    PRESENT = auto()
    LEAVE = auto()
    OVERTIME = auto()
    UNDERTIME = auto()
    INVALID_DATE = auto()


class ProductivityTier(Enum):
    """Color tier for productivity display."""
    RED = auto()     # < yellow threshold (default 80%)
    YELLOW = auto()  # >= yellow threshold and < green threshold
    GREEN = auto()   # >= green threshold (default 100%)


def percentage(part: float, whole: float) -> float:
    """Return part / whole * 100, or 0 when whole is zero."""
    if whole == 0:
        return 0.0
    return (part / whole) * 100


@dataclass(frozen=True)
class AttendanceRecord:
    """
    One classified attendance row.

    Attributes:
        employee_name: Employee name as found in the source row
        date: Raw date value from the source row
        in_time: Clock-in text (HH:MM) or None
        out_time: Clock-out text (HH:MM) or None
        work_date: Parsed calendar date, None when the raw date is invalid
        expected_hours: Scheduled hours for the weekday
        actual_hours: Hours between clock-in and clock-out
        day_type: Weekday name, or "Invalid"
        is_leave: Expected hours but nothing worked
        is_overtime: Worked more than expected + 0.5h
        is_undertime: Worked less than expected - 0.5h on a working day
        source_row: The full source row, exported verbatim
    """
    employee_name: str
    date: Any
    in_time: Optional[str]
    out_time: Optional[str]
    work_date: Optional[date]
    expected_hours: float
    actual_hours: float
    day_type: str
    is_leave: bool = False
    is_overtime: bool = False
    is_undertime: bool = False
    source_row: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_valid_date(self) -> bool:
        return self.work_date is not None

    @property
    def status(self) -> AttendanceStatus:
        """Single badge; leave wins over overtime, overtime over undertime."""
        if not self.has_valid_date:
            return AttendanceStatus.INVALID_DATE
        if self.is_leave:
            return AttendanceStatus.LEAVE
        if self.is_overtime:
            return AttendanceStatus.OVERTIME
        if self.is_undertime:
            return AttendanceStatus.UNDERTIME
        return AttendanceStatus.PRESENT

    @property
    def productivity_pct(self) -> float:
        return percentage(self.actual_hours, self.expected_hours)

    def to_row(self) -> Dict[str, Any]:
        """Source row plus the derived columns, for tabular export."""
        row = dict(self.source_row)
        row[EXPECTED_COLUMN] = self.expected_hours
        row[ACTUAL_COLUMN] = self.actual_hours
        row[IS_LEAVE_COLUMN] = self.is_leave
        row[IS_OVERTIME_COLUMN] = self.is_overtime
        row[IS_UNDERTIME_COLUMN] = self.is_undertime
        row[DAY_TYPE_COLUMN] = self.day_type
        return row


@dataclass
class EmployeeSummary:
    """
    Per-employee roll-up of classified records.

    Attributes:
        name: Employee name (group key)
        records: Member records in input order
        total_actual_hours: Sum of actual hours
        total_expected_hours: Sum of expected hours
        leave_count: Records flagged as leave
        overtime_count: Records flagged as overtime
        undertime_count: Records flagged as undertime
    """
    name: str
    records: List[AttendanceRecord] = field(default_factory=list)
    total_actual_hours: float = 0.0
    total_expected_hours: float = 0.0
    leave_count: int = 0
    overtime_count: int = 0
    undertime_count: int = 0

    @property
    def productivity_pct(self) -> float:
        return percentage(self.total_actual_hours, self.total_expected_hours)


@dataclass
class DatasetSummary:
    """
    Whole-upload totals shown on the summary cards.

    Attributes:
        total_expected_hours: Sum of expected hours over valid records
        total_actual_hours: Sum of actual hours over valid records
        total_leaves: Number of leave records
        total_overtime: Number of overtime records
        total_undertime: Number of undertime records
        record_count: Number of records counted in the totals
        invalid_records: Records left out because their date is invalid
    """
    total_expected_hours: float = 0.0
    total_actual_hours: float = 0.0
    total_leaves: int = 0
    total_overtime: int = 0
    total_undertime: int = 0
    record_count: int = 0
    invalid_records: List[AttendanceRecord] = field(default_factory=list)

    @property
    def productivity_pct(self) -> float:
        return percentage(self.total_actual_hours, self.total_expected_hours)

    @property
    def attendance_rate_pct(self) -> float:
        return percentage(self.record_count - self.total_leaves, self.record_count)

    @property
    def invalid_date_count(self) -> int:
        return len(self.invalid_records)
