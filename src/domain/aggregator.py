"""
Aggregator Module

Rolls classified records up into dataset-wide totals and per-employee
summaries.
"""

from typing import Dict, Iterable, List, Tuple

from .entities import AttendanceRecord, DatasetSummary, EmployeeSummary
from .exceptions import InvalidInputError


def _accumulate(summary: EmployeeSummary, record: AttendanceRecord) -> None:
    summary.records.append(record)
    summary.total_actual_hours += record.actual_hours
    summary.total_expected_hours += record.expected_hours
    if record.is_leave:
        summary.leave_count += 1
    if record.is_overtime:
        summary.overtime_count += 1
    if record.is_undertime:
        summary.undertime_count += 1


def aggregate(
    records: Iterable[AttendanceRecord]
) -> Tuple[DatasetSummary, List[EmployeeSummary]]:
    """
    Aggregate classified records in a single pass.

    Records with an invalid date are left out of every total and employee
    group and listed in DatasetSummary.invalid_records instead. Employees
    are returned in the order their names first appear; names are used
    literally, so an empty name forms its own group.

    Args:
        records: Classified records in input order

    Returns:
        Tuple of (DatasetSummary, list of EmployeeSummary)

    Raises:
        InvalidInputError: If records is None
    """
    if records is None:
        raise InvalidInputError("No attendance records supplied")

    dataset = DatasetSummary()
    # dict iteration follows insertion order = first-seen employee order
    by_name: Dict[str, EmployeeSummary] = {}

    for record in records:
        if not record.has_valid_date:
            dataset.invalid_records.append(record)
            continue

        dataset.record_count += 1
        dataset.total_expected_hours += record.expected_hours
        dataset.total_actual_hours += record.actual_hours
        if record.is_leave:
            dataset.total_leaves += 1
        if record.is_overtime:
            dataset.total_overtime += 1
        if record.is_undertime:
            dataset.total_undertime += 1

        summary = by_name.get(record.employee_name)
        if summary is None:
            summary = EmployeeSummary(name=record.employee_name)
            by_name[record.employee_name] = summary
        _accumulate(summary, record)

    return dataset, list(by_name.values())
