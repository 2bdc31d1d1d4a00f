"""
Excel Writer Module

Exports classified attendance records back to a workbook in the same
tabular shape as the source, plus per-employee and summary sheets.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from config.config_manager import UIPrefs
from domain.entities import (
    AttendanceRecord, DatasetSummary, EmployeeSummary, ProductivityTier,
    DERIVED_COLUMNS, IS_LEAVE_COLUMN, IS_OVERTIME_COLUMN, IS_UNDERTIME_COLUMN,
    DAY_TYPE_COLUMN
)
from domain.views import productivity_tier
from infrastructure.logger import get_logger

logger = get_logger("ExcelWriter")

EMPLOYEE_SHEET_TITLE = "By Employee"
SUMMARY_SHEET_TITLE = "Summary"

EMPLOYEE_HEADERS = [
    "Employee", "Records", "Actual Hours", "Expected Hours",
    "Productivity %", "Leaves", "Overtime", "Undertime",
]


class ExcelWriter:
    """
    Generates the leave analysis workbook.

    Sheets:
    - Records sheet: source columns verbatim, then exp/act/flags/dayType
    - By Employee: one row per employee in first-seen order
    - Summary: dataset cards and rows excluded for invalid dates

    Styling:
    - Flag cells filled red (leave), purple (overtime), yellow (undertime)
    - Productivity cells filled by 3-tier color
    """

    COLORS = {
        'green': PatternFill(start_color='90EE90', end_color='90EE90', fill_type='solid'),
        'red': PatternFill(start_color='FF6B6B', end_color='FF6B6B', fill_type='solid'),
        'yellow': PatternFill(start_color='FFD700', end_color='FFD700', fill_type='solid'),
        'purple': PatternFill(start_color='DDA0DD', end_color='DDA0DD', fill_type='solid'),
        'gray': PatternFill(start_color='D3D3D3', end_color='D3D3D3', fill_type='solid'),
        'header': PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid'),
    }

    FLAG_COLORS = {
        IS_LEAVE_COLUMN: 'red',
        IS_OVERTIME_COLUMN: 'purple',
        IS_UNDERTIME_COLUMN: 'yellow',
    }

    TIER_COLORS = {
        ProductivityTier.GREEN: 'green',
        ProductivityTier.YELLOW: 'yellow',
        ProductivityTier.RED: 'red',
    }

    BORDER = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    DATE_NUMBER_FORMAT = 'yyyy-mm-dd'

    def __init__(self, ui_prefs: Optional[UIPrefs] = None, sheet_name: str = "Leave Analysis"):
        self.ui_prefs = ui_prefs or UIPrefs()
        self.sheet_name = sheet_name
        self.wb: Optional[Workbook] = None

    def create_report(
        self,
        records: List[AttendanceRecord],
        dataset: DatasetSummary,
        employees: List[EmployeeSummary],
        output_path: Path,
        include_employee_sheet: bool = True
    ) -> Path:
        """
        Create the full analysis workbook.

        Args:
            records: All classified records in input order
            dataset: Dataset totals
            employees: Employee summaries in first-seen order
            output_path: Path to save the Excel file
            include_employee_sheet: Whether to add the By Employee sheet

        Returns:
            Path to the created file
        """
        self.wb = Workbook()
        records_ws = self.wb.active
        records_ws.title = self.sheet_name
        self._write_records_sheet(records_ws, records)

        if include_employee_sheet:
            self._write_employee_sheet(self.wb.create_sheet(EMPLOYEE_SHEET_TITLE), employees)

        self._write_summary_sheet(
            self.wb.create_sheet(SUMMARY_SHEET_TITLE), dataset, len(employees)
        )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(output_path)
        logger.info(f"Workbook saved: {output_path}")
        return output_path

    def write_records(self, records: List[AttendanceRecord], output_path: Path) -> Path:
        """Export a (possibly filtered or sorted) record list on its own."""
        self.wb = Workbook()
        ws = self.wb.active
        ws.title = self.sheet_name
        self._write_records_sheet(ws, records)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(output_path)
        logger.info(f"Exported {len(records)} records to {output_path}")
        return output_path

    @staticmethod
    def record_columns(records: List[AttendanceRecord]) -> List[str]:
        """Source columns in first-seen order, followed by derived columns."""
        columns: List[str] = []
        seen = set(DERIVED_COLUMNS)
        for record in records:
            for key in record.source_row:
                if key not in seen:
                    columns.append(key)
                    seen.add(key)
        return columns + list(DERIVED_COLUMNS)

    def _write_header(self, ws: Worksheet, headers: List[str]) -> None:
        for col, title in enumerate(headers, start=1):
            cell = ws.cell(1, col, title)
            cell.font = Font(bold=True, color='FFFFFF')
            cell.fill = self.COLORS['header']
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = self.BORDER
            ws.column_dimensions[get_column_letter(col)].width = max(12, len(str(title)) + 4)
        ws.freeze_panes = 'A2'

    def _write_records_sheet(self, ws: Worksheet, records: List[AttendanceRecord]) -> None:
        columns = self.record_columns(records)
        self._write_header(ws, columns)

        for row_idx, record in enumerate(records, start=2):
            values = record.to_row()
            for col, key in enumerate(columns, start=1):
                cell = ws.cell(row_idx, col, self._cell_value(values.get(key)))
                cell.border = self.BORDER
                if isinstance(cell.value, (date, datetime)):
                    cell.number_format = self.DATE_NUMBER_FORMAT

                color = self.FLAG_COLORS.get(key)
                if color and values.get(key):
                    cell.fill = self.COLORS[color]
                elif key == DAY_TYPE_COLUMN and not record.has_valid_date:
                    cell.fill = self.COLORS['gray']

    def _write_employee_sheet(self, ws: Worksheet, employees: List[EmployeeSummary]) -> None:
        self._write_header(ws, EMPLOYEE_HEADERS)

        for row_idx, employee in enumerate(employees, start=2):
            pct = employee.productivity_pct
            values = [
                employee.name,
                len(employee.records),
                round(employee.total_actual_hours, 2),
                round(employee.total_expected_hours, 2),
                round(pct, 1),
                employee.leave_count,
                employee.overtime_count,
                employee.undertime_count,
            ]
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row_idx, col, value)
                cell.border = self.BORDER

            tier = productivity_tier(
                pct,
                self.ui_prefs.productivity_green_threshold,
                self.ui_prefs.productivity_yellow_threshold
            )
            ws.cell(row_idx, 5).fill = self.COLORS[self.TIER_COLORS[tier]]

    def _write_summary_sheet(
        self,
        ws: Worksheet,
        dataset: DatasetSummary,
        employee_count: int
    ) -> None:
        cards = [
            ("Total Expected Hours", round(dataset.total_expected_hours, 2)),
            ("Total Actual Hours", round(dataset.total_actual_hours, 2)),
            ("Attendance Rate %", round(dataset.attendance_rate_pct, 1)),
            ("Productivity %", round(dataset.productivity_pct, 1)),
            ("Leaves", dataset.total_leaves),
            ("Overtime", dataset.total_overtime),
            ("Undertime", dataset.total_undertime),
            ("Records", dataset.record_count),
            ("Employees", employee_count),
            ("Invalid Dates", dataset.invalid_date_count),
        ]
        self._write_header(ws, ["Metric", "Value"])
        ws.column_dimensions['A'].width = 24
        for row_idx, (label, value) in enumerate(cards, start=2):
            ws.cell(row_idx, 1, label).font = Font(bold=True)
            ws.cell(row_idx, 2, value)
            ws.cell(row_idx, 1).border = self.BORDER
            ws.cell(row_idx, 2).border = self.BORDER

        if not dataset.invalid_records:
            return

        # Rows left out of the totals
        start = len(cards) + 3
        ws.cell(start, 1, "Excluded rows (invalid date)").font = Font(bold=True)
        for offset, record in enumerate(dataset.invalid_records, start=1):
            ws.cell(start + offset, 1, record.employee_name)
            ws.cell(start + offset, 2, self._cell_value(record.date))

    @staticmethod
    def _cell_value(value: Any) -> Any:
        """openpyxl only accepts scalar cell values."""
        if value is None or isinstance(value, (str, int, float, bool, date, datetime)):
            return value
        return str(value)
