"""
Excel Parser Module

Loads an attendance workbook into plain row mappings keyed by header text.
Only cell decoding happens here; classification belongs to the domain layer.
"""

from datetime import datetime, time
from pathlib import Path
from typing import Any, Dict, List, Optional
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.datetime import from_excel
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from domain.entities import (
    REQUIRED_FIELDS, DATE_FIELD, IN_TIME_FIELD, OUT_TIME_FIELD
)
from domain.exceptions import AttendanceError
from infrastructure.logger import get_logger

logger = get_logger("ExcelParser")


# ==============================================================================
# Custom Exceptions
# ==============================================================================
class ExcelFormatError(AttendanceError):
    """Raised when the Excel file format is unrecognized or invalid."""

    def __init__(self, message: str, missing_columns: Optional[List[str]] = None):
        self.missing_columns = missing_columns or []
        super().__init__(message)


# ==============================================================================
# ExcelParser Class
# ==============================================================================
class ExcelParser:
    """
    Parses attendance workbooks.

    The first row of the sheet is the header; every following row that
    has at least one value becomes a dict of header -> cell value. Blank
    cells are left out of the dict.

    Handles:
    - Excel serial numbers in the Date column
    - Native time cells in the In-Time / Out-Time columns (to HH:MM text)
    """

    TIME_COLUMNS = (IN_TIME_FIELD, OUT_TIME_FIELD)

    def __init__(self):
        self._rows: List[Dict[str, Any]] = []
        self._headers: List[str] = []

    @property
    def headers(self) -> List[str]:
        """Header names of the last parsed sheet, in column order."""
        return self._headers

    def parse_file(self, file_path: Path, sheet_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Parse an Excel file into row mappings.

        Args:
            file_path: Path to the .xlsx file
            sheet_name: Worksheet to read; the first sheet when None

        Returns:
            List of row dicts in sheet order

        Raises:
            FileNotFoundError: If the file does not exist
            ExcelFormatError: If the file is not a readable .xlsx workbook, or the
                sheet is missing or lacks required columns
        """
        self._rows = []
        self._headers = []

        if not file_path.exists():
            raise FileNotFoundError(f"Source file not found: {file_path}")

        logger.info(f"Parsing workbook: {file_path.name}")

        try:
            wb = load_workbook(file_path, data_only=True)
        except (InvalidFileException, BadZipFile) as e:
            raise ExcelFormatError(f"Cannot open {file_path.name} as an .xlsx workbook: {e}") from e

        try:
            if sheet_name is None:
                ws = wb.worksheets[0]
            elif sheet_name in wb.sheetnames:
                ws = wb[sheet_name]
            else:
                raise ExcelFormatError(f"Worksheet '{sheet_name}' not found in {file_path.name}")

            self._rows = self._parse_worksheet(ws)
        finally:
            wb.close()

        logger.info(f"Parsed {len(self._rows)} rows from sheet")
        return self._rows

    def _parse_worksheet(self, ws: Worksheet) -> List[Dict[str, Any]]:
        """Read the header row, validate it, then collect data rows."""
        rows_iter = ws.iter_rows(values_only=True)
        header_cells = next(rows_iter, None)
        if header_cells is None:
            logger.warning(f"Worksheet '{ws.title}' is empty")
            return []

        self._headers = [
            str(value).strip() if value is not None else ""
            for value in header_cells
        ]

        missing = [col for col in REQUIRED_FIELDS if col not in self._headers]
        if missing:
            raise ExcelFormatError(
                f"Worksheet '{ws.title}' is missing required columns: {', '.join(missing)}",
                missing_columns=missing
            )

        logger.debug(f"Worksheet '{ws.title}': headers={self._headers}")

        rows: List[Dict[str, Any]] = []
        for row_idx, values in enumerate(rows_iter, start=2):
            row: Dict[str, Any] = {}
            for header, value in zip(self._headers, values):
                # Whitespace-only text is kept as written
                if not header or value is None:
                    continue
                row[header] = self._decode_cell(header, value, row_idx)

            if row:
                rows.append(row)

        return rows

    def _decode_cell(self, header: str, value: Any, row_idx: int) -> Any:
        """Normalize cell types for the date and punch columns."""
        if header == DATE_FIELD:
            return self._extract_date(value, row_idx)
        if header in self.TIME_COLUMNS:
            return self._extract_time(value)
        return value

    def _extract_date(self, value: Any, row_idx: int) -> Any:
        """Convert datetimes and Excel serials to dates; leave text as is."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                converted = from_excel(value)
            except (ValueError, OverflowError, TypeError):
                logger.debug(f"Row {row_idx}: date serial {value!r} out of range")
                return value
            return converted.date() if isinstance(converted, datetime) else value
        return value

    def _extract_time(self, value: Any) -> Any:
        """Native time cells become HH:MM text; anything else passes through."""
        if isinstance(value, (datetime, time)):
            return value.strftime('%H:%M')
        return value
