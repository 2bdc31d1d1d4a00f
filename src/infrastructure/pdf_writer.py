"""
PDF Writer Module

Generates a one-file PDF summary of a leave analysis using fpdf2:
dataset summary cards followed by the per-employee table.
"""

import sys
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from fpdf import FPDF

from config.config_manager import UIPrefs
from domain.entities import (
    AttendanceRecord, DatasetSummary, EmployeeSummary, ProductivityTier
)
from domain.views import productivity_tier
from infrastructure.logger import get_logger

logger = get_logger("PdfWriter")


# ==============================================================================
# Font Configuration
# ==============================================================================
WINDOWS_FONT_PATHS: List[Path] = [
    Path("C:/Windows/Fonts/arialuni.ttf"),
    Path("C:/Windows/Fonts/arial.ttf"),
]

MACOS_FONT_PATHS: List[Path] = [
    Path("/Library/Fonts/Arial Unicode.ttf"),
    Path("/System/Library/Fonts/Supplemental/Arial.ttf"),
]

LINUX_FONT_PATHS: List[Path] = [
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf"),
]

FALLBACK_FONT = "Helvetica"


def find_unicode_font(custom_font_path: Optional[str] = None) -> Optional[Path]:
    """Search for a TTF font that can render non-Latin employee names."""
    if custom_font_path:
        custom_path = Path(custom_font_path)
        if custom_path.exists():
            logger.info(f"Using custom font: {custom_path}")
            return custom_path
        logger.warning(f"Custom font path does not exist: {custom_path}")

    if sys.platform == 'win32':
        candidates = WINDOWS_FONT_PATHS
    elif sys.platform == 'darwin':
        candidates = MACOS_FONT_PATHS
    else:
        candidates = LINUX_FONT_PATHS

    for font_path in candidates:
        if font_path.exists():
            logger.debug(f"Found system font: {font_path}")
            return font_path
    return None


def format_filename(pattern: str, first_date: Optional[date]) -> str:
    """
    Fill {year} and {month} in a filename pattern.

    Both become "unknown" when the dataset has no valid date.
    """
    if first_date is None:
        return pattern.format(year="unknown", month="unknown")
    return pattern.format(year=first_date.year, month=f"{first_date.month:02d}")


def first_valid_date(records: List[AttendanceRecord]) -> Optional[date]:
    """Earliest parsed date among the records, if any."""
    dates = [r.work_date for r in records if r.work_date is not None]
    return min(dates) if dates else None


# ==============================================================================
# SummaryPdf Class (A4 Portrait)
# ==============================================================================
class SummaryPdf(FPDF):
    """FPDF page template with a centered title and page numbers."""

    def __init__(self, title: str = "", custom_font_path: Optional[str] = None):
        super().__init__(orientation='P', unit='mm', format='A4')
        self.title_text = title
        self._font_family = FALLBACK_FONT
        self._unicode = False
        self._setup_font(custom_font_path)

    def _setup_font(self, custom_font_path: Optional[str]) -> None:
        font_path = find_unicode_font(custom_font_path)
        if font_path is None:
            logger.debug("No TTF font found, using core Helvetica")
            return
        try:
            self.add_font("ReportFont", "", str(font_path))
        except Exception as e:
            logger.warning(f"Cannot load font {font_path}: {e}")
            return
        self._font_family = "ReportFont"
        self._unicode = True

    @property
    def font_family_name(self) -> str:
        return self._font_family

    def safe_text(self, text: str) -> str:
        """Core fonts are latin-1 only; replace anything else."""
        if self._unicode:
            return text
        return text.encode('latin-1', 'replace').decode('latin-1')

    def header(self) -> None:
        self.set_font(self._font_family, '', 14)
        self.set_text_color(0, 0, 0)
        self.cell(0, 10, self.safe_text(self.title_text), align='C', new_x='LMARGIN', new_y='NEXT')
        self.ln(2)

    def footer(self) -> None:
        self.set_y(-12)
        self.set_font(self._font_family, '', 8)
        self.cell(0, 10, f'Page {self.page_no()}/{{nb}}', align='C')


# ==============================================================================
# PdfWriter Class
# ==============================================================================
class PdfWriter:
    """
    Generates the PDF summary report.

    Features:
    - Summary cards (hours, attendance rate, productivity, flag counts)
    - Per-employee table with productivity tier colors
    - Table header repeated after each page break
    """

    COLORS: Dict[str, Tuple[int, int, int]] = {
        'green': (144, 238, 144),
        'red': (255, 107, 107),
        'yellow': (255, 215, 0),
        'header': (68, 114, 196),
        'card': (235, 240, 250),
        'white': (255, 255, 255),
    }

    TIER_COLORS = {
        ProductivityTier.GREEN: 'green',
        ProductivityTier.YELLOW: 'yellow',
        ProductivityTier.RED: 'red',
    }

    # (title, width mm)
    TABLE_COLUMNS: List[Tuple[str, float]] = [
        ("Employee", 52),
        ("Records", 18),
        ("Actual h", 22),
        ("Expected h", 22),
        ("Productivity", 24),
        ("Leave", 14),
        ("OT", 14),
        ("UT", 14),
    ]

    CARD_WIDTH = 45
    CARD_HEIGHT = 16
    ROW_HEIGHT = 7

    def __init__(
        self,
        ui_prefs: Optional[UIPrefs] = None,
        custom_font_path: Optional[str] = None
    ):
        self._ui_prefs = ui_prefs or UIPrefs()
        self._custom_font_path = custom_font_path

    def create_report(
        self,
        dataset: DatasetSummary,
        employees: List[EmployeeSummary],
        output_path: Path,
        title: str = "Leave Analysis"
    ) -> None:
        """
        Write the summary PDF.

        Nothing is written when there are no records at all.
        """
        if dataset.record_count == 0 and not dataset.invalid_records:
            logger.info("No records to report, PDF skipped")
            return

        pdf = SummaryPdf(title=title, custom_font_path=self._custom_font_path)
        pdf.set_auto_page_break(auto=True, margin=15)
        pdf.add_page()

        self._draw_cards(pdf, dataset, len(employees))
        pdf.ln(6)
        self._draw_employee_table(pdf, employees)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(output_path))
        logger.info(f"PDF report saved: {output_path}")

    def _draw_cards(self, pdf: SummaryPdf, dataset: DatasetSummary, employee_count: int) -> None:
        cards = [
            ("Expected Hours", f"{dataset.total_expected_hours:.1f}h"),
            ("Actual Hours", f"{dataset.total_actual_hours:.1f}h"),
            ("Attendance Rate", f"{dataset.attendance_rate_pct:.1f}%"),
            ("Productivity", f"{dataset.productivity_pct:.1f}%"),
            ("Leaves", str(dataset.total_leaves)),
            ("Overtime", str(dataset.total_overtime)),
            ("Undertime", str(dataset.total_undertime)),
            ("Employees", str(employee_count)),
        ]
        if dataset.invalid_records:
            cards.append(("Invalid Dates", str(dataset.invalid_date_count)))

        per_row = 4
        start_x = pdf.l_margin
        pdf.set_fill_color(*self.COLORS['card'])
        pdf.set_draw_color(200, 200, 200)

        for idx, (label, value) in enumerate(cards):
            if idx % per_row == 0 and idx:
                pdf.ln(self.CARD_HEIGHT + 2)
            x = start_x + (idx % per_row) * (self.CARD_WIDTH + 2)
            y = pdf.get_y()
            pdf.rect(x, y, self.CARD_WIDTH, self.CARD_HEIGHT, style='DF')

            pdf.set_xy(x, y + 1)
            pdf.set_font(pdf.font_family_name, '', 7)
            pdf.set_text_color(90, 90, 90)
            pdf.cell(self.CARD_WIDTH, 5, label.upper(), align='C')

            pdf.set_xy(x, y + 6)
            pdf.set_font(pdf.font_family_name, '', 13)
            pdf.set_text_color(0, 0, 0)
            pdf.cell(self.CARD_WIDTH, 8, value, align='C')
            pdf.set_xy(start_x, y)

        pdf.ln(self.CARD_HEIGHT + 2)

    def _draw_table_header(self, pdf: SummaryPdf) -> None:
        pdf.set_font(pdf.font_family_name, '', 9)
        pdf.set_fill_color(*self.COLORS['header'])
        pdf.set_text_color(255, 255, 255)
        for title, width in self.TABLE_COLUMNS:
            pdf.cell(width, self.ROW_HEIGHT, title, border=1, align='C', fill=True)
        pdf.ln(self.ROW_HEIGHT)
        pdf.set_text_color(0, 0, 0)

    def _draw_employee_table(self, pdf: SummaryPdf, employees: List[EmployeeSummary]) -> None:
        self._draw_table_header(pdf)
        pdf.set_font(pdf.font_family_name, '', 9)

        for employee in employees:
            if pdf.will_page_break(self.ROW_HEIGHT):
                pdf.add_page()
                self._draw_table_header(pdf)
                pdf.set_font(pdf.font_family_name, '', 9)

            pct = employee.productivity_pct
            tier = productivity_tier(
                pct,
                self._ui_prefs.productivity_green_threshold,
                self._ui_prefs.productivity_yellow_threshold
            )
            cells = [
                pdf.safe_text(employee.name or "(no name)"),
                str(len(employee.records)),
                f"{employee.total_actual_hours:.1f}",
                f"{employee.total_expected_hours:.1f}",
                f"{pct:.1f}%",
                str(employee.leave_count),
                str(employee.overtime_count),
                str(employee.undertime_count),
            ]
            for idx, ((_, width), text) in enumerate(zip(self.TABLE_COLUMNS, cells)):
                if idx == 4:
                    pdf.set_fill_color(*self.COLORS[self.TIER_COLORS[tier]])
                    pdf.cell(width, self.ROW_HEIGHT, text, border=1, align='C', fill=True)
                else:
                    align = 'L' if idx == 0 else 'C'
                    pdf.cell(width, self.ROW_HEIGHT, text, border=1, align=align)
            pdf.ln(self.ROW_HEIGHT)
