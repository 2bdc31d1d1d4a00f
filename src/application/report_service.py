"""
Report Service Module

Application layer service that orchestrates leave analysis:
workbook rows in, classified records and summaries out, reports written.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from config.config_manager import AppConfig, UIPrefs
from domain.aggregator import aggregate
from domain.classifier import classify_rows
from domain.entities import AttendanceRecord, DatasetSummary, EmployeeSummary
from domain.views import filter_records, sort_records
from infrastructure.logger import get_logger

logger = get_logger("ReportService")


@dataclass(frozen=True)
class AnalysisResult:
    """
    Everything derived from one upload.

    A new upload produces a new AnalysisResult; nothing in an existing one
    is updated in place.
    """
    records: List[AttendanceRecord]
    dataset: DatasetSummary
    employees: List[EmployeeSummary]

    def employee(self, name: str) -> Optional[EmployeeSummary]:
        """Look up an employee summary by exact name."""
        for summary in self.employees:
            if summary.name == name:
                return summary
        return None


@dataclass
class ReportGenerationParams:
    """
    Parameters for report generation.

    Decouples the service from AppConfig so callers can build it directly.
    """
    source_path: Path
    output_path: Path
    sheet_name: Optional[str] = None   # Source sheet; first sheet when None
    output_sheet_name: str = "Leave Analysis"
    include_employee_sheet: bool = True
    ui_prefs: UIPrefs = field(default_factory=UIPrefs)

    # PDF generation
    generate_pdf: bool = True
    pdf_output_dir: Optional[str] = None
    pdf_filename_pattern: str = "leave-analysis.pdf"
    custom_font_path: Optional[str] = None


@dataclass
class ReportResult:
    """Result of report generation."""
    success: bool
    output_path: Path
    analysis: AnalysisResult
    pdf_path: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)


class AttendanceAnalysisService:
    """
    Application service for leave analysis.

    This service:
    - Runs classification and aggregation as one step
    - Reads workbooks and writes xlsx/PDF reports through infrastructure
    - Logs key operations; the domain layer itself stays silent
    """

    def analyze(self, rows: Iterable[Mapping[str, Any]]) -> AnalysisResult:
        """
        Classify and aggregate raw rows.

        Raises:
            InvalidInputError: If rows is None or contains non-mapping rows
        """
        records = classify_rows(rows)
        dataset, employees = aggregate(records)

        logger.info(
            f"Analysed {len(records)} rows: {len(employees)} employees, "
            f"{dataset.total_leaves} leaves, {dataset.total_overtime} overtime, "
            f"{dataset.total_undertime} undertime"
        )
        if dataset.invalid_records:
            logger.warning(
                f"{dataset.invalid_date_count} rows have an unreadable date and were "
                f"left out of the totals"
            )
            for record in dataset.invalid_records:
                logger.debug(f"Invalid date {record.date!r} for '{record.employee_name}'")

        return AnalysisResult(records=records, dataset=dataset, employees=employees)

    def generate_report(self, params: ReportGenerationParams) -> ReportResult:
        """
        Parse the source workbook, analyse it and write the reports.

        Args:
            params: ReportGenerationParams containing all necessary configuration

        Returns:
            ReportResult with the analysis and written paths

        Raises:
            FileNotFoundError: If the source workbook does not exist
            ExcelFormatError: If the file is not an .xlsx workbook or lacks required columns
            ValueError: If the sheet contains no data rows, or the saved
                status filter or sort key is unknown
        """
        from infrastructure.excel_parser import ExcelParser
        from infrastructure.excel_writer import ExcelWriter

        logger.info(f"Parsing source file: {params.source_path}")
        rows = ExcelParser().parse_file(params.source_path, params.sheet_name)
        if not rows:
            raise ValueError(f"No attendance rows found in {params.source_path.name}")

        analysis = self.analyze(rows)

        # Records sheet follows the saved filter/sort; totals always cover everything
        prefs = params.ui_prefs
        view = sort_records(
            filter_records(analysis.records, status=prefs.status_filter),
            prefs.sort_key or None,
            prefs.sort_direction
        )

        writer = ExcelWriter(prefs, sheet_name=params.output_sheet_name)
        writer.create_report(
            view,
            analysis.dataset,
            analysis.employees,
            params.output_path,
            include_employee_sheet=params.include_employee_sheet
        )

        result = ReportResult(success=True, output_path=params.output_path, analysis=analysis)

        if params.generate_pdf:
            try:
                result.pdf_path = self._generate_pdf_report(params, analysis)
            except Exception as e:
                # The workbook is already written; report the PDF problem only
                logger.error(f"PDF generation failed: {e}")
                result.warnings.append(f"PDF generation failed: {e}")

        return result

    def _generate_pdf_report(self, params: ReportGenerationParams, analysis: AnalysisResult) -> Path:
        from infrastructure.pdf_writer import PdfWriter, first_valid_date, format_filename

        pdf_dir = Path(params.pdf_output_dir) if params.pdf_output_dir else params.output_path.parent
        filename = format_filename(params.pdf_filename_pattern, first_valid_date(analysis.records))
        pdf_path = pdf_dir / filename

        logger.info(f"Writing PDF summary: {pdf_path}")
        PdfWriter(params.ui_prefs, params.custom_font_path).create_report(
            analysis.dataset, analysis.employees, pdf_path
        )
        return pdf_path

    def export_view(
        self,
        analysis: AnalysisResult,
        output_path: Path,
        search_term: str = "",
        status: str = "all",
        sort_key: Optional[str] = None,
        sort_direction: str = "asc",
        sheet_name: str = "Leave Analysis"
    ) -> Path:
        """Export the filtered and sorted record view to a workbook."""
        from infrastructure.excel_writer import ExcelWriter

        view = sort_records(
            filter_records(analysis.records, search_term, status),
            sort_key,
            sort_direction
        )
        return ExcelWriter(sheet_name=sheet_name).write_records(view, output_path)

    @staticmethod
    def build_params_from_config(
        config: AppConfig,
        source_path: Path,
        output_path: Optional[Path] = None,
        generate_pdf: Optional[bool] = None
    ) -> ReportGenerationParams:
        """
        Build ReportGenerationParams from AppConfig.

        Args:
            config: Application configuration
            source_path: Path to the source workbook
            output_path: Output workbook; derived from output settings when None
            generate_pdf: Overrides the configured PDF toggle when given

        Returns:
            ReportGenerationParams ready for generate_report()
        """
        settings = config.output_settings

        if output_path is None:
            output_dir = Path(settings.output_dir) if settings.output_dir else source_path.parent
            output_path = output_dir / settings.filename_pattern

        return ReportGenerationParams(
            source_path=source_path,
            output_path=output_path,
            output_sheet_name=settings.sheet_name,
            include_employee_sheet=settings.include_employee_sheet,
            ui_prefs=config.ui_prefs,
            generate_pdf=settings.generate_pdf if generate_pdf is None else generate_pdf,
            pdf_output_dir=settings.pdf_output_dir or None,
            pdf_filename_pattern=settings.pdf_filename_pattern,
            custom_font_path=config.paths.custom_font_path or None,
        )


def summary_cards(analysis: AnalysisResult) -> Dict[str, str]:
    """Formatted dataset card values for display."""
    dataset = analysis.dataset
    return {
        "Expected Hours": f"{dataset.total_expected_hours:.1f}h",
        "Actual Hours": f"{dataset.total_actual_hours:.1f}h",
        "Attendance Rate": f"{dataset.attendance_rate_pct:.1f}%",
        "Productivity": f"{dataset.productivity_pct:.1f}%",
        "Leaves": str(dataset.total_leaves),
        "Overtime": str(dataset.total_overtime),
        "Undertime": str(dataset.total_undertime),
        "Employees": str(len(analysis.employees)),
    }
