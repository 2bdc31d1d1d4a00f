"""
Tests for the application service and the command-line entry point.
"""

import pytest
import tempfile
from pathlib import Path

import sys
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from openpyxl import Workbook, load_workbook

from application.report_service import (
    AttendanceAnalysisService, ReportGenerationParams, summary_cards
)
from config.config_manager import AppConfig, UIPrefs
from domain.exceptions import InvalidInputError
from infrastructure.excel_parser import ExcelFormatError


ROWS = [
    {"Employee Name": "Alice", "Date": "2024-01-01", "In-Time": "09:00", "Out-Time": "17:30"},
    {"Employee Name": "Bob", "Date": "2024-01-06"},
    {"Employee Name": "Alice", "Date": "2024-01-02", "In-Time": "09:00", "Out-Time": "13:00"},
]


@pytest.fixture
def workdir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def source(workdir):
    wb = Workbook()
    ws = wb.active
    ws.append(["Employee Name", "Date", "In-Time", "Out-Time"])
    for row in ROWS:
        ws.append([row.get(k) for k in ("Employee Name", "Date", "In-Time", "Out-Time")])
    path = workdir / "january.xlsx"
    wb.save(path)
    return path


class TestAnalyze:
    """Tests for AttendanceAnalysisService.analyze."""

    def test_result(self):
        result = AttendanceAnalysisService().analyze(ROWS)

        assert len(result.records) == 3
        assert [e.name for e in result.employees] == ["Alice", "Bob"]
        assert result.dataset.total_leaves == 1
        assert result.employee("Alice").total_actual_hours == 12.5
        assert result.employee("Alice").total_expected_hours == 17.0
        assert result.employee("Nobody") is None

    def test_new_upload_does_not_touch_previous(self):
        service = AttendanceAnalysisService()
        first = service.analyze(ROWS)
        second = service.analyze(ROWS[:1])

        assert first.dataset.record_count == 3
        assert second.dataset.record_count == 1
        assert first.employees[0] is not second.employees[0]

    def test_none_rows(self):
        with pytest.raises(InvalidInputError):
            AttendanceAnalysisService().analyze(None)

    def test_summary_cards(self):
        cards = summary_cards(AttendanceAnalysisService().analyze(ROWS))

        assert cards["Expected Hours"] == "21.0h"
        assert cards["Actual Hours"] == "12.5h"
        assert cards["Attendance Rate"] == "66.7%"
        assert cards["Leaves"] == "1"
        assert cards["Employees"] == "2"


class TestGenerateReport:
    """Tests for AttendanceAnalysisService.generate_report."""

    def test_writes_workbook_and_pdf(self, source, workdir):
        params = ReportGenerationParams(
            source_path=source,
            output_path=workdir / "out" / "leave-analysis.xlsx",
        )

        result = AttendanceAnalysisService().generate_report(params)

        assert result.success
        assert result.output_path.exists()
        assert result.pdf_path == workdir / "out" / "leave-analysis.pdf"
        assert result.pdf_path.exists()
        assert result.warnings == []
        ws = load_workbook(result.output_path)["Leave Analysis"]
        assert ws.max_row == 4

    def test_without_pdf(self, source, workdir):
        params = ReportGenerationParams(
            source_path=source,
            output_path=workdir / "leave-analysis.xlsx",
            generate_pdf=False,
        )

        result = AttendanceAnalysisService().generate_report(params)

        assert result.pdf_path is None
        assert not (workdir / "leave-analysis.pdf").exists()

    def test_pdf_failure_is_a_warning(self, source, workdir, monkeypatch):
        from infrastructure import pdf_writer

        def boom(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(pdf_writer.PdfWriter, "create_report", boom)
        params = ReportGenerationParams(source_path=source, output_path=workdir / "a.xlsx")

        result = AttendanceAnalysisService().generate_report(params)

        assert result.output_path.exists()
        assert result.pdf_path is None
        assert "disk full" in result.warnings[0]

    def test_saved_status_filter(self, source, workdir):
        params = ReportGenerationParams(
            source_path=source,
            output_path=workdir / "leave.xlsx",
            ui_prefs=UIPrefs(status_filter="leave"),
            generate_pdf=False,
        )

        result = AttendanceAnalysisService().generate_report(params)

        wb = load_workbook(result.output_path)
        ws = wb["Leave Analysis"]
        assert ws.max_row == 2
        assert ws.cell(2, 1).value == "Bob"
        # Totals still cover every record
        assert wb["By Employee"].max_row == 3
        assert result.analysis.dataset.record_count == 3

    def test_saved_sort(self, source, workdir):
        params = ReportGenerationParams(
            source_path=source,
            output_path=workdir / "sorted.xlsx",
            ui_prefs=UIPrefs(sort_key="act", sort_direction="desc"),
            generate_pdf=False,
        )

        result = AttendanceAnalysisService().generate_report(params)

        ws = load_workbook(result.output_path)["Leave Analysis"]
        header = [cell.value for cell in ws[1]]
        act = header.index("act") + 1
        assert [ws.cell(r, act).value for r in range(2, 5)] == [8.5, 4.0, 0]

    def test_unknown_saved_filter(self, source, workdir):
        params = ReportGenerationParams(
            source_path=source,
            output_path=workdir / "x.xlsx",
            ui_prefs=UIPrefs(status_filter="absent"),
            generate_pdf=False,
        )

        with pytest.raises(ValueError):
            AttendanceAnalysisService().generate_report(params)

    def test_empty_sheet(self, workdir):
        wb = Workbook()
        wb.active.append(["Employee Name", "Date", "In-Time", "Out-Time"])
        path = workdir / "empty.xlsx"
        wb.save(path)

        with pytest.raises(ValueError):
            AttendanceAnalysisService().generate_report(
                ReportGenerationParams(source_path=path, output_path=workdir / "o.xlsx")
            )

    def test_bad_format_propagates(self, workdir):
        wb = Workbook()
        wb.active.append(["Name", "Day"])
        path = workdir / "bad.xlsx"
        wb.save(path)

        with pytest.raises(ExcelFormatError):
            AttendanceAnalysisService().generate_report(
                ReportGenerationParams(source_path=path, output_path=workdir / "o.xlsx")
            )

    def test_export_view(self, workdir):
        service = AttendanceAnalysisService()
        analysis = service.analyze(ROWS)

        path = service.export_view(
            analysis, workdir / "leave-only.xlsx", status="leave"
        )

        ws = load_workbook(path)["Leave Analysis"]
        assert ws.max_row == 2
        assert ws.cell(2, 1).value == "Bob"


class TestBuildParams:
    """Tests for build_params_from_config."""

    def test_defaults_next_to_source(self):
        params = AttendanceAnalysisService.build_params_from_config(
            AppConfig(), Path("/data/jan.xlsx")
        )

        assert params.output_path == Path("/data/leave-analysis.xlsx")
        assert params.generate_pdf is True
        assert params.pdf_output_dir is None
        assert params.custom_font_path is None

    def test_overrides(self):
        config = AppConfig()
        config.output_settings.output_dir = "/reports"
        config.output_settings.pdf_output_dir = "/pdf"
        config.paths.custom_font_path = "/fonts/x.ttf"

        params = AttendanceAnalysisService.build_params_from_config(
            config, Path("/data/jan.xlsx"), generate_pdf=False
        )

        assert params.output_path == Path("/reports/leave-analysis.xlsx")
        assert params.generate_pdf is False
        assert params.pdf_output_dir == "/pdf"
        assert params.custom_font_path == "/fonts/x.ttf"


class TestMain:
    """Tests for the main.py entry point."""

    def test_run(self, source, workdir):
        import main

        output = workdir / "report.xlsx"
        code = main.main([str(source), "-o", str(output), "--no-pdf",
                          "-c", str(workdir / "config.json")])

        assert code == 0
        assert output.exists()
        assert (workdir / "config.json").exists()

    def test_missing_source(self, workdir):
        import main

        code = main.main([str(workdir / "missing.xlsx"), "-c", str(workdir / "config.json")])

        assert code == 1

    @pytest.mark.parametrize("filename", ["attendance.csv", "attendance.xlsx"])
    def test_unreadable_source(self, workdir, filename):
        import main

        path = workdir / filename
        path.write_text("Employee Name,Date,In-Time,Out-Time\n")

        code = main.main([str(path), "--no-pdf", "-c", str(workdir / "config.json")])

        assert code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
