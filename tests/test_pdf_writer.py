"""
Unit tests for PdfWriter and its filename helpers.
"""

import pytest
from datetime import date
from pathlib import Path
import tempfile

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.aggregator import aggregate
from domain.classifier import classify_rows
from domain.entities import DatasetSummary
from infrastructure.pdf_writer import (
    PdfWriter, SummaryPdf, find_unicode_font, first_valid_date, format_filename
)


def sample_analysis(names=("Alice", "Bob")):
    records = classify_rows([
        {"Employee Name": name, "Date": "2024-02-05", "In-Time": "09:00", "Out-Time": "17:30"}
        for name in names
    ])
    dataset, employees = aggregate(records)
    return records, dataset, employees


class TestFormatFilename:
    """Tests for format_filename utility function."""

    def test_basic_formatting(self):
        result = format_filename("leave_{year}_{month}.pdf", date(2025, 12, 3))
        assert result == "leave_2025_12.pdf"

    def test_month_padding(self):
        result = format_filename("leave_{year}_{month}.pdf", date(2025, 1, 31))
        assert result == "leave_2025_01.pdf"

    def test_no_placeholders(self):
        assert format_filename("leave-analysis.pdf", date(2025, 1, 1)) == "leave-analysis.pdf"

    def test_no_valid_date(self):
        assert format_filename("leave_{year}_{month}.pdf", None) == "leave_unknown_unknown.pdf"


class TestFirstValidDate:
    """Tests for first_valid_date."""

    def test_earliest_valid(self):
        records = classify_rows([
            {"Employee Name": "A", "Date": "2024-03-10"},
            {"Employee Name": "A", "Date": "garbage"},
            {"Employee Name": "A", "Date": "2024-03-02"},
        ])
        assert first_valid_date(records) == date(2024, 3, 2)

    def test_none_when_all_invalid(self):
        records = classify_rows([{"Employee Name": "A", "Date": "garbage"}])
        assert first_valid_date(records) is None


class TestPdfWriter:
    """Tests for PdfWriter class."""

    def test_empty_dataset_writes_nothing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "empty.pdf"

            PdfWriter().create_report(DatasetSummary(), [], output_path)

            assert not output_path.exists()

    def test_creates_pdf(self):
        _, dataset, employees = sample_analysis()
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "nested" / "report.pdf"

            PdfWriter().create_report(dataset, employees, output_path)

            assert output_path.exists()
            assert output_path.read_bytes().startswith(b"%PDF")

    def test_many_employees_span_pages(self):
        names = [f"Employee {i:03d}" for i in range(80)]
        _, dataset, employees = sample_analysis(names)
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "long.pdf"

            PdfWriter().create_report(dataset, employees, output_path)

            assert output_path.stat().st_size > 0


class TestSummaryPdf:
    """Tests for SummaryPdf class."""

    def test_initialization(self):
        pdf = SummaryPdf(title="Test Report")
        assert pdf.title_text == "Test Report"
        assert pdf.font_family_name in ("Helvetica", "ReportFont")

    def test_safe_text_with_core_font(self):
        pdf = SummaryPdf(title="Test")
        if pdf.font_family_name == "Helvetica":
            assert pdf.safe_text("Zoë 王") == "Zoë ?"
        else:
            assert pdf.safe_text("Zoë 王") == "Zoë 王"

    def test_missing_custom_font_falls_back(self):
        assert find_unicode_font("/nonexistent/font.ttf") == find_unicode_font(None)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
