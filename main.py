"""
Leave Analyzer

Reads an attendance workbook (Employee Name / Date / In-Time / Out-Time),
classifies every day as leave, overtime or undertime and writes the
analysis workbook and PDF summary.
"""

import argparse
import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from application.report_service import AttendanceAnalysisService, summary_cards
from config.config_manager import ConfigManager
from domain.exceptions import AttendanceError
from infrastructure.logger import get_logger

logger = get_logger("LeaveAnalyzer")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyse employee attendance workbooks.")
    parser.add_argument("source", type=Path, help="Attendance .xlsx file")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Output workbook (default: from config)")
    parser.add_argument("-c", "--config", type=Path, default=None,
                        help="Path to config.json")
    parser.add_argument("--no-pdf", action="store_true", help="Skip the PDF summary")
    return parser


def main(argv=None) -> int:
    """Application entry point."""
    args = build_arg_parser().parse_args(argv)

    config_manager = ConfigManager(args.config)
    config = config_manager.load()

    service = AttendanceAnalysisService()
    params = service.build_params_from_config(
        config,
        args.source,
        output_path=args.output,
        generate_pdf=False if args.no_pdf else None
    )

    try:
        result = service.generate_report(params)
    except (AttendanceError, FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    for label, value in summary_cards(result.analysis).items():
        logger.info(f"{label:<16} {value}")
    logger.info(f"Workbook: {result.output_path}")
    if result.pdf_path:
        logger.info(f"PDF: {result.pdf_path}")
    for warning in result.warnings:
        logger.warning(warning)

    config.paths.last_source_file = str(args.source)
    config_manager.save()
    return 0


if __name__ == "__main__":
    sys.exit(main())
