"""
Logger Module

Provides a centralized logging system for the leave analyzer.
Console output at INFO, full DEBUG trail in leave_analyzer.log.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

_LOG_FILE_NAME = "leave_analyzer.log"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def default_log_path() -> Path:
    """Log file location next to the project root."""
    return Path(__file__).parent.parent.parent / _LOG_FILE_NAME


def get_logger(
    name: str,
    log_file: Optional[str] = None,
    console_level: int = logging.INFO
) -> logging.Logger:
    """
    Get or create a named logger with console and file handlers.

    Handlers are attached only once per name, so modules can call this
    at import time.

    Args:
        name: Component name, e.g. "ExcelParser"
        log_file: Custom log file path. If None, uses leave_analyzer.log
        console_level: Minimum level echoed to stdout

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_path = Path(log_file) if log_file else default_log_path()
    try:
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as e:
        logger.warning(f"Cannot open log file {log_path}, logging to console only: {e}")
        return logger

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    return logger
