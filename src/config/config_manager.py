"""
Configuration Manager Module

Handles loading, saving, and managing application configuration.
Provides bi-directional mapping between settings dataclasses and JSON persistence.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from infrastructure.logger import get_logger

logger = get_logger("ConfigManager")


@dataclass
class Paths:
    """File paths configuration."""
    last_source_file: str = ""
    custom_font_path: str = ""  # Custom TTF font for PDF generation


@dataclass
class UIPrefs:
    """Display preferences: productivity tiers and default table view."""
    productivity_green_threshold: int = 100
    productivity_yellow_threshold: int = 80
    status_filter: str = "all"   # all / leave / present / overtime / undertime
    sort_key: str = ""           # Empty = input order
    sort_direction: str = "asc"


@dataclass
class OutputSettings:
    """Output settings for the generated report."""
    output_dir: str = ""  # Default empty = next to the source file
    filename_pattern: str = "leave-analysis.xlsx"
    sheet_name: str = "Leave Analysis"
    include_employee_sheet: bool = True

    # PDF output
    generate_pdf: bool = True
    pdf_output_dir: str = ""   # Empty = same directory as the xlsx
    pdf_filename_pattern: str = "leave-analysis.pdf"


@dataclass
class AppConfig:
    """Main application configuration container."""
    paths: Paths = field(default_factory=Paths)
    ui_prefs: UIPrefs = field(default_factory=UIPrefs)
    output_settings: OutputSettings = field(default_factory=OutputSettings)


class ConfigManager:
    """
    Manages application configuration with JSON persistence.

    Responsibilities:
    - Load configuration from JSON file
    - Save configuration to JSON file
    - Provide default configuration
    - Convert between dataclass and dict representations
    """

    DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.json"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self._config: AppConfig = AppConfig()

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def load(self) -> AppConfig:
        """Load configuration from JSON file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                self._config = self._dict_to_config(data)
            except (json.JSONDecodeError, KeyError, AttributeError) as e:
                logger.warning(f"Failed to load config {self.config_path}, using defaults: {e}")
                self._config = AppConfig()
        else:
            self._config = AppConfig()
        return self._config

    def save(self) -> None:
        """Save current configuration to JSON file."""
        data = self._config_to_dict(self._config)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def update(self, **kwargs) -> None:
        """Update specific configuration sections."""
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
        self.save()

    def _config_to_dict(self, config: AppConfig) -> dict:
        """Convert AppConfig dataclass to dictionary."""
        return {
            "paths": {
                "last_source_file": config.paths.last_source_file,
                "custom_font_path": config.paths.custom_font_path
            },
            "ui_prefs": {
                "productivity_green_threshold": config.ui_prefs.productivity_green_threshold,
                "productivity_yellow_threshold": config.ui_prefs.productivity_yellow_threshold,
                "status_filter": config.ui_prefs.status_filter,
                "sort_key": config.ui_prefs.sort_key,
                "sort_direction": config.ui_prefs.sort_direction
            },
            "output_settings": {
                "output_dir": config.output_settings.output_dir,
                "filename_pattern": config.output_settings.filename_pattern,
                "sheet_name": config.output_settings.sheet_name,
                "include_employee_sheet": config.output_settings.include_employee_sheet,
                "generate_pdf": config.output_settings.generate_pdf,
                "pdf_output_dir": config.output_settings.pdf_output_dir,
                "pdf_filename_pattern": config.output_settings.pdf_filename_pattern
            }
        }

    def _dict_to_config(self, data: dict) -> AppConfig:
        """Convert dictionary to AppConfig dataclass."""
        paths_data = data.get("paths", {})
        ui_prefs_data = data.get("ui_prefs", {})
        output_settings_data = data.get("output_settings", {})

        paths = Paths(
            last_source_file=paths_data.get("last_source_file", ""),
            custom_font_path=paths_data.get("custom_font_path", "")
        )

        ui_prefs = UIPrefs(
            productivity_green_threshold=ui_prefs_data.get("productivity_green_threshold", 100),
            productivity_yellow_threshold=ui_prefs_data.get("productivity_yellow_threshold", 80),
            status_filter=ui_prefs_data.get("status_filter", "all"),
            sort_key=ui_prefs_data.get("sort_key", ""),
            sort_direction=ui_prefs_data.get("sort_direction", "asc")
        )

        output_settings = OutputSettings(
            output_dir=output_settings_data.get("output_dir", ""),
            filename_pattern=output_settings_data.get("filename_pattern", "leave-analysis.xlsx"),
            sheet_name=output_settings_data.get("sheet_name", "Leave Analysis"),
            include_employee_sheet=output_settings_data.get("include_employee_sheet", True),
            generate_pdf=output_settings_data.get("generate_pdf", True),
            pdf_output_dir=output_settings_data.get("pdf_output_dir", ""),
            pdf_filename_pattern=output_settings_data.get("pdf_filename_pattern", "leave-analysis.pdf")
        )

        return AppConfig(
            paths=paths,
            ui_prefs=ui_prefs,
            output_settings=output_settings
        )
