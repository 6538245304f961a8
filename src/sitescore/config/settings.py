"""Core configuration settings for sitescore."""

import logging
from pathlib import Path
from typing import Optional, List, Union
from dataclasses import dataclass, field, replace
from enum import Enum

from sitescore.classification.bands import BandTable, get_band_table
from sitescore.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class OutputFormat(Enum):
    """Supported output formats."""
    JSON = "json"
    CSV = "csv"

@dataclass(frozen=True)
class ScoringConfig:
    """Thresholds, penalties and band table for one scoring call."""
    knockout_threshold: float = 40
    review_threshold: float = 30
    doc_penalty_per_missing: float = 5
    max_doc_penalty: float = 15
    precision: Optional[int] = None  # None rounds to an integer
    band_table: Union[str, BandTable] = "approval"

    @property
    def bands(self) -> BandTable:
        return get_band_table(self.band_table)

    def validate(self) -> None:
        """Validate scoring thresholds and penalties."""
        if self.review_threshold > self.knockout_threshold:
            raise ConfigurationError(
                "review_threshold must not exceed knockout_threshold",
                config_field="scoring.review_threshold"
            ).add_suggestion("Items between the two thresholds are flagged for review")

        if self.doc_penalty_per_missing < 0:
            raise ConfigurationError(
                "doc_penalty_per_missing must be non-negative",
                config_field="scoring.doc_penalty_per_missing"
            )

        if self.max_doc_penalty < 0:
            raise ConfigurationError(
                "max_doc_penalty must be non-negative",
                config_field="scoring.max_doc_penalty"
            )

        if self.precision is not None and (not isinstance(self.precision, int) or self.precision < 0):
            raise ConfigurationError(
                f"Invalid precision: {self.precision}",
                config_field="scoring.precision"
            ).add_suggestion("Use null for integer scores or a non-negative number of decimals")

        # raises for unknown table names
        self.bands

    def with_table(self, table: Union[str, BandTable]) -> "ScoringConfig":
        return replace(self, band_table=table)

    def to_dict(self) -> dict:
        return {
            "knockout_threshold": self.knockout_threshold,
            "review_threshold": self.review_threshold,
            "doc_penalty_per_missing": self.doc_penalty_per_missing,
            "max_doc_penalty": self.max_doc_penalty,
            "precision": self.precision,
            "band_table": self.bands.name,
        }

    @classmethod
    def simple(cls, band_table: Union[str, BandTable] = "traffic") -> "ScoringConfig":
        """Plain weighted percentage, two decimals, no documentation penalty."""
        return cls(doc_penalty_per_missing=0, max_doc_penalty=0, precision=2, band_table=band_table)

@dataclass
class BatchSettings:
    """Batch scoring configuration."""
    fail_fast: bool = False
    show_progress: bool = True
    score_min: float = 0
    score_max: float = 100

    def validate(self) -> None:
        if self.score_min >= self.score_max:
            raise ConfigurationError(
                "score_min must be lower than score_max",
                config_field="batch.score_min"
            )

@dataclass
class OutputSettings:
    """Output-related configuration."""
    format: OutputFormat = OutputFormat.JSON
    include_breakdown: bool = True

    def validate(self) -> None:
        if not isinstance(self.format, OutputFormat):
            raise ConfigurationError(
                f"Unsupported output format: {self.format}",
                config_field="output.format"
            ).add_suggestion(f"Use one of: {[f.value for f in OutputFormat]}")

@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    file_path: Optional[Path] = None
    console_output: bool = True
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def validate(self) -> None:
        """Validate logging settings."""
        if self.file_path and not self.file_path.parent.exists():
            raise ConfigurationError(
                f"Log directory does not exist: {self.file_path.parent}",
                config_field="logging.file_path"
            ).add_suggestion("Create the directory or use console logging only")

@dataclass
class Settings:
    """Main configuration settings for the sitescore CLI."""

    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    batch: BatchSettings = field(default_factory=BatchSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    # Runtime settings
    input_files: List[Path] = field(default_factory=list)
    input_directory: Optional[Path] = None
    recursive: bool = False
    output_path: Optional[Path] = None

    # Debug/development settings
    debug_mode: bool = False
    dry_run: bool = False

    def validate(self) -> None:
        """Validate all configuration settings."""
        try:
            self.scoring.validate()
            self.batch.validate()
            self.output.validate()
            self.logging.validate()

            self._validate_input_sources()
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Configuration validation failed: {str(e)}"
            ) from e

    def _validate_input_sources(self) -> None:
        """Input files and an input directory are mutually exclusive."""
        if self.input_files and self.input_directory is not None:
            raise ConfigurationError(
                "Cannot specify both input_files and input_directory",
                config_field="input_sources"
            ).add_suggestion("Use either --input-dir OR specific file paths, not both")

        if self.input_directory is not None and not self.input_directory.is_dir():
            raise ConfigurationError(
                f"Input directory does not exist: {self.input_directory}",
                config_field="input_directory"
            )

    def to_dict(self) -> dict:
        """Convert settings to dictionary for debugging."""
        return {
            'scoring': self.scoring.to_dict(),
            'batch': {
                'fail_fast': self.batch.fail_fast,
                'show_progress': self.batch.show_progress,
                'score_range': [self.batch.score_min, self.batch.score_max],
            },
            'output': {
                'format': self.output.format.value,
                'include_breakdown': self.output.include_breakdown,
                'path': str(self.output_path) if self.output_path else None,
            },
            'runtime': {
                'debug_mode': self.debug_mode,
                'dry_run': self.dry_run,
            }
        }

# Process-wide settings for the CLI; the scoring engine never reads these.
_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """Get the current global settings instance."""
    if _settings is None:
        raise ConfigurationError(
            "Settings not initialized. Call set_settings() first."
        ).add_suggestion("Initialize settings in your application startup")
    return _settings

def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    settings.validate()
    _settings = settings
    logger.info("Configuration loaded and validated successfully")

def reset_settings() -> None:
    global _settings
    _settings = None
