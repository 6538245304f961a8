"""Configuration loading from CLI args, JSON files and defaults."""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping

from sitescore.classification.bands import BandTable
from sitescore.config.resolvers import resolve_config_path
from sitescore.config.settings import (
    Settings, ScoringConfig, BatchSettings, OutputSettings, LoggingSettings,
    LogLevel, OutputFormat
)
from sitescore.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SCORING_KEYS = {
    "knockout_threshold",
    "review_threshold",
    "doc_penalty_per_missing",
    "max_doc_penalty",
    "precision",
    "band_table",
    "bands",
}

class ConfigurationLoader:
    """Loads configuration from CLI args, scoring files and system defaults."""

    def load_defaults(self) -> Settings:
        """Load default configuration settings."""
        return Settings(
            scoring=ScoringConfig(
                knockout_threshold=40,
                review_threshold=30,
                doc_penalty_per_missing=5,
                max_doc_penalty=15,
                precision=None,
                band_table="approval",
            ),
            batch=BatchSettings(
                fail_fast=False,
                show_progress=True,
                score_min=0,
                score_max=100,
            ),
            output=OutputSettings(
                format=OutputFormat.JSON,
                include_breakdown=True,
            ),
            logging=LoggingSettings(
                level=LogLevel.INFO,
                file_path=None,
                console_output=True,
            ),
            debug_mode=False,
            dry_run=False,
        )

    def scoring_from_dict(self, data: Mapping[str, Any], base: ScoringConfig = None) -> ScoringConfig:
        """Overlay a mapping of scoring options onto ``base``."""
        base = base or ScoringConfig()
        unknown = set(data) - SCORING_KEYS
        if unknown:
            raise ConfigurationError(
                f"Unknown scoring option(s): {', '.join(sorted(unknown))}",
                config_field="scoring"
            ).add_suggestion(f"Recognised options: {', '.join(sorted(SCORING_KEYS))}")

        updates = {k: data[k] for k in SCORING_KEYS - {"bands", "band_table"} if k in data}
        if "bands" in data:
            bands = data["bands"]
            if isinstance(bands, Mapping):
                updates["band_table"] = BandTable.from_pairs(
                    bands.get("name", "custom"),
                    bands.get("bands", []),
                    scale=bands.get("scale", 100),
                    review_label=bands.get("review_label"),
                    reject_label=bands.get("reject_label"),
                )
            else:
                updates["band_table"] = BandTable.from_pairs(data.get("band_table", "custom"), bands)
        elif "band_table" in data:
            updates["band_table"] = data["band_table"]

        scoring = replace(base, **updates)
        scoring.validate()
        return scoring

    def load_scoring_file(self, path, base: ScoringConfig = None) -> ScoringConfig:
        """Load scoring options from a JSON file."""
        p = Path(path)
        try:
            with open(p, encoding="utf-8") as fh:
                data = json.load(fh)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read scoring config {p}: {e}",
                config_field="config"
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in scoring config {p}: {e.msg}",
                config_field="config"
            ) from e
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Scoring config {p} must contain a JSON object",
                config_field="config"
            )
        logger.debug("Loaded scoring config from %s", p)
        return self.scoring_from_dict(data, base)

    def load_from_cli_args(self, args) -> Settings:
        """Load configuration from CLI arguments."""
        try:
            settings = self.load_defaults()

            scoring = settings.scoring
            config_path = resolve_config_path(getattr(args, 'config', None))
            if config_path:
                scoring = self.load_scoring_file(config_path, scoring)
            if getattr(args, 'table', None):
                scoring = scoring.with_table(args.table)

            batch_updates = {}
            if getattr(args, 'fail_fast', False):
                batch_updates['fail_fast'] = True
            if getattr(args, 'no_progress', False):
                batch_updates['show_progress'] = False

            output_updates = {}
            output_path = getattr(args, 'output', None)
            if output_path:
                suffix = Path(output_path).suffix.lower().lstrip(".")
                if suffix == OutputFormat.CSV.value:
                    output_updates['format'] = OutputFormat.CSV
            if getattr(args, 'no_breakdown', False):
                output_updates['include_breakdown'] = False

            logging_updates = {}
            if getattr(args, 'log_file', None):
                logging_updates['file_path'] = Path(args.log_file)
            if getattr(args, 'debug', False):
                logging_updates['level'] = LogLevel.DEBUG

            # only batch takes a list of evaluation documents
            input_files = []
            if getattr(args, 'cmd', None) == 'batch' and getattr(args, 'input', None):
                input_files = [Path(f) for f in args.input]
            input_dir = getattr(args, 'input_dir', None)

            return replace(
                settings,
                scoring=scoring,
                batch=replace(settings.batch, **batch_updates),
                output=replace(settings.output, **output_updates),
                logging=replace(settings.logging, **logging_updates),
                input_files=input_files,
                input_directory=Path(input_dir) if input_dir else None,
                recursive=getattr(args, 'recursive', False),
                output_path=Path(output_path) if output_path else None,
                debug_mode=getattr(args, 'debug', False),
                dry_run=getattr(args, 'dry_run', False),
            )

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Failed to load configuration from CLI arguments: {str(e)}"
            ) from e

def configure_from_cli(args) -> Settings:
    """Main entry point to configure settings from CLI args."""
    loader = ConfigurationLoader()
    settings = loader.load_from_cli_args(args)
    settings.validate()
    return settings
