"""Command line interface for scoring and benchmarking site evaluations."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from sitescore.analytics import benchmark, dynamics
from sitescore.config.loader import configure_from_cli
from sitescore.config.resolvers import resolve_input_files
from sitescore.config.settings import OutputFormat, Settings, set_settings, get_settings
from sitescore.domain.exceptions import ConfigurationError, SiteScoreError, ValidationError
from sitescore.processing.batch import BatchScorer
from sitescore.processing.validation import InputValidator, load_json_document
from sitescore.results import assemblers
from sitescore.scoring.engine import ScoringEngine
from sitescore.utils.logging import setup_logging


def _add_common_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Scoring config JSON (thresholds, penalties, bands).",
    )
    debug_group = p.add_argument_group("Debug Options")
    debug_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with verbose logging.",
    )
    debug_group.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Also write logs to this file.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the sitescore CLI."""
    parser = argparse.ArgumentParser(
        prog="sitescore",
        description=(
            "Score clinical research site evaluations and derive approval "
            "status, maturity tier and benchmark level."
        ),
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    score_p = sub.add_parser("score", help="Score a single evaluation")
    score_p.add_argument("-c", "--criteria", required=True, help="Criteria JSON list.")
    score_p.add_argument("-i", "--input", required=True, help="Answers JSON list.")
    score_p.add_argument(
        "-t", "--table",
        help="Band table for the status (approval, traffic, maturity, benchmark, credit).",
    )
    score_p.add_argument("-o", "--output", help="Write the result JSON here instead of stdout.")
    score_p.add_argument("--no-breakdown", action="store_true", help="Omit the per-item breakdown.")
    _add_common_options(score_p)

    batch_p = sub.add_parser("batch", help="Score a set of evaluation documents")
    mx = batch_p.add_mutually_exclusive_group(required=True)
    mx.add_argument("-i", "--input", nargs="+", help="Evaluation JSON documents.")
    mx.add_argument("-d", "--input-dir", type=str, help="Directory of evaluation JSON documents.")
    batch_p.add_argument(
        "-R", "--recursive",
        action="store_true",
        help="With --input-dir, search subdirectories recursively.",
    )
    batch_p.add_argument("-o", "--output", required=True, help="Output path (.json or .csv).")
    batch_p.add_argument("-t", "--table", help="Band table for the status.")
    batch_p.add_argument("--fail-fast", action="store_true", help="Stop at the first invalid evaluation.")
    batch_p.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    batch_p.add_argument("--no-breakdown", action="store_true", help="Omit per-item breakdowns (JSON).")
    batch_p.add_argument("--dry-run", action="store_true", help="Validate configuration and list inputs only.")
    _add_common_options(batch_p)

    bench_p = sub.add_parser("benchmark", help="Benchmark stored evaluations")
    bench_p.add_argument("-i", "--input", required=True, help="JSON list of stored evaluations.")
    bench_p.add_argument("-t", "--table", default="benchmark", help="Level table (benchmark or maturity).")
    bench_p.add_argument("-o", "--output", help="Write the summary JSON here instead of stdout.")
    _add_common_options(bench_p)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the sitescore CLI."""
    args = build_parser().parse_args(argv)

    try:
        settings = configure_from_cli(args)
        set_settings(settings)

        logger, summary_logger = setup_logging(
            log_file=str(settings.logging.file_path) if settings.logging.file_path else None,
            console=settings.logging.console_output,
            level=settings.logging.level.value,
        )

        if settings.debug_mode:
            logger.debug("Configuration details:")
            for section, values in settings.to_dict().items():
                logger.debug("  %s: %s", section, values)

        if args.cmd == "score":
            _run_score(args, settings)
        elif args.cmd == "batch":
            _run_batch(settings, summary_logger)
        else:
            _run_benchmark(args)

        sys.exit(0)

    except ConfigurationError as e:
        logging.error("Configuration error: %s", e.message)
        for suggestion in e.suggestions:
            logging.error("  - %s", suggestion)
        sys.exit(1)

    except ValidationError as e:
        logging.error("Invalid input: %s", e.message)
        sys.exit(1)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        sys.exit(130)

    except SiteScoreError as e:
        logging.error("Scoring failed: %s", e)
        if get_settings().debug_mode:
            logging.exception("Full traceback:")
        sys.exit(1)


def _run_score(args, settings: Settings) -> None:
    validator = InputValidator(settings.batch.score_min, settings.batch.score_max)
    criteria = validator.parse_criteria(_as_list(load_json_document(args.criteria), "criteria"))
    items = validator.parse_items(_as_list(load_json_document(args.input), "items"))

    result = ScoringEngine(settings.scoring).score(items, criteria)
    payload = result.to_dict(include_breakdown=settings.output.include_breakdown)
    _emit(payload, settings.output_path)


def _run_batch(settings: Settings, summary_logger: logging.Logger) -> None:
    inputs = resolve_input_files(
        inputs=[str(p) for p in settings.input_files],
        input_dir=str(settings.input_directory) if settings.input_directory else None,
        recursive=settings.recursive,
    )

    if settings.dry_run:
        _print_dry_run_summary(settings, inputs)
        return

    scorer = BatchScorer(settings.scoring, settings.batch)
    batch = scorer.score_files(inputs)

    if settings.output.format == OutputFormat.CSV:
        assemblers.write_csv(assemblers.result_rows(batch.results), settings.output_path)
    else:
        assemblers.write_json(
            batch.results,
            settings.output_path,
            include_breakdown=settings.output.include_breakdown,
        )

    summary_logger.info("Scored: %s of %s", len(batch.results), batch.n_inputs)
    summary_logger.info("Failures: %s", len(batch.failures))
    summary_logger.info("Output: %s", settings.output_path)
    if batch.records:
        summary_logger.info("Trends: %s", dynamics.trend_summary(batch.records))


def _run_benchmark(args) -> None:
    raw = _as_list(load_json_document(args.input), "evaluations")
    records = [InputValidator.parse_record(r) for r in raw]

    summary = benchmark.summarize(records, args.table)
    payload = summary.to_dict()
    payload["ranking"] = [r.to_dict() for r in benchmark.ranking(records, args.table)]
    payload["trends"] = dynamics.trend_summary(records)
    payload["center_trends"] = dynamics.center_trends(records)
    _emit(payload, Path(args.output) if args.output else None)


def _as_list(data, what: str) -> list:
    if not isinstance(data, list):
        raise ValidationError(f"Expected a JSON list of {what}", field_name=what)
    return data


def _emit(payload: dict, output_path: Optional[Path]) -> None:
    text = json.dumps(payload, indent=2, default=str)
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


def _print_dry_run_summary(settings: Settings, inputs) -> None:
    """Print a summary for dry run mode."""
    print("\n" + "=" * 60)
    print("DRY RUN SUMMARY")
    print("=" * 60)
    print(f"Input files:        {len(inputs):,}")
    print(f"Output path:        {settings.output_path}")
    print(f"Output format:      {settings.output.format.value}")
    print(f"Band table:         {settings.scoring.bands.name}")
    print(f"Knockout threshold: {settings.scoring.knockout_threshold}")
    print(f"Review threshold:   {settings.scoring.review_threshold}")
    print(f"Fail fast:          {settings.batch.fail_fast}")
    print("=" * 60)

    if inputs:
        print("Example input files:")
        for i, path in enumerate(inputs[:5]):
            print(f"  {i + 1}. {path}")
        if len(inputs) > 5:
            print(f"  ... and {len(inputs) - 5} more")
    print()


if __name__ == "__main__":
    main()
