"""Batch scoring of evaluation documents"""
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

from tqdm import tqdm

from sitescore.classification.bands import BandTable
from sitescore.config.settings import BatchSettings, ScoringConfig
from sitescore.domain.exceptions import (
    BatchProcessingError,
    ParameterValidationError,
    SiteScoreError,
)
from sitescore.domain.models import BatchResult, EvaluationRecord, ScoringResult
from sitescore.scoring.engine import ScoringEngine
from sitescore.utils.timing import section_timer

from .validation import InputValidator, load_json_document, parse_timestamp

logger = logging.getLogger(__name__)

class BatchScorer:
    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        settings: Optional[BatchSettings] = None,
    ):
        self.settings = settings or BatchSettings()
        self.engine = ScoringEngine(config)
        self.validator = InputValidator(
            min_score=self.settings.score_min,
            max_score=self.settings.score_max,
        )

    def score_files(
        self,
        paths: Sequence[Union[str, Path]],
        *,
        band_table: Union[str, BandTable, None] = None,
    ) -> BatchResult:
        """
        Score every evaluation document in ``paths``.

        Failures are collected per path; with ``fail_fast`` the first one
        aborts the batch.
        """
        if not paths:
            raise ParameterValidationError(
                "paths",
                paths,
                expected_type="non-empty list of evaluation files",
            )

        batch = BatchResult()
        show_progress = self.settings.show_progress and os.getenv("NO_PROGRESS", "").lower() not in ("1", "true", "yes")

        with section_timer(f"Scoring {len(paths)} evaluation(s)", logger) as timing:
            for path in tqdm(paths, desc="Scoring", unit="eval", disable=not show_progress):
                key = str(path)
                try:
                    result, record = self.score_file(path, band_table=band_table)
                except SiteScoreError as e:
                    if self.settings.fail_fast:
                        raise BatchProcessingError(
                            f"Failed to score {key}: {e.message}",
                            batch_size=len(paths),
                            failed_count=len(batch.failures) + 1,
                        ).add_context('file_path', key) from e
                    logger.warning("Skipping %s: %s", key, e.message)
                    batch.failures[key] = e.message
                    continue
                batch.results[key] = result
                if record is not None:
                    batch.records.append(record)

        batch.processing_time = timing["elapsed"]
        logger.info(
            "Scored %d/%d evaluation(s), %d failure(s)",
            len(batch.results), batch.n_inputs, len(batch.failures),
        )
        return batch

    def score_file(self, path, *, band_table=None):
        doc = load_json_document(path)
        meta, criteria, items = self.validator.parse_evaluation(doc)
        result = self.engine.score(items, criteria, band_table=band_table)
        return result, self._to_record(meta, result, path)

    @staticmethod
    def _to_record(meta, result: ScoringResult, path) -> Optional[EvaluationRecord]:
        """Evaluations carrying center and date metadata feed the analytics."""
        if "center_id" not in meta or "created_at" not in meta:
            return None
        return EvaluationRecord(
            evaluation_id=str(meta.get("evaluation_id", Path(path).stem)),
            center_id=str(meta["center_id"]),
            total_score=result.total_score,
            created_at=parse_timestamp(meta["created_at"]),
            status=result.status,
        )
