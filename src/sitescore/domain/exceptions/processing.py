"""Scoring run exceptions."""

from typing import Optional
from .base import SiteScoreError

class ProcessingError(SiteScoreError):
    """Base class for errors raised while scoring evaluations."""

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        evaluation_id: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if stage:
            self.add_context('processing_stage', stage)
        if evaluation_id:
            self.add_context('evaluation_id', evaluation_id)


class BatchProcessingError(ProcessingError):
    """Raised when a batch of evaluation documents cannot be scored."""

    def __init__(
        self,
        message: str,
        *,
        batch_size: Optional[int] = None,
        failed_count: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, stage="batch_scoring", **kwargs)
        if batch_size:
            self.add_context('batch_size', batch_size)
        if failed_count:
            self.add_context('failed_evaluations', failed_count)

        self.add_suggestion("Re-run without --fail-fast to collect every failure")

    def _get_default_error_code(self) -> str:
        return "BATCH_SCORING_FAILED"
