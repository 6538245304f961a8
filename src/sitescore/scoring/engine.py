# sitescore/scoring/engine.py
"""Evaluation scoring pipeline: aggregate, penalise, override, classify."""

import logging
from typing import Iterable, Optional, Sequence, Union

from sitescore.classification.bands import BandTable, get_band_table
from sitescore.classification.classifier import BandClassifier
from sitescore.config.settings import ScoringConfig
from sitescore.domain.models import Criterion, ScoringInput, ScoringResult

from .aggregator import aggregate, category_scores
from .knockout import apply_penalty, derive_status, documentation_penalty, evaluate_knockouts

logger = logging.getLogger(__name__)

class ScoringEngine:
    """Main scoring engine.

    Holds nothing but its configuration, so one instance can score any
    number of evaluations, concurrently or not.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()
        self.config.validate()

    def score(
        self,
        items: Iterable[ScoringInput],
        criteria: Sequence[Criterion],
        *,
        band_table: Union[str, BandTable, None] = None,
    ) -> ScoringResult:
        """
        Score one evaluation.

        ``band_table`` overrides the configured table for this call only, so
        the same answers can be reported as approval status and maturity tier.
        """
        cfg = self.config
        table = get_band_table(band_table if band_table is not None else cfg.band_table)
        classifier = BandClassifier(table)

        agg = aggregate(items, criteria, precision=cfg.precision)

        outcome = evaluate_knockouts(
            agg.breakdown,
            review_threshold=cfg.review_threshold,
            knockout_threshold=cfg.knockout_threshold,
            criteria=criteria,
        )

        docs = documentation_penalty(
            outcome.breakdown,
            per_missing=cfg.doc_penalty_per_missing,
            max_penalty=cfg.max_doc_penalty,
        )
        final_score = apply_penalty(agg.score, docs.penalty, cfg.precision)

        status = derive_status(
            final_score,
            classifier,
            knockout_failed=outcome.knockout_failed,
            requires_manual_review=outcome.requires_manual_review,
        )

        logger.debug(
            "Scored %d item(s): base=%s penalty=%s final=%s status=%s (table=%s)",
            len(outcome.breakdown), agg.score, docs.penalty, final_score, status, table.name,
        )

        return ScoringResult(
            total_score=final_score,
            status=status,
            knockout_failed=outcome.knockout_failed,
            requires_manual_review=outcome.requires_manual_review,
            confidence_score=docs.confidence_score,
            missing_docs_penalty=docs.penalty,
            breakdown=outcome.breakdown,
            base_score=agg.score,
            knockout_reason=outcome.reason,
            category_scores=category_scores(outcome.breakdown, criteria, cfg.precision),
            band_table=table.name,
        )

def calculate_score(
    items: Iterable[ScoringInput],
    criteria: Sequence[Criterion],
    config: Optional[ScoringConfig] = None,
    *,
    band_table: Union[str, BandTable, None] = None,
) -> ScoringResult:
    """Convenience wrapper around ``ScoringEngine.score``."""
    return ScoringEngine(config).score(items, criteria, band_table=band_table)
