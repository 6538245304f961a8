"""Knockout, manual-review and missing-documentation rules."""

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence, Tuple

from sitescore.classification.classifier import BandClassifier
from sitescore.domain.models import BreakdownItem, Criterion
from .aggregator import index_criteria, round_half_up

KNOCKOUT_FAILED = "failed"
KNOCKOUT_REVIEW = "review"
KNOCKOUT_PASSED = "passed"

@dataclass(frozen=True)
class KnockoutOutcome:
    knockout_failed: bool
    requires_manual_review: bool
    breakdown: Tuple[BreakdownItem, ...]
    reason: Optional[str] = None

@dataclass(frozen=True)
class DocumentationCheck:
    required: int
    missing: int
    penalty: float
    confidence_score: int

def knockout_state(score: float, review_threshold: float, knockout_threshold: float) -> str:
    if score < review_threshold:
        return KNOCKOUT_FAILED
    if score < knockout_threshold:
        return KNOCKOUT_REVIEW
    return KNOCKOUT_PASSED

def evaluate_knockouts(
    breakdown: Sequence[BreakdownItem],
    *,
    review_threshold: float,
    knockout_threshold: float,
    criteria: Iterable[Criterion] = (),
) -> KnockoutOutcome:
    """Flag knockout items and return the breakdown with per-item flags set."""
    names = {k: c.display_name for k, c in index_criteria(criteria).items()}
    flagged = []
    failed = review = False
    reason = None

    for b in breakdown:
        if not b.is_knockout:
            flagged.append(b)
            continue
        state = knockout_state(b.score, review_threshold, knockout_threshold)
        if state == KNOCKOUT_FAILED:
            failed = True
            if reason is None:
                name = names.get(str(b.criterion_id), str(b.criterion_id))
                reason = (
                    f'Critical criterion failed: "{name}" '
                    f"(score: {b.score:g}/{review_threshold:g} required)"
                )
        elif state == KNOCKOUT_REVIEW:
            review = True
        flagged.append(replace(
            b,
            failed_knockout=state == KNOCKOUT_FAILED,
            needs_review=state == KNOCKOUT_REVIEW,
        ))

    return KnockoutOutcome(
        knockout_failed=failed,
        requires_manual_review=review,
        breakdown=tuple(flagged),
        reason=reason,
    )

def documentation_penalty(
    breakdown: Sequence[BreakdownItem],
    *,
    per_missing: float,
    max_penalty: float,
) -> DocumentationCheck:
    """Fixed penalty per missing required document, capped at ``max_penalty``."""
    required = sum(1 for b in breakdown if b.requires_doc)
    missing = sum(1 for b in breakdown if b.missing_documentation)
    penalty = min(missing * per_missing, max_penalty)
    if required:
        confidence = round_half_up((required - missing) / required * 100)
    else:
        confidence = 100
    return DocumentationCheck(
        required=required,
        missing=missing,
        penalty=penalty,
        confidence_score=confidence,
    )

def apply_penalty(base_score: float, penalty: float, precision: Optional[int] = None):
    """Subtract the penalty, never going below zero."""
    if not penalty:
        return base_score
    return max(0, round_half_up(base_score - penalty, precision))

def derive_status(
    final_score: float,
    classifier: BandClassifier,
    *,
    knockout_failed: bool,
    requires_manual_review: bool,
) -> str:
    """
    First match wins:
    1. a failed knockout rejects regardless of the score
    2. a borderline knockout, or a score in the review band, is conditional
    3. otherwise the plain band of the score
    """
    table = classifier.table
    if knockout_failed:
        return table.rejection
    numeric = classifier.classify(final_score)
    if requires_manual_review or numeric == table.review:
        return table.review
    return numeric
