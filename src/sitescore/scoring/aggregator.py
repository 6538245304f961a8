"""Weighted aggregation of per-criterion scores."""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from sitescore.domain.models import BreakdownItem, Criterion, ScoringInput

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class AggregateResult:
    score: float
    weighted_sum: float
    total_weight: float
    breakdown: Tuple[BreakdownItem, ...]
    skipped: Tuple[str, ...] = ()

def round_half_up(value: float, precision: Optional[int] = None):
    """Round halves away from zero; ``precision=None`` returns an int."""
    quantum = Decimal(1) if not precision else Decimal(1).scaleb(-precision)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if precision is None:
        return int(rounded)
    return float(rounded)

def effective_weight(weight: float) -> float:
    """Non-positive weights contribute nothing."""
    return weight if weight and weight > 0 else 0

def index_criteria(criteria: Iterable[Criterion]) -> Dict[str, Criterion]:
    # ids arrive as ints from the database and as strings from JSON forms
    return {str(c.criterion_id): c for c in criteria}

def weighted_mean(weighted_sum: float, total_weight: float, precision: Optional[int] = None):
    if total_weight == 0:
        return 0 if precision is None else 0.0
    return round_half_up(weighted_sum / total_weight, precision)

def aggregate(
    items: Iterable[ScoringInput],
    criteria: Iterable[Criterion],
    precision: Optional[int] = None,
) -> AggregateResult:
    """
    Weight-proportional mean of the item scores.

    Items referencing an unknown criterion are skipped. An empty input or a
    zero total weight yields 0. Out-of-range scores are not clamped.
    """
    lookup = index_criteria(criteria)
    weighted_sum = 0.0
    total_weight = 0.0
    breakdown: List[BreakdownItem] = []
    skipped: List[str] = []

    for item in items:
        criterion = lookup.get(str(item.criterion_id))
        if criterion is None:
            skipped.append(str(item.criterion_id))
            continue

        weight = effective_weight(criterion.weight)
        contribution = item.score * weight
        weighted_sum += contribution
        total_weight += weight

        breakdown.append(BreakdownItem(
            criterion_id=criterion.criterion_id,
            score=item.score,
            weight=weight,
            weighted_score=contribution,
            is_knockout=criterion.is_knockout,
            requires_doc=criterion.requires_doc,
            has_documentation=item.has_documentation,
        ))

    if skipped:
        logger.debug("Skipped %d item(s) with unknown criteria: %s", len(skipped), ", ".join(skipped))

    return AggregateResult(
        score=weighted_mean(weighted_sum, total_weight, precision),
        weighted_sum=weighted_sum,
        total_weight=total_weight,
        breakdown=tuple(breakdown),
        skipped=tuple(skipped),
    )

def category_scores(
    breakdown: Sequence[BreakdownItem],
    criteria: Iterable[Criterion],
    precision: Optional[int] = None,
) -> Dict[str, float]:
    """Weighted mean per criterion category; uncategorised items are left out."""
    lookup: Mapping[str, Criterion] = index_criteria(criteria)
    sums: Dict[str, List[float]] = {}
    for b in breakdown:
        category = lookup[str(b.criterion_id)].category
        if not category:
            continue
        num_den = sums.setdefault(category, [0.0, 0.0])
        num_den[0] += b.weighted_score
        num_den[1] += b.weight
    return {cat: weighted_mean(num, den, precision) for cat, (num, den) in sums.items()}
