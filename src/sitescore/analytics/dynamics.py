"""Score trends across successive evaluations of the same center."""

from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from sitescore.domain.models import EvaluationRecord

IMPROVING = "improving"
STABLE = "stable"
DECLINING = "declining"
NO_DATA = "no_data"

TREND_THRESHOLD = 5

def calculate_trend(scores: Sequence[float], threshold: float = TREND_THRESHOLD) -> str:
    """Compare the last score with the first; ``threshold`` points either way is noise."""
    if len(scores) < 2:
        return NO_DATA
    diff = scores[-1] - scores[0]
    if diff > threshold:
        return IMPROVING
    if diff < -threshold:
        return DECLINING
    return STABLE

def history_by_center(records: Iterable[EvaluationRecord]) -> Dict[str, List[EvaluationRecord]]:
    """Evaluations grouped per center, oldest first."""
    grouped: Dict[str, List[EvaluationRecord]] = defaultdict(list)
    for r in records:
        grouped[r.center_id].append(r)
    return {cid: sorted(rs, key=lambda r: r.created_at) for cid, rs in grouped.items()}

def center_trends(records: Iterable[EvaluationRecord], threshold: float = TREND_THRESHOLD) -> Dict[str, str]:
    return {
        cid: calculate_trend([r.total_score for r in rs], threshold)
        for cid, rs in history_by_center(records).items()
    }

def trend_summary(records: Iterable[EvaluationRecord], threshold: float = TREND_THRESHOLD) -> Dict[str, int]:
    """Number of centers improving, stable and declining.

    Centers with a single evaluation are counted under ``no_data``.
    """
    summary = {IMPROVING: 0, STABLE: 0, DECLINING: 0, NO_DATA: 0}
    for trend in center_trends(records, threshold).values():
        summary[trend] += 1
    return summary
