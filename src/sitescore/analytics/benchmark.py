"""Benchmark and maturity views over the latest evaluation of each center."""

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Union

import numpy as np

from sitescore.classification.bands import BandTable, get_band_table
from sitescore.classification.classifier import BandClassifier
from sitescore.domain.models import EvaluationRecord
from sitescore.scoring.aggregator import round_half_up
from sitescore.utils.timing import timeit

logger = logging.getLogger(__name__)

@dataclass
class BenchmarkSummary:
    table: str
    count: int = 0
    average: int = 0
    maximum: float = 0
    minimum: float = 0
    median: float = 0
    level_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "table": self.table,
            "count": self.count,
            "average": self.average,
            "max": self.maximum,
            "min": self.minimum,
            "median": self.median,
            "level_counts": dict(self.level_counts),
        }

@dataclass(frozen=True)
class CenterRank:
    rank: int
    center_id: str
    evaluation_id: str
    total_score: float
    percentile: int
    level: str

    def to_dict(self) -> dict:
        return asdict(self)

def latest_per_center(records: Iterable[EvaluationRecord]) -> List[EvaluationRecord]:
    """Most recent evaluation of every center, newest first."""
    latest: Dict[str, EvaluationRecord] = {}
    for r in records:
        current = latest.get(r.center_id)
        if current is None or r.created_at > current.created_at:
            latest[r.center_id] = r
    return sorted(latest.values(), key=lambda r: r.created_at, reverse=True)

def ranking(
    records: Iterable[EvaluationRecord],
    table: Union[str, BandTable] = "benchmark",
) -> List[CenterRank]:
    """
    Latest evaluation of each center, best score first.

    ``percentile`` is the share of centers ranked at or below this one, the
    "top N%" figure. Equal scores keep the newest first.
    """
    classifier = BandClassifier(table)
    latest = sorted(latest_per_center(records), key=lambda r: r.total_score, reverse=True)
    n = len(latest)
    return [
        CenterRank(
            rank=i + 1,
            center_id=r.center_id,
            evaluation_id=r.evaluation_id,
            total_score=r.total_score,
            percentile=round_half_up((n - i) / n * 100),
            level=classifier.classify(r.total_score),
        )
        for i, r in enumerate(latest)
    ]

def distribution(
    records: Iterable[EvaluationRecord],
    table: Union[str, BandTable] = "maturity",
) -> Dict[str, int]:
    """Count of records per band label, in table order (all labels present)."""
    classifier = BandClassifier(table)
    counts = {label: 0 for label in classifier.table.labels}
    for r in records:
        counts[classifier.classify(r.total_score)] += 1
    return counts

@timeit(logger)
def summarize(
    records: Iterable[EvaluationRecord],
    table: Union[str, BandTable] = "benchmark",
    *,
    latest_only: bool = True,
) -> BenchmarkSummary:
    """
    Average, extremes and median of center scores plus counts per level.

    The median is the upper middle value of the sorted scores, matching the
    dashboard figures the centers already see.
    """
    band_table = get_band_table(table)
    selected = latest_per_center(records) if latest_only else list(records)
    if not selected:
        return BenchmarkSummary(
            table=band_table.name,
            level_counts={label: 0 for label in band_table.labels},
        )

    scores = np.asarray([r.total_score for r in selected], dtype=float)
    ordered = np.sort(scores)
    return BenchmarkSummary(
        table=band_table.name,
        count=int(scores.size),
        average=round_half_up(float(scores.mean())),
        maximum=_plain(ordered[-1]),
        minimum=_plain(ordered[0]),
        median=_plain(ordered[scores.size // 2]),
        level_counts=distribution(selected, band_table),
    )

def _plain(value) -> float:
    v = float(value)
    return int(v) if v.is_integer() else v
