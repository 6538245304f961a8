"""Core domain records passed between the boundary and the scoring engine."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any, List, Tuple, Union

CriterionId = Union[str, int]

@dataclass(frozen=True)
class Criterion:
    """A weighted scoring dimension of the questionnaire."""
    criterion_id: CriterionId
    weight: float
    is_knockout: bool = False
    requires_doc: bool = False
    name: Optional[str] = None
    category: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or str(self.criterion_id)

@dataclass(frozen=True)
class ScoringInput:
    """One answer to one criterion within an evaluation."""
    criterion_id: CriterionId
    score: float
    has_documentation: Optional[bool] = None

@dataclass(frozen=True)
class BreakdownItem:
    """Per-item contribution kept for auditing a result."""
    criterion_id: CriterionId
    score: float
    weight: float
    weighted_score: float
    is_knockout: bool = False
    failed_knockout: bool = False
    needs_review: bool = False
    requires_doc: bool = False
    has_documentation: Optional[bool] = None

    @property
    def missing_documentation(self) -> bool:
        return self.requires_doc and not self.has_documentation

    def to_dict(self) -> Dict[str, Any]:
        return {
            "criterion_id": self.criterion_id,
            "score": self.score,
            "weight": self.weight,
            "weighted_score": self.weighted_score,
            "is_knockout": self.is_knockout,
            "failed_knockout": self.failed_knockout,
            "needs_review": self.needs_review,
            "requires_doc": self.requires_doc,
            "has_documentation": self.has_documentation,
        }

@dataclass(frozen=True)
class ScoringResult:
    """Outcome of one full evaluation pass."""
    total_score: float
    status: str
    knockout_failed: bool
    requires_manual_review: bool
    confidence_score: int
    missing_docs_penalty: float
    breakdown: Tuple[BreakdownItem, ...] = ()
    base_score: float = 0
    knockout_reason: Optional[str] = None
    category_scores: Dict[str, float] = field(default_factory=dict)
    band_table: str = "approval"

    @property
    def total_weight(self) -> float:
        return sum(b.weight for b in self.breakdown)

    @property
    def weighted_sum(self) -> float:
        return sum(b.weighted_score for b in self.breakdown)

    def to_dict(self, include_breakdown: bool = True) -> Dict[str, Any]:
        """Convert to dictionary for JSON storage."""
        d = {
            "total_score": self.total_score,
            "base_score": self.base_score,
            "status": self.status,
            "band_table": self.band_table,
            "knockout_failed": self.knockout_failed,
            "knockout_reason": self.knockout_reason,
            "requires_manual_review": self.requires_manual_review,
            "confidence_score": self.confidence_score,
            "missing_docs_penalty": self.missing_docs_penalty,
            "category_scores": dict(self.category_scores),
        }
        if include_breakdown:
            d["breakdown"] = [b.to_dict() for b in self.breakdown]
        return d

@dataclass(frozen=True)
class EvaluationRecord:
    """A scored evaluation as stored by the surrounding application."""
    evaluation_id: str
    center_id: str
    total_score: float
    created_at: datetime
    status: Optional[str] = None

@dataclass
class BatchResult:
    """Results of scoring a set of evaluation documents."""
    results: Dict[str, ScoringResult] = field(default_factory=dict)
    records: List[EvaluationRecord] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    processing_time: float = 0.0

    @property
    def n_inputs(self) -> int:
        return len(self.results) + len(self.failures)

    @property
    def success_rate(self) -> float:
        if self.n_inputs == 0:
            return 0.0
        return len(self.results) / self.n_inputs
