"""Core domain models and exceptions."""

from .models import (
    Criterion,
    ScoringInput,
    BreakdownItem,
    ScoringResult,
    EvaluationRecord,
    BatchResult,
)

__all__ = [
    "Criterion",
    "ScoringInput",
    "BreakdownItem",
    "ScoringResult",
    "EvaluationRecord",
    "BatchResult",
]
