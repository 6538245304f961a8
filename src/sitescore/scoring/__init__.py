"""Weighted scoring, knockout rules and the evaluation engine."""

from .aggregator import AggregateResult, aggregate, category_scores, round_half_up
from .knockout import KnockoutOutcome, DocumentationCheck, evaluate_knockouts, documentation_penalty
from .engine import ScoringEngine, calculate_score

__all__ = [
    "AggregateResult",
    "aggregate",
    "category_scores",
    "round_half_up",
    "KnockoutOutcome",
    "DocumentationCheck",
    "evaluate_knockouts",
    "documentation_penalty",
    "ScoringEngine",
    "calculate_score",
]
