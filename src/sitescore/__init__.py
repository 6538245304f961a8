"""Weighted scoring and classification of clinical research site evaluations."""

from sitescore.config.settings import ScoringConfig
from sitescore.domain.models import Criterion, ScoringInput, ScoringResult
from sitescore.scoring.engine import ScoringEngine, calculate_score

__version__ = "1.0.0"

__all__ = [
    "ScoringConfig",
    "Criterion",
    "ScoringInput",
    "ScoringResult",
    "ScoringEngine",
    "calculate_score",
]
