"""Configuration for scoring runs and the command line."""

from .settings import ScoringConfig, Settings

__all__ = ["ScoringConfig", "Settings"]
