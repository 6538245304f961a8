"""Aggregated views over stored evaluations."""

from .benchmark import BenchmarkSummary, CenterRank, distribution, latest_per_center, ranking, summarize
from .dynamics import calculate_trend, center_trends, trend_summary

__all__ = [
    "BenchmarkSummary",
    "CenterRank",
    "distribution",
    "latest_per_center",
    "ranking",
    "summarize",
    "calculate_trend",
    "center_trends",
    "trend_summary",
]
