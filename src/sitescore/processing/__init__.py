"""Boundary validation and batch scoring."""

from .validation import InputValidator, load_json_document, parse_timestamp, response_to_score
from .batch import BatchScorer

__all__ = [
    "InputValidator",
    "load_json_document",
    "parse_timestamp",
    "response_to_score",
    "BatchScorer",
]
