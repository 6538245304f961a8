"""Score band classification."""

from .bands import Band, BandTable, BUILTIN_TABLES, get_band_table
from .classifier import BandClassifier, classify_score, status_label, star_rating

__all__ = [
    "Band",
    "BandTable",
    "BUILTIN_TABLES",
    "get_band_table",
    "BandClassifier",
    "classify_score",
    "status_label",
    "star_rating",
]
