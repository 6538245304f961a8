"""Rules for assigning status, maturity and benchmark labels to a score"""
from typing import Union

from .bands import BandTable, get_band_table

STATUS_LABELS = {
    "green": "Approved",
    "yellow": "Conditional",
    "red": "Not Approved",
    "approved": "Approved",
    "conditional": "Conditional",
    "rejected": "Not Approved",
}


def rescale(score: float, from_scale: float, to_scale: float) -> float:
    """Convert ``score`` between scales, clamped to ``[0, to_scale]``."""
    if from_scale == to_scale:
        return score
    converted = score * to_scale / from_scale
    return max(0.0, min(float(to_scale), converted))


class BandClassifier:
    """
    Walks a band table top-down; the first band whose ``min_score`` the
    score reaches wins, so a score on a boundary belongs to the higher band.
    """

    def __init__(self, table: Union[BandTable, str] = "approval"):
        self.table = get_band_table(table)

    def classify(self, score: float, source_scale: float = 100) -> str:
        value = rescale(score, source_scale, self.table.scale)
        for band in self.table.bands:
            if value >= band.min_score:
                return band.label
        return self.table.lowest_label

    def rank(self, label: str) -> int:
        """0 for the top band, increasing downwards."""
        return self.table.labels.index(label)

    def __repr__(self) -> str:
        return f"BandClassifier({self.table.name!r})"


def classify_score(score: float, table: Union[BandTable, str] = "approval", source_scale: float = 100) -> str:
    return BandClassifier(table).classify(score, source_scale=source_scale)


def status_label(status: str) -> str:
    """Human readable label for a status value."""
    return STATUS_LABELS.get(status, status.replace("_", " ").title())


def star_rating(score: float) -> int:
    """1-5 stars for a 0-100 score."""
    return int(classify_score(score, "stars"))
