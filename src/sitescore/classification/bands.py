"""Threshold tables mapping a score to a status, tier or benchmark label."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Tuple, Any

from sitescore.domain.exceptions import ConfigurationError

@dataclass(frozen=True)
class Band:
    min_score: float
    label: str

@dataclass(frozen=True)
class BandTable:
    """Ordered bands, highest ``min_score`` first.

    ``reject_label`` is forced by a failed knockout and ``review_label`` by a
    borderline one. They default to the lowest and second-lowest band.
    """
    name: str
    bands: Tuple[Band, ...]
    scale: float = 100
    review_label: Optional[str] = None
    reject_label: Optional[str] = None

    def __post_init__(self):
        self.validate()

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(b.label for b in self.bands)

    @property
    def lowest_label(self) -> str:
        return self.bands[-1].label

    @property
    def rejection(self) -> str:
        return self.reject_label or self.lowest_label

    @property
    def review(self) -> str:
        if self.review_label:
            return self.review_label
        if len(self.bands) >= 2:
            return self.bands[-2].label
        return self.lowest_label

    def validate(self) -> None:
        if not self.bands:
            raise ConfigurationError(
                f"Band table '{self.name}' has no bands",
                config_field="bands"
            )
        if self.scale <= 0:
            raise ConfigurationError(
                f"Band table '{self.name}' scale must be positive",
                config_field="bands.scale"
            )
        mins = [b.min_score for b in self.bands]
        if any(a <= b for a, b in zip(mins, mins[1:])):
            raise ConfigurationError(
                f"Band table '{self.name}' must be strictly descending by min_score",
                config_field="bands"
            ).add_suggestion("Order bands from the highest min_score to the lowest")
        if len(set(self.labels)) != len(self.labels):
            raise ConfigurationError(
                f"Band table '{self.name}' has duplicate labels",
                config_field="bands"
            )
        for attr in ("review_label", "reject_label"):
            value = getattr(self, attr)
            if value is not None and value not in self.labels:
                raise ConfigurationError(
                    f"{attr} '{value}' is not a label of band table '{self.name}'",
                    config_field=f"bands.{attr}"
                )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "scale": self.scale,
            "review_label": self.review_label,
            "reject_label": self.reject_label,
            "bands": [{"min_score": b.min_score, "label": b.label} for b in self.bands],
        }

    @classmethod
    def from_pairs(
        cls,
        name: str,
        pairs: Iterable[Mapping[str, Any]],
        *,
        scale: float = 100,
        review_label: Optional[str] = None,
        reject_label: Optional[str] = None,
    ) -> "BandTable":
        """Build a table from ``{"min_score", "label"}`` mappings in any order."""
        try:
            bands = [Band(min_score=float(p["min_score"]), label=str(p["label"])) for p in pairs]
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Malformed band definition in table '{name}': {e}",
                config_field="bands"
            ).add_suggestion('Each band needs "min_score" and "label"') from e
        bands.sort(key=lambda b: b.min_score, reverse=True)
        return cls(
            name=name,
            bands=tuple(bands),
            scale=scale,
            review_label=review_label,
            reject_label=reject_label,
        )


def _table(name, rules, **kwargs) -> BandTable:
    return BandTable(name=name, bands=tuple(Band(thr, label) for label, thr in rules), **kwargs)

APPROVAL = _table("approval", [
    ("approved",    80),
    ("conditional", 60),
    ("rejected",     0),
])

TRAFFIC_LIGHT = _table("traffic", [
    ("green",  80),
    ("yellow", 60),
    ("red",     0),
])

MATURITY = _table("maturity", [
    ("optimized",  90),
    ("managed",    80),
    ("defined",    70),
    ("developing", 50),
    ("initial",     0),
])

BENCHMARK = _table("benchmark", [
    ("Excellent",         90),
    ("Good",              80),
    ("Acceptable",        70),
    ("Needs Improvement", 60),
    ("Critical",           0),
])

# credit-style score on a 0-1000 scale
CREDIT = _table("credit", [
    ("Approved", 700),
    ("Review",   500),
    ("Rejected",   0),
], scale=1000)

STARS = _table("stars", [
    ("5", 80),
    ("4", 60),
    ("3", 40),
    ("2", 20),
    ("1",  0),
])

BUILTIN_TABLES: Dict[str, BandTable] = {
    t.name: t for t in (APPROVAL, TRAFFIC_LIGHT, MATURITY, BENCHMARK, CREDIT, STARS)
}


def get_band_table(table) -> BandTable:
    """Resolve a table by name; ``BandTable`` instances pass through."""
    if isinstance(table, BandTable):
        return table
    try:
        return BUILTIN_TABLES[str(table)]
    except KeyError:
        raise ConfigurationError(
            f"Unknown band table: {table}",
            config_field="band_table"
        ).add_suggestion(f"Use one of: {', '.join(sorted(BUILTIN_TABLES))}") from None
