"""Boundary validation: raw questionnaire data in, typed records out."""

import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from sitescore.domain.exceptions import (
    CriterionValidationError,
    FileValidationError,
    InputFileNotFoundError,
    InvalidFileFormatError,
    ScoreRangeError,
    ValidationError,
)
from sitescore.domain.models import Criterion, EvaluationRecord, ScoringInput

logger = logging.getLogger(__name__)

RESPONSE_SCORES = {
    "yes": 100,
    "partial": 50,
    "no": 0,
}

def response_to_score(response: str) -> int:
    """Map a yes/partial/no answer to a 0-100 score; anything else scores 0."""
    return RESPONSE_SCORES.get(str(response).strip().lower(), 0)

def _as_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if value in (0, 1):
        return bool(value)
    raise ValidationError(
        f"Expected a boolean for '{field_name}', got {value!r}",
        field_name=field_name,
        field_value=value,
    )

def _as_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"Expected a number for '{field_name}', got {value!r}",
            field_name=field_name,
            field_value=value,
        )
    if not math.isfinite(value):
        raise ValidationError(
            f"'{field_name}' must be finite",
            field_name=field_name,
            field_value=value,
        )
    return value

def _as_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise ValidationError(
            f"Each {what} must be a JSON object, got {raw!r}",
            field_name=what,
            field_value=raw,
        )
    return raw

def parse_timestamp(value: Any, field_name: str = "created_at") -> datetime:
    """ISO-8601 date or datetime as an aware datetime; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError as e:
            raise ValidationError(
                f"Invalid {field_name}: {value}",
                field_name=field_name,
                field_value=value,
            ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class InputValidator:
    """Validates and converts raw mappings into domain records."""

    def __init__(self, min_score: float = 0, max_score: float = 100):
        self.min_score = min_score
        self.max_score = max_score

    def parse_criterion(self, raw: Mapping[str, Any]) -> Criterion:
        raw = _as_mapping(raw, "criterion")
        cid = raw.get("criterion_id", raw.get("id"))
        if cid is None or cid == "":
            raise CriterionValidationError("Criterion is missing an identifier")
        weight = _as_number(raw.get("weight", 1), "weight")
        if weight < 0:
            raise CriterionValidationError(
                f"Criterion {cid} has a negative weight: {weight}",
                criterion_id=cid,
                field_name="weight",
                field_value=weight,
            ).add_suggestion("Use a positive weight, or 0 to exclude the criterion")
        return Criterion(
            criterion_id=cid,
            weight=weight,
            is_knockout=_as_bool(raw.get("is_knockout", False), "is_knockout"),
            requires_doc=_as_bool(raw.get("requires_doc", False), "requires_doc"),
            name=raw.get("name"),
            category=raw.get("category"),
        )

    def parse_criteria(self, raws: Iterable[Mapping[str, Any]]) -> List[Criterion]:
        criteria = [self.parse_criterion(r) for r in raws]
        seen = set()
        for c in criteria:
            key = str(c.criterion_id)
            if key in seen:
                raise CriterionValidationError(
                    f"Duplicate criterion identifier: {c.criterion_id}",
                    criterion_id=c.criterion_id,
                )
            seen.add(key)
        if not criteria:
            raise CriterionValidationError("At least one criterion is required")
        return criteria

    def parse_item(self, raw: Mapping[str, Any]) -> ScoringInput:
        raw = _as_mapping(raw, "item")
        cid = raw.get("criterion_id", raw.get("question_id"))
        if cid is None or cid == "":
            raise ValidationError("Scoring item is missing a criterion_id", field_name="criterion_id")
        if "score" in raw:
            score = _as_number(raw["score"], "score")
        elif "response" in raw:
            score = response_to_score(raw["response"])
        else:
            raise ValidationError(
                f"Scoring item for criterion {cid} has neither score nor response",
                field_name="score",
            )
        has_doc = raw.get("has_documentation")
        return ScoringInput(
            criterion_id=cid,
            score=score,
            has_documentation=None if has_doc is None else _as_bool(has_doc, "has_documentation"),
        )

    def parse_items(self, raws: Iterable[Mapping[str, Any]]) -> List[ScoringInput]:
        items = [self.parse_item(r) for r in raws]
        self.validate_scores(items)
        return items

    def validate_scores(self, items: Sequence[ScoringInput]) -> None:
        """Fail the submission as a whole on the first out-of-range score."""
        for item in items:
            if not self.min_score <= item.score <= self.max_score:
                raise ScoreRangeError(
                    item.criterion_id,
                    item.score,
                    min_score=self.min_score,
                    max_score=self.max_score,
                )

    def parse_evaluation(self, doc: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[Criterion], List[ScoringInput]]:
        """Split an evaluation document into metadata, criteria and items."""
        if not isinstance(doc, Mapping):
            raise ValidationError("Evaluation document must be a JSON object")
        for key in ("criteria", "items"):
            if not isinstance(doc.get(key), list):
                raise ValidationError(
                    f"Evaluation document needs a '{key}' list",
                    field_name=key,
                )
        meta = {k: v for k, v in doc.items() if k not in ("criteria", "items")}
        return meta, self.parse_criteria(doc["criteria"]), self.parse_items(doc["items"])

    @staticmethod
    def parse_record(raw: Mapping[str, Any]) -> EvaluationRecord:
        """Parse a stored evaluation row (benchmark and trend input)."""
        raw = _as_mapping(raw, "evaluation record")
        try:
            return EvaluationRecord(
                evaluation_id=str(raw.get("evaluation_id", raw.get("id", ""))),
                center_id=str(raw["center_id"]),
                total_score=_as_number(raw["total_score"], "total_score"),
                created_at=parse_timestamp(raw["created_at"]),
                status=raw.get("status"),
            )
        except KeyError as e:
            raise ValidationError(
                f"Evaluation record is missing '{e.args[0]}'",
                field_name=e.args[0],
            ) from e


def load_json_document(path) -> Any:
    """Read a JSON input file, raising validation errors for bad paths or content."""
    p = Path(path)
    if not p.is_file():
        raise InputFileNotFoundError(str(p))
    if p.suffix.lower() != ".json":
        raise InvalidFileFormatError(str(p), [".json"], actual_format=p.suffix or None)
    try:
        with open(p, encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as e:
        raise FileValidationError(
            f"Invalid JSON in {p}: {e.msg} (line {e.lineno})",
            file_path=str(p),
            validation_type="json_parse",
        ) from e
