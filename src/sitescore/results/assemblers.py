# results/assemblers.py
import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sitescore.classification.classifier import classify_score, star_rating, status_label
from sitescore.domain.models import ScoringResult

ROW_FIELDS = [
    "evaluation_id",
    "total_score",
    "base_score",
    "status",
    "status_label",
    "maturity",
    "benchmark",
    "stars",
    "knockout_failed",
    "requires_manual_review",
    "confidence_score",
    "missing_docs_penalty",
    "knockout_reason",
]

def result_row(result: ScoringResult, evaluation_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Flatten a result into one export row.

    The maturity and benchmark columns are derived from the same total score,
    so one export answers every dashboard view.
    """
    return {
        "evaluation_id": evaluation_id,
        "total_score": result.total_score,
        "base_score": result.base_score,
        "status": result.status,
        "status_label": status_label(result.status),
        "maturity": classify_score(result.total_score, "maturity"),
        "benchmark": classify_score(result.total_score, "benchmark"),
        "stars": star_rating(result.total_score),
        "knockout_failed": result.knockout_failed,
        "requires_manual_review": result.requires_manual_review,
        "confidence_score": result.confidence_score,
        "missing_docs_penalty": result.missing_docs_penalty,
        "knockout_reason": result.knockout_reason or "",
    }

def result_rows(results: Mapping[str, ScoringResult]) -> List[Dict[str, Any]]:
    return [result_row(res, evaluation_id=key) for key, res in results.items()]

def write_json(results: Mapping[str, ScoringResult], path, include_breakdown: bool = True) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = {key: res.to_dict(include_breakdown=include_breakdown) for key, res in results.items()}
    with open(p, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, default=str)
    return p

def write_csv(rows: Iterable[Mapping[str, Any]], path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=ROW_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return p
