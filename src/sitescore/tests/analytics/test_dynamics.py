import pytest
from datetime import datetime, timedelta

from sitescore.analytics.dynamics import (
    DECLINING,
    IMPROVING,
    NO_DATA,
    STABLE,
    calculate_trend,
    center_trends,
    history_by_center,
    trend_summary,
)
from sitescore.domain.models import EvaluationRecord
from sitescore.processing.validation import InputValidator


def _rec(center, score, days):
    return EvaluationRecord(
        evaluation_id=f"{center}-{days}",
        center_id=center,
        total_score=score,
        created_at=datetime(2024, 1, 1) + timedelta(days=days),
    )


@pytest.mark.parametrize("scores,expected", [
    ([], NO_DATA),
    ([70], NO_DATA),
    ([60, 66], IMPROVING),
    ([60, 65], STABLE),
    ([60, 55], STABLE),
    ([60, 54], DECLINING),
    ([60, 10, 61], STABLE),
    ([90, 95, 40, 70], DECLINING),
])
def test_calculate_trend(scores, expected):
    assert calculate_trend(scores) == expected


def test_calculate_trend_custom_threshold():
    assert calculate_trend([60, 62], threshold=1) == IMPROVING
    assert calculate_trend([60, 70], threshold=10) == STABLE


def test_history_is_oldest_first():
    history = history_by_center([_rec("a", 80, 10), _rec("b", 50, 0), _rec("a", 60, 0)])
    assert [r.total_score for r in history["a"]] == [60, 80]
    assert len(history["b"]) == 1


def test_center_trends_ignore_input_order():
    records = [_rec("a", 90, 20), _rec("a", 70, 0), _rec("b", 50, 0), _rec("b", 30, 5)]
    assert center_trends(records) == {"a": IMPROVING, "b": DECLINING}


def test_trend_summary():
    records = [
        _rec("a", 70, 0), _rec("a", 80, 1),
        _rec("b", 70, 0), _rec("b", 72, 1),
        _rec("c", 70, 0), _rec("c", 50, 1),
        _rec("d", 70, 0),
    ]
    assert trend_summary(records) == {IMPROVING: 1, STABLE: 1, DECLINING: 1, NO_DATA: 1}


def test_trend_summary_empty():
    assert trend_summary([]) == {IMPROVING: 0, STABLE: 0, DECLINING: 0, NO_DATA: 0}


def test_trends_across_timestamp_forms():
    records = [
        InputValidator.parse_record({"center_id": "a", "total_score": 90, "created_at": "2024-02-01"}),
        InputValidator.parse_record({"center_id": "a", "total_score": 60, "created_at": "2024-01-01T00:00:00Z"}),
        InputValidator.parse_record({"center_id": "b", "total_score": 70, "created_at": "2024-01-15T12:00:00"}),
    ]
    assert center_trends(records) == {"a": IMPROVING, "b": NO_DATA}
    assert trend_summary(records) == {IMPROVING: 1, STABLE: 0, DECLINING: 0, NO_DATA: 1}
