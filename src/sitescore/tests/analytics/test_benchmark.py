import pytest
from datetime import datetime, timedelta

from sitescore.analytics.benchmark import (
    BenchmarkSummary,
    CenterRank,
    distribution,
    latest_per_center,
    ranking,
    summarize,
)
from sitescore.domain.models import EvaluationRecord
from sitescore.processing.validation import InputValidator

T0 = datetime(2024, 1, 1)


def _rec(center, score, days, eid=None):
    return EvaluationRecord(
        evaluation_id=eid or f"{center}-{days}",
        center_id=center,
        total_score=score,
        created_at=T0 + timedelta(days=days),
    )


@pytest.fixture
def records():
    return [
        _rec("a", 55, 0),
        _rec("a", 92, 30),
        _rec("b", 81, 10),
        _rec("c", 64, 5),
        _rec("c", 73, 20),
        _rec("d", 40, 1),
    ]


class TestLatestPerCenter:

    def test_newest_per_center_newest_first(self, records):
        latest = latest_per_center(records)
        assert [r.evaluation_id for r in latest] == ["a-30", "c-20", "b-10", "d-1"]

    def test_empty(self):
        assert latest_per_center([]) == []


class TestDistribution:

    def test_maturity_counts_all_labels(self, records):
        counts = distribution(latest_per_center(records))
        assert counts == {
            "optimized": 1,
            "managed": 1,
            "defined": 1,
            "developing": 0,
            "initial": 1,
        }
        assert list(counts) == ["optimized", "managed", "defined", "developing", "initial"]

    def test_empty_has_zero_for_every_label(self):
        assert distribution([], "benchmark") == {
            "Excellent": 0,
            "Good": 0,
            "Acceptable": 0,
            "Needs Improvement": 0,
            "Critical": 0,
        }


class TestSummarize:

    def test_latest_only(self, records):
        summary = summarize(records)

        # latest scores: 92, 73, 81, 40
        assert summary.table == "benchmark"
        assert summary.count == 4
        assert summary.average == 72
        assert summary.maximum == 92
        assert summary.minimum == 40
        # upper middle of [40, 73, 81, 92]
        assert summary.median == 81
        assert summary.level_counts == {
            "Excellent": 1,
            "Good": 1,
            "Acceptable": 1,
            "Needs Improvement": 0,
            "Critical": 1,
        }

    def test_all_records(self, records):
        summary = summarize(records, latest_only=False)
        # [40, 55, 64, 73, 81, 92]
        assert summary.count == 6
        assert summary.average == 68
        assert summary.median == 73

    def test_odd_count_median(self):
        summary = summarize([_rec("a", 10, 0), _rec("b", 90, 0), _rec("c", 50, 0)])
        assert summary.median == 50

    def test_average_rounds_half_up(self):
        summary = summarize([_rec("a", 70, 0), _rec("b", 71, 0)])
        assert summary.average == 71

    def test_fractional_values_kept(self):
        summary = summarize([_rec("a", 70.5, 0)])
        assert summary.maximum == 70.5
        assert isinstance(summarize([_rec("a", 70.0, 0)]).maximum, int)

    def test_empty(self):
        summary = summarize([], "maturity")
        assert summary.count == 0
        assert summary.average == 0
        assert summary.median == 0
        assert summary.level_counts == {label: 0 for label in
                                        ("optimized", "managed", "defined", "developing", "initial")}

    def test_to_dict(self, records):
        d = summarize(records, "maturity").to_dict()
        assert set(d) == {"table", "count", "average", "max", "min", "median", "level_counts"}
        assert d["table"] == "maturity"
        assert d["max"] == 92

    def test_summary_defaults(self):
        assert BenchmarkSummary(table="benchmark").to_dict()["count"] == 0


class TestRanking:

    def test_best_first_with_percentiles(self, records):
        ranked = ranking(records)
        assert [(r.rank, r.center_id, r.total_score) for r in ranked] == [
            (1, "a", 92), (2, "b", 81), (3, "c", 73), (4, "d", 40),
        ]
        assert [r.percentile for r in ranked] == [100, 75, 50, 25]
        assert [r.level for r in ranked] == ["Excellent", "Good", "Acceptable", "Critical"]

    def test_uses_latest_evaluation(self, records):
        top = ranking(records)[0]
        assert top.evaluation_id == "a-30"

    def test_maturity_levels(self, records):
        assert [r.level for r in ranking(records, "maturity")] == ["optimized", "managed", "defined", "initial"]

    def test_ties_keep_newest_first(self):
        ranked = ranking([_rec("old", 80, 0), _rec("new", 80, 9)])
        assert [r.center_id for r in ranked] == ["new", "old"]
        assert [r.rank for r in ranked] == [1, 2]

    def test_percentile_rounds_half_up(self):
        ranked = ranking([_rec(c, 90 - i, 0) for i, c in enumerate("abcdefgh")])
        # 7 of 8 -> 87.5
        assert ranked[1].percentile == 88

    def test_empty(self):
        assert ranking([]) == []

    def test_to_dict(self):
        (row,) = ranking([_rec("a", 70, 0)])
        assert row.to_dict() == {
            "rank": 1,
            "center_id": "a",
            "evaluation_id": "a-0",
            "total_score": 70,
            "percentile": 100,
            "level": "Acceptable",
        }
        assert isinstance(row, CenterRank)


class TestTimestampForms:
    """Stored rows may carry a Z-suffixed datetime or a bare date for the same center."""

    @pytest.fixture
    def mixed(self):
        return [
            InputValidator.parse_record({"id": "jan", "center_id": "a", "total_score": 50, "created_at": "2024-01-01T00:00:00Z"}),
            InputValidator.parse_record({"id": "feb", "center_id": "a", "total_score": 85, "created_at": "2024-02-01"}),
            InputValidator.parse_record({"id": "mar", "center_id": "b", "total_score": 60, "created_at": "2024-03-01T09:30:00+01:00"}),
        ]

    def test_latest_per_center(self, mixed):
        assert [r.evaluation_id for r in latest_per_center(mixed)] == ["mar", "feb"]

    def test_summarize(self, mixed):
        summary = summarize(mixed)
        assert summary.count == 2
        assert summary.maximum == 85

    def test_ranking(self, mixed):
        assert [r.evaluation_id for r in ranking(mixed)] == ["feb", "mar"]
