import csv
import json
import logging
import pytest
from unittest.mock import patch

from sitescore import cli
from sitescore.config import resolvers
from sitescore.config.settings import reset_settings

CRITERIA = [
    {"id": "c1", "weight": 2, "name": "Infrastructure"},
    {"id": "c2", "weight": 1, "name": "Staff"},
    {"id": "c3", "weight": 1, "is_knockout": True, "name": "GCP certification"},
]


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.setattr(resolvers, "default_config_path", lambda: tmp_path / "absent.json")
    monkeypatch.setenv("NO_PROGRESS", "1")
    yield
    reset_settings()
    for name in ("sitescore", "sitescore.summary"):
        logging.getLogger(name).handlers.clear()


def _dump(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def _run(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


@pytest.fixture
def criteria_file(tmp_path):
    return _dump(tmp_path / "criteria.json", CRITERIA)


@pytest.fixture
def answers_file(tmp_path):
    return _dump(tmp_path / "answers.json", [
        {"criterion_id": "c1", "score": 90},
        {"criterion_id": "c2", "score": 70},
        {"criterion_id": "c3", "score": 35},
    ])


def _evaluation(tmp_path, name, scores, **meta):
    doc = dict(meta, criteria=CRITERIA, items=[{"criterion_id": k, "score": v} for k, v in scores.items()])
    return _dump(tmp_path / f"{name}.json", doc)


class TestParser:

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_batch_inputs_exclusive(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["batch", "-i", "a.json", "-d", "dir", "-o", "out.json"])

    def test_benchmark_default_table(self):
        args = cli.build_parser().parse_args(["benchmark", "-i", "records.json"])
        assert args.table == "benchmark"


class TestScoreCommand:

    def test_score_to_stdout(self, criteria_file, answers_file, capsys):
        assert _run(["score", "-c", criteria_file, "-i", answers_file]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["total_score"] == 71
        assert out["status"] == "conditional"
        assert out["requires_manual_review"] is True
        assert len(out["breakdown"]) == 3

    def test_score_with_table_without_breakdown(self, criteria_file, answers_file, capsys):
        assert _run(["score", "-c", criteria_file, "-i", answers_file, "-t", "traffic", "--no-breakdown"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["status"] == "yellow"
        assert "breakdown" not in out

    def test_score_to_file(self, tmp_path, criteria_file, answers_file):
        target = tmp_path / "out" / "result.json"
        assert _run(["score", "-c", criteria_file, "-i", answers_file, "-o", str(target)]) == 0
        assert json.loads(target.read_text(encoding="utf-8"))["total_score"] == 71

    def test_score_with_config_file(self, tmp_path, criteria_file, answers_file, capsys):
        config = _dump(tmp_path / "scoring.json", {"review_threshold": 36, "knockout_threshold": 50})
        assert _run(["score", "-c", criteria_file, "-i", answers_file, "--config", config]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["status"] == "rejected"
        assert out["knockout_failed"] is True

    def test_out_of_range_score_fails(self, tmp_path, criteria_file, capsys):
        answers = _dump(tmp_path / "bad.json", [{"criterion_id": "c1", "score": 101}])
        assert _run(["score", "-c", criteria_file, "-i", answers]) == 1
        assert capsys.readouterr().out == ""

    def test_missing_input_fails(self, tmp_path, criteria_file):
        assert _run(["score", "-c", criteria_file, "-i", str(tmp_path / "nope.json")]) == 1

    def test_answers_must_be_a_list(self, tmp_path, criteria_file):
        answers = _dump(tmp_path / "obj.json", {"c1": 90})
        assert _run(["score", "-c", criteria_file, "-i", answers]) == 1

    def test_unknown_table_fails(self, criteria_file, answers_file):
        assert _run(["score", "-c", criteria_file, "-i", answers_file, "-t", "nope"]) == 1

    def test_missing_config_fails(self, tmp_path, criteria_file, answers_file):
        missing = str(tmp_path / "missing.json")
        assert _run(["score", "-c", criteria_file, "-i", answers_file, "--config", missing]) == 1


class TestBatchCommand:

    def test_batch_to_csv(self, tmp_path):
        a = _evaluation(tmp_path, "a", {"c1": 90, "c2": 70, "c3": 35}, center_id="s1", created_at="2024-01-01")
        b = _evaluation(tmp_path, "b", {"c1": 95, "c2": 95, "c3": 95}, center_id="s1", created_at="2024-06-01")
        out = tmp_path / "results.csv"

        assert _run(["batch", "-i", a, b, "-o", str(out)]) == 0

        with open(out, newline="", encoding="utf-8") as fh:
            rows = list(csv.DictReader(fh))
        assert [r["status"] for r in rows] == ["conditional", "approved"]

    def test_batch_directory_to_json(self, tmp_path):
        docs = tmp_path / "docs"
        docs.mkdir()
        _evaluation(docs, "one", {"c1": 80, "c2": 80, "c3": 80})
        _evaluation(docs, "two", {"c1": 500})
        out = tmp_path / "results.json"

        assert _run(["batch", "-d", str(docs), "-o", str(out), "--no-breakdown"]) == 0

        data = json.loads(out.read_text(encoding="utf-8"))
        assert len(data) == 1
        (result,) = data.values()
        assert result["status"] == "approved"
        assert "breakdown" not in result

    def test_batch_recursive_directory(self, tmp_path):
        nested = tmp_path / "docs" / "2024"
        nested.mkdir(parents=True)
        _evaluation(nested, "deep", {"c1": 80, "c2": 80, "c3": 80})
        out = tmp_path / "results.json"

        assert _run(["batch", "-d", str(tmp_path / "docs"), "-R", "-o", str(out)]) == 0
        assert len(json.loads(out.read_text(encoding="utf-8"))) == 1

    def test_batch_fail_fast(self, tmp_path):
        bad = _evaluation(tmp_path, "bad", {"c1": 500})
        assert _run(["batch", "-i", bad, "-o", str(tmp_path / "r.json"), "--fail-fast"]) == 1

    def test_batch_dry_run(self, tmp_path, capsys):
        a = _evaluation(tmp_path, "a", {"c1": 90})
        out = tmp_path / "results.json"
        assert _run(["batch", "-i", a, "-o", str(out), "--dry-run"]) == 0
        assert "DRY RUN SUMMARY" in capsys.readouterr().out
        assert not out.exists()

    def test_batch_skips_document_with_non_object_items(self, tmp_path):
        good = _evaluation(tmp_path, "good", {"c1": 80, "c2": 80, "c3": 80})
        bad = _dump(tmp_path / "bad.json", {"criteria": CRITERIA, "items": [90, 80]})
        out = tmp_path / "results.json"

        assert _run(["batch", "-i", good, bad, "-o", str(out)]) == 0

        data = json.loads(out.read_text(encoding="utf-8"))
        (key,) = data
        assert key.endswith("good.json")

    def test_batch_mixed_timestamp_forms(self, tmp_path):
        a = _evaluation(tmp_path, "a", {"c1": 60, "c2": 60, "c3": 60}, center_id="s1", created_at="2024-01-01T00:00:00Z")
        b = _evaluation(tmp_path, "b", {"c1": 90, "c2": 90, "c3": 90}, center_id="s1", created_at="2024-02-01")
        out = tmp_path / "results.json"
        assert _run(["batch", "-i", a, b, "-o", str(out)]) == 0
        assert len(json.loads(out.read_text(encoding="utf-8"))) == 2


class TestBenchmarkCommand:

    def test_benchmark(self, tmp_path, capsys):
        records = _dump(tmp_path / "records.json", [
            {"id": 1, "center_id": "a", "total_score": 60, "created_at": "2024-01-01T00:00:00Z"},
            {"id": 2, "center_id": "a", "total_score": 91, "created_at": "2024-07-01T00:00:00Z"},
            {"id": 3, "center_id": "b", "total_score": 75, "created_at": "2024-03-01T00:00:00Z"},
        ])
        assert _run(["benchmark", "-i", records]) == 0

        out = json.loads(capsys.readouterr().out)
        assert out["count"] == 2
        assert out["average"] == 83
        assert out["median"] == 91
        assert out["level_counts"]["Excellent"] == 1
        assert out["trends"] == {"improving": 1, "stable": 0, "declining": 0, "no_data": 1}
        assert out["center_trends"] == {"a": "improving", "b": "no_data"}
        assert [(r["rank"], r["center_id"], r["percentile"]) for r in out["ranking"]] == [(1, "a", 100), (2, "b", 50)]
        assert out["ranking"][0]["level"] == "Excellent"

    def test_benchmark_maturity_to_file(self, tmp_path):
        records = _dump(tmp_path / "records.json", [
            {"id": 1, "center_id": "a", "total_score": 72, "created_at": "2024-01-01"},
        ])
        target = tmp_path / "summary.json"
        assert _run(["benchmark", "-i", records, "-t", "maturity", "-o", str(target)]) == 0
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["level_counts"]["defined"] == 1

    def test_benchmark_bad_record(self, tmp_path):
        records = _dump(tmp_path / "records.json", [{"id": 1, "total_score": 72}])
        assert _run(["benchmark", "-i", records]) == 1


class TestExitCodes:

    def test_keyboard_interrupt(self, criteria_file, answers_file):
        with patch.object(cli, "_run_score", side_effect=KeyboardInterrupt):
            assert _run(["score", "-c", criteria_file, "-i", answers_file]) == 130

    def test_debug_mode(self, tmp_path, criteria_file, answers_file, capsys):
        log_file = tmp_path / "logs" / "run.log"
        log_file.parent.mkdir()
        argv = ["score", "-c", criteria_file, "-i", answers_file, "--debug", "--log-file", str(log_file)]
        assert _run(argv) == 0
        assert json.loads(capsys.readouterr().out)["status"] == "conditional"
        assert "Configuration details" in log_file.read_text(encoding="utf-8")
