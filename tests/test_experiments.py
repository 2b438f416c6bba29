import csv

import pytest

from acs_tsp import ACOConfig, TSPInstance
from acs_tsp import experiments
from acs_tsp.aco_base import ACOResult
from acs_tsp.experiments import (BenchmarkCase, BenchmarkOutcome, ScoreGrade, format_answers, grade_score,
                                 run_benchmark, run_benchmarks, run_parameter_sweep, run_repeated_trials,
                                 write_answers)

SQUARE_FILE = "4\n0 0\n0 1\n1 1\n1 0\n"


@pytest.mark.parametrize("score, grade", [
    (420.0, ScoreGrade.PASSED_7),
    (430.0, ScoreGrade.PASSED_5),
    (450.0, ScoreGrade.PASSED_5),
    (482.0, ScoreGrade.PASSED_5),
    (500.0, ScoreGrade.FAILED),
])
def test_grade_score(score, grade):
    assert grade_score(score, 482.0, 430.0) is grade


def test_format_and_write_answers(tmp_path):
    cfg = ACOConfig()
    outcomes = [
        BenchmarkOutcome(0, BenchmarkCase("a", 10.0, 5.0), ACOResult([0, 2, 1], 4.0, [4.0], cfg, 0.1), ScoreGrade.PASSED_7),
        BenchmarkOutcome(2, BenchmarkCase("b", 10.0, 5.0), ACOResult([1, 0], 12.0, [12.0], cfg, 0.1), ScoreGrade.FAILED),
    ]
    assert format_answers(outcomes) == "0 7 [0, 2, 1]\n2 0 [1, 0]\n"
    path = write_answers(str(tmp_path / "answers" / "acs.txt"), outcomes)
    with open(path) as f:
        assert f.read() == "0 7 [0, 2, 1]\n2 0 [1, 0]\n"


def test_run_benchmark_missing_file(tmp_path):
    assert run_benchmark(BenchmarkCase("nope", 1.0, 0.5), data_dir=str(tmp_path)) is None


def test_run_benchmarks_skips_missing(tmp_path):
    (tmp_path / "square").write_text(SQUARE_FILE)
    cfg = ACOConfig(n_ants=2, n_iterations=2, seed=0)
    cases = [BenchmarkCase("missing", 5.0, 4.5, cfg), BenchmarkCase("square", 5.0, 4.5, cfg)]
    outcomes = run_benchmarks(cases, data_dir=str(tmp_path))
    assert len(outcomes) == 1
    assert outcomes[0].index == 1
    assert outcomes[0].result.best_length == 4.0
    assert outcomes[0].grade is ScoreGrade.PASSED_7


def test_run_repeated_trials():
    inst = TSPInstance.random_euclidean(n=15, seed=1)
    stats, details = run_repeated_trials(inst, ACOConfig(n_ants=3, n_iterations=4), n_runs=2, base_seed=10)
    assert stats["n_runs"] == 2
    assert stats["min_length"] <= stats["mean_length"] <= stats["max_length"]
    assert len(details) == 2
    for length, _, tour in details:
        assert length == inst.tour_length(tour)


def test_run_repeated_trials_rejects_bad_config():
    inst = TSPInstance.random_euclidean(n=5, seed=1)
    with pytest.raises(ValueError):
        run_repeated_trials(inst, ACOConfig(rho=0.0), n_runs=1)


def test_run_parameter_sweep_writes_csv(tmp_path):
    inst = TSPInstance.random_euclidean(n=10, seed=2)
    csv_path = tmp_path / "grid.csv"
    rows = run_parameter_sweep(inst, {"q0": [0.5, 0.9]}, base_cfg=ACOConfig(n_ants=2, n_iterations=2),
                               n_runs=1, csv_path=str(csv_path))
    assert [r["q0"] for r in rows] == [0.5, 0.9]
    with open(csv_path, newline="") as f:
        records = list(csv.DictReader(f))
    assert len(records) == 2
    assert records[0]["q0"] == "0.5"


def test_run_benchmarks_writes_answers_as_it_goes(tmp_path, monkeypatch):
    (tmp_path / "square").write_text(SQUARE_FILE)
    (tmp_path / "line").write_text("3\n0 0\n1 0\n2 0\n")
    answers = tmp_path / "out" / "answers.txt"
    cfg = ACOConfig(n_ants=1, n_iterations=1, seed=0)
    cases = [BenchmarkCase("missing", 5.0, 4.5, cfg), BenchmarkCase("square", 5.0, 4.5, cfg),
             BenchmarkCase("line", 1.0, 0.5, cfg)]
    snapshots = []
    real_run_benchmark = experiments.run_benchmark

    def recording_run_benchmark(case, index=0, data_dir="."):
        if answers.exists():
            snapshots.append(answers.read_text())
        return real_run_benchmark(case, index=index, data_dir=data_dir)

    monkeypatch.setattr(experiments, "run_benchmark", recording_run_benchmark)
    outcomes = run_benchmarks(cases, data_dir=str(tmp_path), answers_path=str(answers))
    assert len(outcomes) == 2
    # the square's answer is on disk before the line is solved
    assert len(snapshots) == 1
    assert snapshots[0].startswith("1 7 ")
    lines = answers.read_text().splitlines()
    assert lines[0].startswith("1 7 ")
    assert lines[1].startswith("2 0 ")


def test_benchmark_budgets_fit_pure_python():
    for case in experiments.BENCHMARKS:
        case.config.validate()
        assert case.config.n_ants * case.config.n_iterations <= 1024
    assert experiments.BENCHMARKS[-1].config.n_iterations == 0
