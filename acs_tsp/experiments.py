from __future__ import annotations
import csv
import enum
import itertools
import logging
import os
import statistics
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .aco_base import ACOConfig, ACOResult
from .acs import AntColonySystem
from .tsp import TSPInstance

logger = logging.getLogger(__name__)


class ScoreGrade(enum.Enum):
    """Points awarded for a benchmark run."""
    PASSED_7 = 7
    PASSED_5 = 5
    FAILED = 0


@dataclass
class BenchmarkCase:
    filename: str
    score_min: float            # upper bound for a passing score
    score_max: float            # below this the run earns full points
    config: ACOConfig = field(default_factory=ACOConfig)


@dataclass
class BenchmarkOutcome:
    index: int
    case: BenchmarkCase
    result: ACOResult
    grade: ScoreGrade


# Ant and iteration budgets sized for this pure-Python engine; the compiled
# reference runs used 32-256 ants and up to 2048 iterations.
BENCHMARKS: List[BenchmarkCase] = [
    BenchmarkCase("tsp_51_1", 482.0, 430.0, ACOConfig(n_ants=16, n_iterations=64, q0=0.9, beta=2.0)),
    BenchmarkCase("tsp_100_3", 23_433.0, 20_800.0, ACOConfig(n_ants=16, n_iterations=64, q0=0.9, beta=2.0)),
    BenchmarkCase("tsp_200_2", 35_985.0, 30_000.0, ACOConfig(n_ants=16, n_iterations=48, q0=0.9, beta=2.0)),
    BenchmarkCase("tsp_574_1", 40_000.0, 37_600.0, ACOConfig(n_ants=16, n_iterations=16, q0=0.9, beta=3.0)),
    BenchmarkCase("tsp_1889_1", 378_069.0, 323_000.0, ACOConfig(n_ants=8, n_iterations=2, q0=0.9, beta=2.0)),
    BenchmarkCase("tsp_33810_1", 78_478_868.0, 67_700_000.0, ACOConfig(n_ants=32, n_iterations=0, q0=0.9, beta=2.0)),
]


def grade_score(score: float, score_min: float, score_max: float) -> ScoreGrade:
    if score_max <= score <= score_min:
        return ScoreGrade.PASSED_5
    if score >= score_min:
        return ScoreGrade.FAILED
    return ScoreGrade.PASSED_7


def run_benchmark(case: BenchmarkCase, index: int = 0, data_dir: str = ".") -> Optional[BenchmarkOutcome]:
    """Solve one benchmark file; returns None when the file does not exist."""
    path = os.path.join(data_dir, case.filename)
    if not os.path.exists(path):
        logger.error("File '%s' not found, skipping", path)
        return None
    instance = TSPInstance.from_file(path)
    logger.info("Loaded %d cities from %s", instance.n_cities(), path)
    solver = AntColonySystem.from_config(instance, case.config)
    result = solver.run()
    grade = grade_score(result.best_length, case.score_min, case.score_max)
    logger.info("Final best tour length: %.2f / %.2f %.2f -> %d points",
                result.best_length, case.score_min, case.score_max, grade.value)
    return BenchmarkOutcome(index=index, case=case, result=result, grade=grade)


def run_benchmarks(cases: Iterable[BenchmarkCase] = BENCHMARKS, data_dir: str = ".",
                   answers_path: Optional[str] = None) -> List[BenchmarkOutcome]:
    """Run every case in order, rewriting ``answers_path`` after each solved one."""
    outcomes = []
    for idx, case in enumerate(cases):
        outcome = run_benchmark(case, index=idx, data_dir=data_dir)
        if outcome is not None:
            outcomes.append(outcome)
            if answers_path is not None:
                write_answers(answers_path, outcomes)
    return outcomes


def format_answers(outcomes: Iterable[BenchmarkOutcome]) -> str:
    return "".join(f"{o.index} {o.grade.value} {o.result.best_tour}\n" for o in outcomes)


def write_answers(path: str, outcomes: Iterable[BenchmarkOutcome]) -> str:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    with open(path, "w") as f:
        f.write(format_answers(outcomes))
    return path


def run_repeated_trials(instance: TSPInstance, cfg: ACOConfig, n_runs: int = 10, base_seed: int = 42):
    cfg.validate()
    lengths = []
    times = []
    best_tours = []
    for r in range(n_runs):
        cfg_r = ACOConfig(**{**asdict(cfg), "seed": base_seed + r})
        solver = AntColonySystem.from_config(instance, cfg_r)
        res = solver.run()
        lengths.append(res.best_length)
        times.append(res.elapsed_sec)
        best_tours.append(res.best_tour)
    stats = {
        "mean_length": statistics.mean(lengths),
        "std_length": statistics.stdev(lengths) if len(lengths) > 1 else 0.0,
        "min_length": min(lengths),
        "max_length": max(lengths),
        "median_length": statistics.median(lengths),
        "mean_time": statistics.mean(times),
        "instance": instance.name,
        "n_runs": n_runs,
    }
    return stats, list(zip(lengths, times, best_tours))


def run_parameter_sweep(instance: TSPInstance, param_grid: Dict[str, List[Any]],
                        base_cfg: Optional[ACOConfig] = None, n_runs: int = 5, base_seed: int = 100,
                        csv_path: Optional[str] = None):
    base_cfg = base_cfg or ACOConfig()
    keys = sorted(param_grid.keys())
    rows = []
    for values in itertools.product(*[param_grid[k] for k in keys]):
        cfg = ACOConfig(**{**asdict(base_cfg), **dict(zip(keys, values))})
        stats, _ = run_repeated_trials(instance, cfg, n_runs=n_runs, base_seed=base_seed)
        row = {**{k: getattr(cfg, k) for k in keys}, **stats}
        rows.append(row)
        if csv_path is not None:
            write_header = not os.path.exists(csv_path)
            with open(csv_path, "a", newline="") as f:
                w = csv.DictWriter(f, fieldnames=row.keys())
                if write_header:
                    w.writeheader()
                w.writerow(row)
    return rows
