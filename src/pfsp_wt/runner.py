"""Experiment runner: paired IG vs SA benchmarks and solution quality traces."""
from __future__ import annotations

import random
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .design import IGParams, SAParams, get_design
from .instance import Instance
from .solution import Solution
from .solver import PFSPSolver

ALGORITHMS = ("ig", "sa")


def _run_algorithm(solver: PFSPSolver, algorithm: str, ig_params: IGParams, sa_params: SAParams,
                   budget_ms: int, rng: random.Random) -> Solution:
    if algorithm == "ig":
        return solver.run_iterated_greedy(ig_params.d, ig_params.temperature, budget_ms, rng=rng)
    if algorithm == "sa":
        return solver.run_simulated_annealing(
            sa_params.init, sa_params.temperature, sa_params.steps_multiplier,
            sa_params.cooling_modifier, budget_ms, rng=rng,
        )
    get_design(algorithm)  # raises for unknown keys
    raise ValueError(f"No runner for algorithm '{algorithm}'")


def _budget(solver: PFSPSolver, time_limit_ms: Optional[int], budget_multiplier: float,
            max_budget_ms: Optional[int]) -> int:
    budget = int(time_limit_ms) if time_limit_ms is not None else solver.estimate_budget(budget_multiplier)
    if max_budget_ms is not None and budget > max_budget_ms:
        budget = int(max_budget_ms)
    return budget


def run_benchmark(
    instances: Dict[str, Instance],
    runs: int = 5,
    ig_params: IGParams = IGParams(),
    sa_params: SAParams = SAParams(),
    time_limit_ms: Optional[int] = None,
    budget_multiplier: float = 100.0,
    max_budget_ms: Optional[int] = 120_000,
    seed: Optional[int] = None,
    stream_progress: bool = True,
) -> pd.DataFrame:
    """Run IG and SA ``runs`` times per instance with one shared seed per run.

    Both algorithms of a repetition get their own ``random.Random`` built from
    the same seed, so they see identical random streams.  The budget is either
    ``time_limit_ms`` or ``budget_multiplier`` times one VND run, capped at
    ``max_budget_ms``.
    """
    records: List[dict] = []
    master = random.Random(seed)

    for inst_name, inst in instances.items():
        solver = PFSPSolver(inst, rng=random.Random(seed))
        budget_ms = _budget(solver, time_limit_ms, budget_multiplier, max_budget_ms)
        for run_idx in range(runs):
            run_seed = master.randrange(2**32)
            if stream_progress:
                print(f"[bench] {inst_name} – run {run_idx+1}/{runs}  (seed={run_seed}, budget={budget_ms}ms)", flush=True)
            for algorithm in ALGORITHMS:
                result = _run_algorithm(solver, algorithm, ig_params, sa_params, budget_ms, random.Random(run_seed))
                best_known = inst.best_tardiness
                records.append(
                    {
                        "instance": inst_name,
                        "algorithm": algorithm,
                        "run": run_idx,
                        "seed": run_seed,
                        "weighted_tardiness": int(result.weighted_tardiness),
                        "best_known": best_known,
                        "iterations": int(result.iterations),
                        "elapsed_ms": int(result.runtime_ms),
                        "budget_ms": budget_ms,
                    }
                )

    return pd.DataFrame.from_records(records)


def run_quality_traces(
    instances: Dict[str, Instance],
    algorithm: str,
    runs: int = 25,
    ig_params: IGParams = IGParams(),
    sa_params: SAParams = SAParams(),
    time_limit_ms: Optional[int] = None,
    budget_multiplier: float = 1000.0,
    max_budget_ms: Optional[int] = 600_000,
    seed: Optional[int] = None,
    log_dir: Optional[str] = None,
    stream_progress: bool = True,
) -> pd.DataFrame:
    """Collect solution quality traces (tardiness, iteration, elapsed) per run.

    With ``log_dir`` set, each run is also written to
    ``<log_dir>/sqt/<algorithm>/<instance>_run<k>.csv``.
    """
    design = get_design(algorithm)
    trace_base: Optional[Path] = None
    if log_dir:
        trace_base = Path(log_dir) / "sqt" / design.key
        trace_base.mkdir(parents=True, exist_ok=True)

    rows: List[dict] = []
    master = random.Random(seed)
    for inst_name, inst in instances.items():
        solver = PFSPSolver(inst, rng=random.Random(seed))
        budget_ms = _budget(solver, time_limit_ms, budget_multiplier, max_budget_ms)
        if stream_progress:
            print(f"[sqt] {inst_name}: {budget_ms / 1000:.1f}s per run", flush=True)
        for run_idx in range(runs):
            run_seed = master.randrange(2**32)
            if stream_progress:
                print(f"[sqt] {inst_name} – run {run_idx+1}/{runs}", flush=True)
            result = _run_algorithm(solver, design.key, ig_params, sa_params, budget_ms, random.Random(run_seed))
            run_rows = [
                {"instance": inst_name, "algorithm": design.key, "run": run_idx, "seed": run_seed, **tr.as_row()}
                for tr in result.quality_traces
            ]
            rows.extend(run_rows)
            if trace_base is not None:
                out_path = trace_base / f"{inst_name}_run{run_idx}.csv"
                pd.DataFrame(run_rows, columns=["instance", "algorithm", "run", "seed", "tardiness", "iteration",
                                                "elapsed_ms"]).to_csv(out_path, index=False)

    return pd.DataFrame(rows, columns=["instance", "algorithm", "run", "seed", "tardiness", "iteration", "elapsed_ms"])
