#!/usr/bin/env python3
"""Solve a single weighted-tardiness PFSP instance.

Usage
-----

```
python scripts/solve_instance.py instances/50x20_1 --sls ig --time 10
python scripts/solve_instance.py instances/50x20_1 --sls vnd --order tie
```

Without ``--time`` the budget for ``sa``/``ig`` is 100 times one VND run.
The best weighted tardiness is printed on stdout.
"""

from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from pfsp_wt.design import describe_design
from pfsp_wt.instance import read_instance
from pfsp_wt.solver import PFSPSolver


def main() -> None:
    parser = argparse.ArgumentParser(description="Run one algorithm on one PFSP-WT instance")
    parser.add_argument("instance", type=str, help="Path to the instance file")
    parser.add_argument("--sls", type=str, default="ig", choices=("ii", "vnd", "sa", "ig"))
    parser.add_argument("--time", type=float, default=None, help="Maximum runtime in seconds (sa/ig)")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--trace", type=str, default=None, help="Write JSONL step events to this file")
    parser.add_argument("--describe", action="store_true", help="Print the algorithm design and exit")
    # II / VND
    parser.add_argument("--pivot", type=str, default="first", choices=("first", "best"))
    parser.add_argument("--neighborhood", type=str, default="insert", choices=("transpose", "exchange", "insert"))
    parser.add_argument("--order", type=str, default="tei", choices=("tei", "tie"))
    parser.add_argument("--init", type=str, default="slack", choices=("random", "slack"))
    # SA
    parser.add_argument("--sa-t", type=float, default=150.0)
    parser.add_argument("--sa-steps", type=float, default=0.20)
    parser.add_argument("--sa-cooling", type=float, default=1.45)
    # IG
    parser.add_argument("--ig-d", type=int, default=4)
    parser.add_argument("--ig-t", type=float, default=0.4)
    args = parser.parse_args()

    if args.describe:
        if args.sls not in ("sa", "ig"):
            parser.error("--describe is available for sa and ig")
        print(describe_design(args.sls))
        return

    instance = read_instance(args.instance)

    trace_file = open(args.trace, "w", encoding="utf-8") if args.trace else None
    logger = None
    if trace_file is not None:
        def _logger(ev: dict) -> None:
            trace_file.write(json.dumps(ev) + "\n")
        logger = _logger

    try:
        solver = PFSPSolver(instance, rng=random.Random(args.seed), logger=logger)
        if args.sls == "ii":
            solution = solver.run_local_search(args.pivot, args.neighborhood, args.init)
        elif args.sls == "vnd":
            solution = solver.run_vnd(args.order, args.init)
        else:
            if args.time is not None:
                budget_ms = int(args.time * 1000)
            else:
                print("Calculating maximum run time (from VND run)...", file=sys.stderr)
                budget_ms = solver.estimate_budget(100)
            if args.sls == "sa":
                solution = solver.run_simulated_annealing(
                    args.init, args.sa_t, args.sa_steps, args.sa_cooling, budget_ms
                )
            else:
                solution = solver.run_iterated_greedy(args.ig_d, args.ig_t, budget_ms)
    finally:
        if trace_file is not None:
            trace_file.close()

    print(solution.weighted_tardiness)


if __name__ == "__main__":
    main()
