# scripts/run_experiments.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# make src importable
THIS_FILE = Path(__file__).resolve()
ROOT = THIS_FILE.parents[1]
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from pfsp_wt.design import IGParams, InitializationMethod, SAParams
from pfsp_wt.instance import read_instances, load_best_known, attach_best_known
from pfsp_wt.reporting import add_rpd_column, paired_comparison, summarise_by_instance
from pfsp_wt.runner import run_benchmark, run_quality_traces

SQT_INSTANCES = ("50x20_1", "60x20_1", "70x20_1", "80x20_1", "90x20_1", "100x20_1")

def main():
    p = argparse.ArgumentParser(description="Benchmark IG vs SA or collect solution quality traces")
    p.add_argument("mode", choices=("bench", "sqt"))
    # data
    p.add_argument("--instances-dir", type=str, default="instances")
    p.add_argument("--pattern", type=str, default="*x20_*", help="glob for instance files")
    p.add_argument("--instances", type=str, default="", help="Comma-separated instance names to run (subset)")
    p.add_argument("--best-known", type=str, default="", help="CSV with columns instance,best_tardiness")
    p.add_argument("--outdir", type=str, default="results")
    p.add_argument("--sls", type=str, default="ig", choices=("ig", "sa"), help="algorithm traced in sqt mode")
    # runtime
    p.add_argument("--runs", type=int, default=None, help="repetitions per instance (bench: 5, sqt: 25)")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--time", type=float, default=None, help="seconds per run; default is a multiple of one VND run")
    p.add_argument("--budget-multiplier", type=float, default=None, help="bench: 100, sqt: 1000")
    p.add_argument("--max-budget", type=float, default=None, help="cap in seconds (bench: 120, sqt: 600)")
    p.add_argument("--quiet", action="store_true")
    # SA parameters
    p.add_argument("--sa-init", type=str, default="slack", choices=("random", "slack"))
    p.add_argument("--sa-t", type=float, default=150.0)
    p.add_argument("--sa-steps", type=float, default=0.20)
    p.add_argument("--sa-cooling", type=float, default=1.45)
    # IG parameters
    p.add_argument("--ig-d", type=int, default=4)
    p.add_argument("--ig-t", type=float, default=0.4)

    args = p.parse_args()
    outdir = Path(args.outdir); outdir.mkdir(parents=True, exist_ok=True)

    insts = read_instances(args.instances_dir, pattern=args.pattern, verbose=not args.quiet)
    bk = {}
    if args.best_known:
        try:
            bk = load_best_known(args.best_known)
        except (OSError, ValueError) as e:
            print(f"[warn] Could not load best-known from {args.best_known}: {e}")
    insts = attach_best_known(insts, bk)

    if args.instances.strip():
        wanted = {s.strip() for s in args.instances.split(",")}
    elif args.mode == "sqt":
        wanted = set(SQT_INSTANCES)
    else:
        wanted = set(insts)
    insts = {k: v for k, v in insts.items() if k in wanted}
    if not insts:
        raise SystemExit(f"No instances selected from {args.instances_dir}")

    sa_params = SAParams(
        init=InitializationMethod.parse(args.sa_init),
        temperature=args.sa_t,
        steps_multiplier=args.sa_steps,
        cooling_modifier=args.sa_cooling,
    )
    ig_params = IGParams(d=args.ig_d, temperature=args.ig_t)
    time_limit_ms = int(args.time * 1000) if args.time is not None else None

    if args.mode == "bench":
        df = run_benchmark(
            insts,
            runs=args.runs or 5,
            ig_params=ig_params,
            sa_params=sa_params,
            time_limit_ms=time_limit_ms,
            budget_multiplier=args.budget_multiplier or 100.0,
            max_budget_ms=int((args.max_budget or 120) * 1000),
            seed=args.seed,
            stream_progress=not args.quiet,
        )
        df.to_csv(outdir / "raw.csv", index=False)
        if bk:
            df = add_rpd_column(df, best_known=bk)
            df.to_csv(outdir / "raw_with_rpd.csv", index=False)
        summarise_by_instance(df).to_csv(outdir / "summary_by_instance.csv", index=False)
        paired_comparison(df).to_csv(outdir / "ig_vs_sa.csv", index=False)
        overall = df.groupby("algorithm").agg(
            weighted_tardiness_mean=("weighted_tardiness", "mean"),
            elapsed_ms_mean=("elapsed_ms", "mean"),
        )
        overall.to_csv(outdir / "overall.csv")
    else:
        df = run_quality_traces(
            insts,
            args.sls,
            runs=args.runs or 25,
            ig_params=ig_params,
            sa_params=sa_params,
            time_limit_ms=time_limit_ms,
            budget_multiplier=args.budget_multiplier or 1000.0,
            max_budget_ms=int((args.max_budget or 600) * 1000),
            seed=args.seed,
            log_dir=str(outdir),
            stream_progress=not args.quiet,
        )
        df.to_csv(outdir / f"sqt_{args.sls}.csv", index=False)

    meta = {
        "args": vars(args),
        "n_instances": len(insts),
        "instances": sorted(insts),
        "sa_params": {**vars(sa_params), "init": sa_params.init.value},
        "ig_params": vars(ig_params),
    }
    with open(outdir / f"meta_{args.mode}.json", "w") as f:
        json.dump(meta, f, indent=2)

if __name__ == "__main__":
    main()
