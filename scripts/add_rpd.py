#!/usr/bin/env python3
"""Add RPD values to a benchmark CSV and report them per algorithm.

```
python scripts/add_rpd.py --results results/raw.csv --bks-file best_known.csv
```

Rows of instances without a best known value (or with a best known
tardiness of 0) keep an empty ``rpd`` and are left out of the summary.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from pfsp_wt.instance import load_best_known
from pfsp_wt.reporting import add_rpd_column, summarise_rpd


def main() -> None:
    parser = argparse.ArgumentParser(description="Relative percent deviation from best known weighted tardiness")
    parser.add_argument("--results", type=str, required=True, help="raw.csv written by run_experiments.py bench")
    parser.add_argument("--bks-file", type=str, required=True, help="CSV with columns instance,best_tardiness")
    parser.add_argument("--output", type=str, default=None, help="Enriched CSV (default: overwrite --results)")
    parser.add_argument("--summary", type=str, default=None, help="Also write the per-algorithm summary here")
    args = parser.parse_args()

    best_known = load_best_known(args.bks_file)
    enriched = add_rpd_column(pd.read_csv(args.results), best_known)
    output_path = Path(args.output) if args.output else Path(args.results)
    enriched.to_csv(output_path, index=False)

    unknown = sorted(set(enriched.loc[enriched["rpd"].isna(), "instance"]))
    if unknown:
        print(f"[warn] no usable best known value for {len(unknown)} instance(s): {', '.join(unknown)}",
              file=sys.stderr)

    summary = summarise_rpd(enriched)
    if args.summary:
        summary.to_csv(args.summary, index=False)
    print(summary.to_string(index=False, float_format=lambda v: f"{v:.3f}"))
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()
