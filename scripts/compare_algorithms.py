# compare_algorithms.py
from __future__ import annotations
import pandas as pd

from pfsp_wt.reporting import paired_comparison

def compare(raw_csv_path: str) -> pd.DataFrame:
    df = pd.read_csv(raw_csv_path)
    paired = paired_comparison(df)
    # mean per instance, plus how often each algorithm won the paired runs
    agg = {"ig": "mean", "sa": "mean", "diff_ig_minus_sa": "mean"}
    pt = paired.groupby("instance").agg(agg)
    wins = paired.pivot_table(index="instance", columns="winner", values="run", aggfunc="count", fill_value=0)
    wins.columns = [f"wins_{c}" for c in wins.columns]
    return pt.join(wins).reset_index()

if __name__ == "__main__":
    import argparse
    ap = argparse.ArgumentParser()
    ap.add_argument("--raw", required=True)
    ap.add_argument("--out", default="comparison.csv")
    args = ap.parse_args()
    comp = compare(args.raw)
    comp.to_csv(args.out, index=False)
    print("Saved", args.out)
