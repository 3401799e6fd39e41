"""Reporting helpers for weighted-tardiness experiments."""

from __future__ import annotations

from typing import Mapping

import pandas as pd


def add_rpd_column(df: pd.DataFrame, best_known: Mapping[str, int] | None = None) -> pd.DataFrame:
    """Return a copy of *df* with a relative percentage deviation ``rpd`` column.

    Parameters
    ----------
    df:
        DataFrame with at least ``instance`` and ``weighted_tardiness`` columns.
    best_known:
        Optional mapping from instance name to best known weighted tardiness.
        When provided, the ``best_known`` column is filled/overwritten with the
        mapped values before computing the RPD.  Rows whose best known value is
        missing or zero keep ``rpd`` empty, since a relative deviation from an
        optimum of zero tardiness is undefined.
    """

    if "instance" not in df.columns:
        raise ValueError("Input DataFrame must contain an 'instance' column")
    if "weighted_tardiness" not in df.columns:
        raise ValueError("Input DataFrame must contain a 'weighted_tardiness' column")

    result = df.copy()
    if best_known is not None:
        result["best_known"] = result["instance"].map(best_known)
    if "best_known" not in result.columns:
        result["best_known"] = pd.NA
    result["rpd"] = float("nan")
    known = pd.to_numeric(result["best_known"], errors="coerce")
    mask = known.notna() & (known > 0)
    result.loc[mask, "rpd"] = (
        (result.loc[mask, "weighted_tardiness"] - known[mask]) / known[mask] * 100.0
    )
    return result


def summarise_by_instance(df: pd.DataFrame) -> pd.DataFrame:
    """Compute summary statistics grouped by algorithm and instance."""

    required = {"algorithm", "instance", "weighted_tardiness", "elapsed_ms"}
    missing = required.difference(df.columns)
    if missing:
        raise ValueError(f"DataFrame missing required columns: {', '.join(sorted(missing))}")
    agg_dict: dict[str, object] = {
        "weighted_tardiness": ["mean", "min", "std"],
        "elapsed_ms": "mean",
    }
    if "iterations" in df.columns:
        agg_dict["iterations"] = "mean"
    if "rpd" in df.columns:
        agg_dict["rpd"] = "mean"
    grouped = df.groupby(["algorithm", "instance"], as_index=False).agg(agg_dict)
    # Flatten MultiIndex columns produced by aggregation
    grouped.columns = [
        "_".join(filter(None, map(str, col))).rstrip("_") for col in grouped.columns.values
    ]
    return grouped


def paired_comparison(df: pd.DataFrame, value: str = "weighted_tardiness") -> pd.DataFrame:
    """One row per (instance, run) with IG and SA side by side.

    Runs of a benchmark share their seed, so the per-run difference
    ``ig - sa`` is a paired sample.  A ``winner`` column names the algorithm
    with the lower value (``tie`` when equal).
    """

    required = {"instance", "run", "algorithm", value}
    missing = required.difference(df.columns)
    if missing:
        raise ValueError(f"DataFrame missing required columns: {', '.join(sorted(missing))}")
    pt = df.pivot_table(index=["instance", "run"], columns="algorithm", values=value, aggfunc="first")
    pt.columns.name = None
    if "ig" in pt.columns and "sa" in pt.columns:
        pt["diff_ig_minus_sa"] = pt["ig"] - pt["sa"]
        pt["winner"] = "tie"
        pt.loc[pt["diff_ig_minus_sa"] < 0, "winner"] = "ig"
        pt.loc[pt["diff_ig_minus_sa"] > 0, "winner"] = "sa"
    return pt.reset_index()


def summarise_rpd(df: pd.DataFrame) -> pd.DataFrame:
    """Per-algorithm RPD statistics over the rows that have a best known value.

    ``at_best`` counts runs that matched the best known tardiness.
    """

    required = {"algorithm", "instance", "rpd"}
    missing = required.difference(df.columns)
    if missing:
        raise ValueError(f"DataFrame missing required columns: {', '.join(sorted(missing))}")
    known = df[df["rpd"].notna()]
    summary = known.groupby("algorithm").agg(
        instances=("instance", "nunique"),
        runs=("rpd", "size"),
        rpd_mean=("rpd", "mean"),
        rpd_std=("rpd", "std"),
        rpd_max=("rpd", "max"),
        at_best=("rpd", lambda s: int((s <= 0).sum())),
    )
    return summary.reset_index()
