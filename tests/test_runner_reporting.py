import math

import pandas as pd
import pytest

from pfsp_wt.design import DESIGNS, IGParams, describe_design, get_design
from pfsp_wt.exceptions import UnknownEnumValue
from pfsp_wt.reporting import add_rpd_column, paired_comparison, summarise_by_instance, summarise_rpd
from pfsp_wt.runner import run_benchmark, run_quality_traces


@pytest.fixture
def instances(instance_factory):
    return {"a": instance_factory(6, 3, seed=1), "b": instance_factory(7, 3, seed=2)}


def test_run_benchmark_rows(instances) -> None:
    df = run_benchmark(instances, runs=2, time_limit_ms=5, seed=3, stream_progress=False)
    assert len(df) == 2 * 2 * 2
    assert set(df["algorithm"]) == {"ig", "sa"}
    assert (df["budget_ms"] == 5).all()
    # both algorithms of one repetition share the seed
    seeds = df.groupby(["instance", "run"])["seed"].nunique()
    assert (seeds == 1).all()
    assert list(df.columns) == [
        "instance", "algorithm", "run", "seed", "weighted_tardiness",
        "best_known", "iterations", "elapsed_ms", "budget_ms",
    ]


def test_run_benchmark_caps_budget(instances) -> None:
    df = run_benchmark(instances, runs=1, time_limit_ms=500, max_budget_ms=2,
                       ig_params=IGParams(d=2), seed=0, stream_progress=False)
    assert (df["budget_ms"] == 2).all()


def test_run_quality_traces_writes_csv(instances, tmp_path) -> None:
    df = run_quality_traces(instances, "ig", runs=2, time_limit_ms=10, seed=1,
                            log_dir=str(tmp_path), stream_progress=False)
    assert list(df.columns) == ["instance", "algorithm", "run", "seed", "tardiness", "iteration", "elapsed_ms"]
    files = sorted(p.name for p in (tmp_path / "sqt" / "ig").iterdir())
    assert files == ["a_run0.csv", "a_run1.csv", "b_run0.csv", "b_run1.csv"]


def test_run_quality_traces_unknown_algorithm(instances) -> None:
    with pytest.raises(UnknownEnumValue):
        run_quality_traces(instances, "tabu", runs=1, time_limit_ms=1, stream_progress=False)


def _results() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "instance": ["x", "x", "x", "x", "y", "y"],
            "algorithm": ["ig", "sa", "ig", "sa", "ig", "sa"],
            "run": [0, 0, 1, 1, 0, 0],
            "weighted_tardiness": [100, 110, 120, 120, 50, 40],
            "elapsed_ms": [10, 10, 10, 10, 10, 10],
            "iterations": [5, 500, 6, 600, 7, 700],
        }
    )


def test_add_rpd_column() -> None:
    out = add_rpd_column(_results(), best_known={"x": 100, "y": 0})
    assert out.loc[0, "rpd"] == pytest.approx(0.0)
    assert out.loc[1, "rpd"] == pytest.approx(10.0)
    assert math.isnan(out.loc[4, "rpd"])
    with pytest.raises(ValueError):
        add_rpd_column(_results().drop(columns=["weighted_tardiness"]))


def test_summarise_by_instance() -> None:
    summary = summarise_by_instance(add_rpd_column(_results(), best_known={"x": 100}))
    row = summary[(summary["algorithm"] == "ig") & (summary["instance"] == "x")].iloc[0]
    assert row["weighted_tardiness_mean"] == 110
    assert row["weighted_tardiness_min"] == 100
    assert "rpd_mean" in summary.columns
    assert "iterations_mean" in summary.columns


def test_paired_comparison() -> None:
    pc = paired_comparison(_results())
    assert list(pc["winner"]) == ["ig", "tie", "sa"]
    assert list(pc["diff_ig_minus_sa"]) == [-10, 0, 10]


def test_design_registry() -> None:
    assert set(DESIGNS) == {"ig", "sa"}
    assert get_design("SA").identifier == "Simulated Annealing"
    text = describe_design("ig")
    assert "Iterated Greedy" in text
    assert "- d:" in text
    with pytest.raises(UnknownEnumValue):
        get_design("ils")


def test_summarise_rpd() -> None:
    summary = summarise_rpd(add_rpd_column(_results(), best_known={"x": 100, "y": 0}))
    ig = summary[summary["algorithm"] == "ig"].iloc[0]
    sa = summary[summary["algorithm"] == "sa"].iloc[0]
    assert ig["instances"] == 1  # y has no usable best known value
    assert ig["runs"] == 2
    assert ig["rpd_mean"] == pytest.approx(10.0)
    assert ig["rpd_max"] == pytest.approx(20.0)
    assert ig["at_best"] == 1
    assert sa["rpd_mean"] == pytest.approx(15.0)
    assert sa["at_best"] == 0
    with pytest.raises(ValueError):
        summarise_rpd(_results())
