import pytest

from pfsp_wt.design import NeighborhoodMethod, NeighborhoodOrder, Pivot
from pfsp_wt.exceptions import UnknownEnumValue
from pfsp_wt.local_search import LocalSearch
from pfsp_wt.operators import Neighborhood

METHODS = list(NeighborhoodMethod)


@pytest.mark.parametrize("pivot", [Pivot.FIRST_IMPROVEMENT, Pivot.BEST_IMPROVEMENT])
@pytest.mark.parametrize("method", METHODS)
def test_iterative_improvement_reaches_local_optimum(small_instance, pivot, method) -> None:
    ls = LocalSearch(small_instance)
    start = small_instance.evaluate(list(range(1, small_instance.number_of_jobs + 1)))
    result = ls.iterative_improvement(start, pivot, method)
    assert result.weighted_tardiness <= start.weighted_tardiness
    assert sorted(result.jobs_order) == sorted(start.jobs_order)
    assert ls.is_local_optimum(result, method)
    # completion times stay consistent with the order after incremental updates
    assert result.weighted_tardiness == small_instance.evaluate(result.jobs_order).weighted_tardiness


def test_best_improvement_step_picks_strictly_best_neighbor(small_instance) -> None:
    ls = LocalSearch(small_instance)
    start = small_instance.evaluate(small_instance.initial_solution("slack"))
    step = ls.find_best_improving_neighbor(start, "exchange")
    values = [small_instance.evaluate(o).weighted_tardiness for o in Neighborhood(start.jobs_order, "exchange").all()]
    if min(values) < start.weighted_tardiness:
        assert step is not None
        assert step.weighted_tardiness == min(values)
    else:
        assert step is None


def test_first_improving_neighbor_is_first_in_enumeration(sample_instance) -> None:
    ls = LocalSearch(sample_instance)
    start = sample_instance.evaluate([2, 1, 3])  # wt 11
    # transpose neighbours: [1,2,3] -> 9, [2,3,1] -> 11
    step = ls.find_first_improving_neighbor(start, "transpose")
    assert step is not None
    assert step.jobs_order == (1, 2, 3)
    assert step.weighted_tardiness == 9


@pytest.mark.parametrize("method", METHODS)
def test_sample_order_is_locally_optimal(sample_instance, method) -> None:
    ls = LocalSearch(sample_instance)
    assert ls.is_local_optimum(sample_instance.evaluate([1, 2, 3]), method)
    assert ls.first_improvement(sample_instance.evaluate([2, 1, 3]), method).weighted_tardiness == 9


@pytest.mark.parametrize("order", list(NeighborhoodOrder))
def test_vnd_result_is_optimal_for_every_neighborhood(small_instance, order) -> None:
    ls = LocalSearch(small_instance)
    start = small_instance.evaluate(small_instance.initial_solution("slack"))
    result = ls.vnd(start, order)
    assert result.weighted_tardiness <= start.weighted_tardiness
    for method in METHODS:
        again = ls.first_improvement(result, method)
        assert again.weighted_tardiness == result.weighted_tardiness


def test_local_search_is_deterministic(instance_factory) -> None:
    inst = instance_factory(10, 5, seed=21)
    start = inst.evaluate(inst.initial_solution("slack"))
    a = LocalSearch(inst).vnd(start, "tie")
    b = LocalSearch(inst).vnd(start, "tie")
    assert a.jobs_order == b.jobs_order
    assert a.weighted_tardiness == b.weighted_tardiness


def test_search_does_not_touch_the_start_solution(small_instance) -> None:
    start = small_instance.evaluate(list(range(1, 9)))
    LocalSearch(small_instance).first_improvement(start, "insert")
    assert start.jobs_order == tuple(range(1, 9))
    assert start.weighted_tardiness == small_instance.evaluate(list(range(1, 9))).weighted_tardiness


def test_events_are_logged(small_instance) -> None:
    events = []
    ls = LocalSearch(small_instance, logger=events.append)
    ls.vnd(small_instance.evaluate(list(range(1, 9))), "tei")
    assert events[-1]["event"] == "vnd_done"
    assert events[-1]["order"] == "tei"


def test_unknown_pivot_and_order(small_instance) -> None:
    ls = LocalSearch(small_instance)
    start = small_instance.evaluate(list(range(1, 9)))
    with pytest.raises(UnknownEnumValue):
        ls.iterative_improvement(start, "worst", "insert")
    with pytest.raises(UnknownEnumValue):
        ls.vnd(start, "eit")


def _restart_scan(instance, solution, method):
    current = solution
    while True:
        for order in Neighborhood(current.jobs_order, method).all():
            cand = instance.evaluate(order)
            if cand.weighted_tardiness < current.weighted_tardiness:
                current = cand
                break
        else:
            return current


def _continue_scan(instance, solution, method):
    current = solution
    neigh = Neighborhood(current.jobs_order, method)
    improved = True
    while improved:
        improved = False
        neigh.reset_cursor()
        for order, lci in neigh:
            cand = instance.evaluate(order, current.completion_times, lci)
            if cand.weighted_tardiness < current.weighted_tardiness:
                current = cand
                neigh.set_base(current.jobs_order)
                improved = True
    return current


def test_first_improvement_rescans_from_the_first_neighbor(instance_factory) -> None:
    differs = 0
    for seed in range(30):
        inst = instance_factory(8, 4, seed=seed)
        start = inst.evaluate(list(range(1, 9)))
        result = LocalSearch(inst).first_improvement(start, "insert")
        assert result.jobs_order == _restart_scan(inst, start, "insert").jobs_order
        if result.jobs_order != _continue_scan(inst, start, "insert").jobs_order:
            differs += 1
    # resuming the scan after a move walks a different path on some instances
    assert differs > 0
