import random

import pytest

from pfsp_wt.design import NeighborhoodMethod
from pfsp_wt.exceptions import UnknownEnumValue, UnsupportedOperation
from pfsp_wt.operators import (
    ExchangeOperator,
    InsertOperator,
    Neighborhood,
    TransposeOperator,
    move,
)


def _enumerate(neigh: Neighborhood):
    return [(order, lci) for order, lci in neigh]


def test_transpose_sample_enumeration() -> None:
    neigh = Neighborhood([1, 2, 3], "transpose")
    assert _enumerate(neigh) == [([2, 1, 3], 0), ([1, 3, 2], 1)]
    assert not neigh.has_next()
    assert neigh.next() is None


def test_exchange_sample_enumeration() -> None:
    neigh = Neighborhood([1, 2, 3], NeighborhoodMethod.EXCHANGE)
    assert _enumerate(neigh) == [([2, 1, 3], 0), ([3, 2, 1], 0), ([1, 3, 2], 1)]


def test_insert_sample_enumeration_skips_identity_and_adjacent_duplicates() -> None:
    # (0,0) (0,1) (1,1) (1,2) (2,2) are skipped; (0,2) (1,0) (2,0) (2,1) remain
    neigh = Neighborhood([1, 2, 3], "insert")
    assert _enumerate(neigh) == [([2, 3, 1], 0), ([2, 1, 3], 0), ([3, 1, 2], 0), ([1, 3, 2], 1)]
    assert neigh.count_possible_moves() == 4


@pytest.mark.parametrize(
    "method, expected",
    [("transpose", lambda n: n - 1), ("exchange", lambda n: n * (n - 1) // 2), ("insert", lambda n: (n - 1) ** 2)],
)
@pytest.mark.parametrize("n", [1, 2, 3, 6, 9])
def test_move_counts(method, expected, n) -> None:
    base = list(range(1, n + 1))
    neigh = Neighborhood(base, method)
    orders = neigh.all()
    assert len(orders) == expected(n) == neigh.count_possible_moves()
    assert len({tuple(o) for o in orders}) == len(orders)
    assert all(tuple(o) != tuple(base) for o in orders)
    assert all(sorted(o) == base for o in orders)


@pytest.mark.parametrize("method", ["transpose", "exchange", "insert"])
def test_last_changed_index_is_first_difference(method) -> None:
    base = [4, 1, 6, 2, 5, 3]
    neigh = Neighborhood(base, method)
    for order, lci in neigh:
        first_diff = next(k for k, (a, b) in enumerate(zip(base, order)) if a != b)
        assert lci <= first_diff
        assert order[:lci] == base[:lci]


@pytest.mark.parametrize("method", ["transpose", "exchange", "insert"])
def test_reset_cursor_is_idempotent(method) -> None:
    neigh = Neighborhood([3, 1, 2, 4], method)
    neigh.reset_cursor()
    first = neigh.next()
    neigh.next()
    neigh.reset_cursor()
    neigh.reset_cursor()
    assert neigh.next() == first


def test_set_base_keeps_cursor_position() -> None:
    op = TransposeOperator([1, 2, 3, 4])
    assert op.next() == [2, 1, 3, 4]
    op.set_base([4, 3, 2, 1])
    assert op.next() == [4, 2, 3, 1]
    assert op.last_changed_index == 1


def test_insert_sampling_is_proper_and_leaves_cursor_alone() -> None:
    base = [1, 2, 3, 4, 5]
    op = InsertOperator(base, rng=random.Random(0))
    first = op.next()
    valid = {tuple(o) for o in Neighborhood(base, "insert").all()}
    for _ in range(200):
        sample = op.sample_uniform()
        assert tuple(sample) in valid
        assert sample[: op.last_changed_index] == base[: op.last_changed_index]
    op.reset_cursor()
    assert op.next() == first


def test_exchange_and_transpose_sampling_stay_in_neighborhood() -> None:
    base = [5, 3, 1, 4, 2]
    for cls, method in ((ExchangeOperator, "exchange"), (TransposeOperator, "transpose")):
        op = cls(base, rng=random.Random(1))
        valid = {tuple(o) for o in Neighborhood(base, method).all()}
        seen = set()
        for _ in range(300):
            sample = op.sample_uniform()
            assert tuple(sample) in valid
            seen.add(tuple(sample))
        assert seen == valid


def test_sampling_is_reproducible_with_seed() -> None:
    a = Neighborhood(list(range(1, 9)), "insert", rng=random.Random(42))
    b = Neighborhood(list(range(1, 9)), "insert", rng=random.Random(42))
    assert [a.sample_uniform() for _ in range(20)] == [b.sample_uniform() for _ in range(20)]


@pytest.mark.parametrize("method", ["transpose", "exchange", "insert"])
def test_sampling_without_moves_is_unsupported(method) -> None:
    with pytest.raises(UnsupportedOperation):
        Neighborhood([1], method).sample_uniform()


def test_unknown_method() -> None:
    with pytest.raises(UnknownEnumValue):
        Neighborhood([1, 2, 3], "2-opt")


def test_move_helper() -> None:
    assert move([1, 2, 3, 4], 0, 3) == [2, 3, 4, 1]
    assert move([1, 2, 3, 4], 3, 1) == [1, 4, 2, 3]
