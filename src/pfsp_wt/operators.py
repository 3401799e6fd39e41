# src/pfsp_wt/operators.py
from __future__ import annotations
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple, Union
import random

from .design import NeighborhoodMethod
from .exceptions import UnknownEnumValue, UnsupportedOperation


# ---------- List helpers ----------
def swap(order: Sequence[int], i: int, j: int) -> List[int]:
    out = list(order)
    out[i], out[j] = out[j], out[i]
    return out

def move(order: Sequence[int], i: int, j: int) -> List[int]:
    """Remove the item at ``i`` and re-insert it at ``j``."""
    out = list(order)
    out.insert(j, out.pop(i))
    return out


class NeighborhoodOperator(Protocol):
    """Cursor over the moves of one neighborhood around a base order.

    ``last_changed_index`` is the lowest position at which the most recent
    neighbour (enumerated or sampled) differs from the base; completion times
    only need recomputing from there on.
    """

    base: List[int]
    last_changed_index: int

    def set_base(self, order: Sequence[int]) -> None: ...
    def reset_cursor(self) -> None: ...
    def has_next(self) -> bool: ...
    def next(self) -> Optional[List[int]]: ...
    def count_possible_moves(self) -> int: ...
    def sample_uniform(self) -> List[int]: ...


# ---------- Transpose: (i, i+1) for i = 0..n-2 ----------
class TransposeOperator:
    def __init__(self, base: Sequence[int], rng: Optional[random.Random] = None) -> None:
        self.base = list(base)
        self.rng = rng if rng is not None else random.Random()
        self.last_changed_index = 0
        self.reset_cursor()

    def set_base(self, order: Sequence[int]) -> None:
        self.base = list(order)

    def reset_cursor(self) -> None:
        self._i = 0

    def has_next(self) -> bool:
        return self._i < len(self.base) - 1

    def next(self) -> Optional[List[int]]:
        if not self.has_next():
            return None
        i = self._i
        self._i += 1
        self.last_changed_index = i
        return swap(self.base, i, i + 1)

    def count_possible_moves(self) -> int:
        return max(0, len(self.base) - 1)

    def sample_uniform(self) -> List[int]:
        n = len(self.base)
        if n < 2:
            raise UnsupportedOperation(f"Transpose has no move on an order of length {n}")
        i = self.rng.randrange(n - 1)
        self.last_changed_index = i
        return swap(self.base, i, i + 1)


# ---------- Exchange: (i, j) with i < j ----------
class ExchangeOperator:
    def __init__(self, base: Sequence[int], rng: Optional[random.Random] = None) -> None:
        self.base = list(base)
        self.rng = rng if rng is not None else random.Random()
        self.last_changed_index = 0
        self.reset_cursor()

    def set_base(self, order: Sequence[int]) -> None:
        self.base = list(order)

    def reset_cursor(self) -> None:
        self._i = 0
        self._j = 1

    def has_next(self) -> bool:
        n = len(self.base)
        return self._i < n and self._j < n

    def next(self) -> Optional[List[int]]:
        if not self.has_next():
            return None
        i, j = self._i, self._j
        self._j += 1
        if self._j == len(self.base):
            self._i += 1
            self._j = self._i + 1
        self.last_changed_index = i
        return swap(self.base, i, j)

    def count_possible_moves(self) -> int:
        n = len(self.base)
        return n * (n - 1) // 2

    def sample_uniform(self) -> List[int]:
        n = len(self.base)
        if n < 2:
            raise UnsupportedOperation(f"Exchange has no move on an order of length {n}")
        i = j = 0
        while i == j:
            i, j = self.rng.randrange(n), self.rng.randrange(n)
        if i > j:
            i, j = j, i
        self.last_changed_index = i
        return swap(self.base, i, j)


# ---------- Insert: item at i moved to j ----------
def _is_proper_insert(i: int, j: int) -> bool:
    # j == i is the identity; j == i+1 duplicates the move (i+1 -> i)
    return i != j and i + 1 != j

class InsertOperator:
    def __init__(self, base: Sequence[int], rng: Optional[random.Random] = None) -> None:
        self.base = list(base)
        self.rng = rng if rng is not None else random.Random()
        self.last_changed_index = 0
        self.reset_cursor()

    def set_base(self, order: Sequence[int]) -> None:
        self.base = list(order)

    def reset_cursor(self) -> None:
        self._i = 0
        self._j = 0

    def _advance(self) -> None:
        self._j += 1
        if self._j == len(self.base):
            self._i += 1
            self._j = 0

    def has_next(self) -> bool:
        n = len(self.base)
        if self._i == n - 1 and self._j == n - 1:
            return False
        return self._i < n and self._j < n

    def next(self) -> Optional[List[int]]:
        while self.has_next():
            i, j = self._i, self._j
            self._advance()
            if _is_proper_insert(i, j):
                self.last_changed_index = min(i, j)
                return move(self.base, i, j)
        return None

    def count_possible_moves(self) -> int:
        n = len(self.base)
        return (n - 1) * (n - 1) if n > 0 else 0

    def sample_uniform(self) -> List[int]:
        """Draw (i, j) uniformly until it is a proper insert; the cursor is untouched."""
        n = len(self.base)
        if n < 2:
            raise UnsupportedOperation(f"Insert has no move on an order of length {n}")
        i, j = self.rng.randrange(n), self.rng.randrange(n)
        while not _is_proper_insert(i, j):
            i, j = self.rng.randrange(n), self.rng.randrange(n)
        self.last_changed_index = min(i, j)
        return move(self.base, i, j)


def build_operator(
    method: Union[NeighborhoodMethod, str],
    base: Sequence[int],
    rng: Optional[random.Random] = None,
) -> NeighborhoodOperator:
    method = NeighborhoodMethod.parse(method)
    if method is NeighborhoodMethod.TRANSPOSE:
        return TransposeOperator(base, rng)
    if method is NeighborhoodMethod.EXCHANGE:
        return ExchangeOperator(base, rng)
    if method is NeighborhoodMethod.INSERT:
        return InsertOperator(base, rng)
    raise UnknownEnumValue(f"Undefined NeighborhoodMethod: {method}")


class Neighborhood:
    """Uniform façade over one neighborhood operator selected by method tag."""

    def __init__(
        self,
        base: Sequence[int],
        method: Union[NeighborhoodMethod, str],
        rng: Optional[random.Random] = None,
    ) -> None:
        self.method = NeighborhoodMethod.parse(method)
        self._op = build_operator(self.method, base, rng)

    @property
    def base(self) -> List[int]:
        return list(self._op.base)

    @property
    def last_changed_index(self) -> int:
        return self._op.last_changed_index

    def set_base(self, order: Sequence[int]) -> None:
        self._op.set_base(order)

    def reset_cursor(self) -> None:
        self._op.reset_cursor()

    def has_next(self) -> bool:
        return self._op.has_next()

    def next(self) -> Optional[List[int]]:
        return self._op.next()

    def sample_uniform(self) -> List[int]:
        return self._op.sample_uniform()

    def count_possible_moves(self) -> int:
        return self._op.count_possible_moves()

    def all(self) -> List[List[int]]:
        """Every remaining neighbour from the current cursor position."""
        return [order for order, _ in self]

    def __iter__(self) -> Iterator[Tuple[List[int], int]]:
        """Yield ``(neighbour, last_changed_index)`` until the cursor is exhausted."""
        while self._op.has_next():
            order = self._op.next()
            if order is None:
                break
            yield order, self._op.last_changed_index
