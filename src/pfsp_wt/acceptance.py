"""Memoised Metropolis acceptance probabilities."""

from __future__ import annotations

import math
from typing import Dict


class AcceptanceCache:
    """``exp(-delta / temperature)`` cached per integer ``delta``.

    Entries are only valid for the temperature they were computed under, so
    :meth:`set_temperature` always empties the cache.
    """

    def __init__(self, temperature: float) -> None:
        self._table: Dict[int, float] = {}
        self.temperature = self._checked(temperature)

    @staticmethod
    def _checked(temperature: float) -> float:
        if temperature == 0:
            raise ValueError("Acceptance temperature must be non-zero")
        return float(temperature)

    def set_temperature(self, temperature: float) -> None:
        self.temperature = self._checked(temperature)
        self._table.clear()

    def probability(self, delta: int) -> float:
        try:
            return self._table[delta]
        except KeyError:
            pass
        try:
            value = math.exp(-delta / self.temperature)
        except OverflowError:
            value = math.inf
        self._table[delta] = value
        return value

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, delta: int) -> bool:
        return delta in self._table


__all__ = ["AcceptanceCache"]
