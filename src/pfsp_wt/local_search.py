# src/pfsp_wt/local_search.py
from __future__ import annotations
from typing import Any, Callable, Dict, Optional, Sequence, Union

from .design import NeighborhoodMethod, NeighborhoodOrder, Pivot
from .exceptions import UnknownEnumValue
from .instance import Instance
from .operators import Neighborhood
from .solution import Solution


class LocalSearch:
    """Iterative Improvement and Variable Neighborhood Descent.

    Every neighbour is evaluated incrementally from the current solution's
    completion times, starting at the operator's ``last_changed_index``.
    Nothing in here is random: given the same starting solution the result is
    always the same.
    """

    def __init__(
        self,
        instance: Instance,
        logger: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> None:
        self.instance = instance
        self.logger = logger

    def _log(self, event: str, **fields: Any) -> None:
        if self.logger:
            self.logger({"event": event, **fields})

    def _evaluate(self, neigh: Neighborhood, order: Sequence[int], current: Solution) -> Solution:
        return self.instance.evaluate(order, current.completion_times, neigh.last_changed_index)

    # ---------- Iterative improvement ----------
    def iterative_improvement(
        self,
        solution: Solution,
        pivot: Union[Pivot, str],
        method: Union[NeighborhoodMethod, str],
    ) -> Solution:
        pivot = Pivot.parse(pivot)
        if pivot is Pivot.FIRST_IMPROVEMENT:
            return self.first_improvement(solution, method)
        if pivot is Pivot.BEST_IMPROVEMENT:
            return self.best_improvement(solution, method)
        raise UnknownEnumValue(f"Unhandled pivot: {pivot}")

    def first_improvement(self, solution: Solution, method: Union[NeighborhoodMethod, str]) -> Solution:
        """Adopt the first strictly improving neighbour, re-base and rescan from
        the start; stop after a full scan finds nothing better."""
        current = solution
        neigh = Neighborhood(current.jobs_order, method)
        moves = 0
        improved = True
        while improved:
            improved = False
            neigh.reset_cursor()
            while neigh.has_next():
                order = neigh.next()
                if order is None:
                    break
                cand = self._evaluate(neigh, order, current)
                if cand.weighted_tardiness < current.weighted_tardiness:
                    current = cand
                    neigh.set_base(current.jobs_order)
                    moves += 1
                    improved = True
                    break
        self._log("ls_done", pivot="first", method=neigh.method.value, moves=moves, val=current.weighted_tardiness)
        return current

    def best_improvement(self, solution: Solution, method: Union[NeighborhoodMethod, str]) -> Solution:
        current = solution
        moves = 0
        while True:
            better = self.find_best_improving_neighbor(current, method)
            if better is None:
                break
            current = better
            moves += 1
        self._log("ls_done", pivot="best", method=NeighborhoodMethod.parse(method).value,
                  moves=moves, val=current.weighted_tardiness)
        return current

    def find_best_improving_neighbor(
        self,
        solution: Solution,
        method: Union[NeighborhoodMethod, str],
    ) -> Optional[Solution]:
        """Strictly best neighbour of a full scan (first one on ties), or None."""
        neigh = Neighborhood(solution.jobs_order, method)
        best: Optional[Solution] = None
        best_val = solution.weighted_tardiness
        while neigh.has_next():
            order = neigh.next()
            if order is None:
                break
            cand = self._evaluate(neigh, order, solution)
            if cand.weighted_tardiness < best_val:
                best, best_val = cand, cand.weighted_tardiness
        return best

    def find_first_improving_neighbor(
        self,
        solution: Solution,
        method: Union[NeighborhoodMethod, str],
    ) -> Optional[Solution]:
        neigh = Neighborhood(solution.jobs_order, method)
        while neigh.has_next():
            order = neigh.next()
            if order is None:
                break
            cand = self._evaluate(neigh, order, solution)
            if cand.weighted_tardiness < solution.weighted_tardiness:
                return cand
        return None

    def is_local_optimum(self, solution: Solution, method: Union[NeighborhoodMethod, str]) -> bool:
        return self.find_first_improving_neighbor(solution, method) is None

    # ---------- Variable neighborhood descent ----------
    def vnd(self, solution: Solution, order: Union[NeighborhoodOrder, str]) -> Solution:
        """First-improvement VND: one improving move of neighborhood k sends the
        search back to k = 0; a failing neighborhood advances k."""
        methods = NeighborhoodOrder.parse(order).methods
        current = solution
        moves = 0
        k = 0
        while k < len(methods):
            better = self.find_first_improving_neighbor(current, methods[k])
            if better is None:
                k += 1
            else:
                current = better
                moves += 1
                k = 0
        self._log("vnd_done", order=NeighborhoodOrder.parse(order).value, moves=moves, val=current.weighted_tardiness)
        return current
