"""Entry points used by the command-line scripts and the benchmark runner."""

from __future__ import annotations

import random
import time
from typing import Any, Callable, Dict, Optional, Union

from .algo_ig import IteratedGreedy
from .algo_sa import SimulatedAnnealing
from .design import InitializationMethod, NeighborhoodMethod, NeighborhoodOrder, Pivot
from .instance import Instance
from .local_search import LocalSearch
from .solution import Solution


class PFSPSolver:
    """Bind one instance to the local-search and metaheuristic drivers.

    A solver is not meant to be shared between threads; build one per run
    when benchmarking.
    """

    def __init__(
        self,
        instance: Instance,
        rng: Optional[random.Random] = None,
        logger: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> None:
        self.instance = instance
        self.rng = rng if rng is not None else random.Random()
        self.logger = logger
        self.local_search = LocalSearch(instance, logger=logger)

    def initial(self, init: Union[InitializationMethod, str]) -> Solution:
        return self.instance.evaluate(self.instance.initial_solution(init, self.rng))

    def run_local_search(
        self,
        pivot: Union[Pivot, str],
        method: Union[NeighborhoodMethod, str],
        init: Union[InitializationMethod, str],
    ) -> Solution:
        start = time.time()
        solution = self.local_search.iterative_improvement(self.initial(init), pivot, method)
        return solution.with_run_info(0, int((time.time() - start) * 1000))

    def run_vnd(
        self,
        order: Union[NeighborhoodOrder, str],
        init: Union[InitializationMethod, str],
    ) -> Solution:
        start = time.time()
        solution = self.local_search.vnd(self.initial(init), order)
        return solution.with_run_info(0, int((time.time() - start) * 1000))

    def run_simulated_annealing(
        self,
        init: Union[InitializationMethod, str],
        temperature: float,
        steps_multiplier: float,
        cooling_modifier: float,
        max_runtime_ms: float,
        rng: Optional[random.Random] = None,
    ) -> Solution:
        sa = SimulatedAnnealing(
            self.instance,
            init=init,
            temperature=temperature,
            steps_multiplier=steps_multiplier,
            cooling_modifier=cooling_modifier,
            rng=rng if rng is not None else self.rng,
            logger=self.logger,
        )
        return sa.run(max_runtime_ms)

    def run_iterated_greedy(
        self,
        d: int,
        temperature: float,
        max_runtime_ms: float,
        rng: Optional[random.Random] = None,
    ) -> Solution:
        ig = IteratedGreedy(
            self.instance,
            d=d,
            temperature=temperature,
            rng=rng if rng is not None else self.rng,
            logger=self.logger,
        )
        return ig.run(max_runtime_ms)

    def estimate_budget(self, multiplier: float) -> int:
        """Wall-clock budget (ms) as ``multiplier`` times one VND run.

        The VND uses transpose -> exchange -> insert from the slack heuristic.
        """
        start = time.time()
        self.local_search.vnd(self.initial(InitializationMethod.SLACK_HEURISTIC),
                              NeighborhoodOrder.TRANSPOSE_EXCHANGE_INSERT)
        return int((time.time() - start) * 1000 * multiplier)


__all__ = ["PFSPSolver"]
