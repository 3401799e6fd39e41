# src/pfsp_wt/algo_sa.py
from __future__ import annotations
import random, time
from typing import Any, Callable, Dict, List, Optional, Union

from .acceptance import AcceptanceCache
from .design import InitializationMethod, NeighborhoodMethod, SAParams
from .instance import Instance
from .local_search import LocalSearch
from .operators import Neighborhood
from .solution import QualityTrace, Solution


def _elapsed_ms(start: float) -> int:
    return int((time.time() - start) * 1000)


class SimulatedAnnealing:
    """Simulated Annealing over the insert neighborhood.

    The walk starts from a first-improvement local optimum (insert), samples
    one uniformly random insert move per iteration and accepts it with the
    Metropolis rule.  Every ``steps_per_temperature`` iterations the
    temperature is lowered to ``T / (1 + T / T0 * cooling_modifier)``.
    """

    def __init__(
        self,
        instance: Instance,
        init: Union[InitializationMethod, str] = InitializationMethod.SLACK_HEURISTIC,
        temperature: float = 150.0,
        steps_multiplier: float = 0.20,
        cooling_modifier: float = 1.45,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        logger: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> None:
        self.instance = instance
        self.init = InitializationMethod.parse(init)
        self.t = float(temperature)
        self.steps_multiplier = float(steps_multiplier)
        self.cooling_modifier = float(cooling_modifier)
        self.rng = rng if rng is not None else random.Random(seed)
        self.logger = logger
        self.local_search = LocalSearch(instance)

    @classmethod
    def from_params(cls, instance: Instance, params: SAParams, **kwargs: Any) -> "SimulatedAnnealing":
        return cls(instance, init=params.init, temperature=params.temperature,
                   steps_multiplier=params.steps_multiplier, cooling_modifier=params.cooling_modifier, **kwargs)

    def _log(self, event: str, **fields: Any) -> None:
        if self.logger:
            payload = {"event": event, **fields}
            self.logger(payload)

    def accept(self, current: Solution, proposed: Solution, cache: AcceptanceCache) -> Solution:
        """Metropolis rule: improving moves always, others with probability ``exp(-delta / T)``."""
        delta = proposed.weighted_tardiness - current.weighted_tardiness
        if delta < 0 or self.rng.random() <= cache.probability(delta):
            return proposed
        return current

    def steps_per_temperature(self, neighborhood_size: int) -> int:
        steps = int(round(neighborhood_size * self.instance.number_of_jobs * self.steps_multiplier))
        return max(1, steps)

    def run(self, max_runtime_ms: float) -> Solution:
        traces: List[QualityTrace] = []
        iteration = 1  # starts at 1 so the first cooling happens after a full level
        start = time.time()
        temperature = self.instance.reference_temperature(self.t)
        initial_temperature = temperature
        self._log("start", algorithm="sa", init=self.init.value, temperature=temperature,
                  max_runtime_ms=max_runtime_ms)

        start_order = self.instance.initial_solution(self.init, self.rng)
        current = self.local_search.first_improvement(self.instance.evaluate(start_order), NeighborhoodMethod.INSERT)
        best = current
        self._log("init_done", val=int(current.weighted_tardiness), elapsed_ms=_elapsed_ms(start))

        cache = AcceptanceCache(temperature)
        neigh = Neighborhood(current.jobs_order, NeighborhoodMethod.INSERT, rng=self.rng)
        steps = self.steps_per_temperature(neigh.count_possible_moves())

        if current.size < 2:
            self._log("end", best=int(best.weighted_tardiness), iterations=0, reason="no_moves")
            return best.with_run_info(0, _elapsed_ms(start), traces)

        while _elapsed_ms(start) < max_runtime_ms:
            order = neigh.sample_uniform()
            proposed = self.instance.evaluate(order, current.completion_times, neigh.last_changed_index)

            if proposed.weighted_tardiness < best.weighted_tardiness:
                best = proposed
                elapsed = _elapsed_ms(start)
                traces.append(QualityTrace(best.weighted_tardiness, iteration, elapsed))
                self._log("new_best", iter=iteration, best=int(best.weighted_tardiness), elapsed_ms=elapsed)

            accepted = self.accept(current, proposed, cache)
            if accepted is not current:
                current = accepted
                neigh.set_base(current.jobs_order)

            if iteration % steps == 0:
                temperature = temperature / (1 + temperature / initial_temperature * self.cooling_modifier)
                cache.set_temperature(temperature)
                self._log("cool", iter=iteration, temperature=temperature)

            iteration += 1

        runtime = _elapsed_ms(start)
        self._log("end", best=int(best.weighted_tardiness), iterations=iteration - 1, runtime_ms=runtime)
        return best.with_run_info(iteration - 1, runtime, traces)
