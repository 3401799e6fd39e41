# src/pfsp_wt/algo_ig.py
from __future__ import annotations
import random, time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .acceptance import AcceptanceCache
from .design import IGParams, InitializationMethod, NeighborhoodMethod
from .instance import Instance
from .local_search import LocalSearch
from .solution import QualityTrace, Solution


def _elapsed_ms(start: float) -> int:
    return int((time.time() - start) * 1000)


# ---- Greedy best insertion (ties -> earliest position) ----
def insert_job_optimally(instance: Instance, solution: Solution, job: int) -> Solution:
    """Try ``job`` at every position 0..len and keep the lowest weighted tardiness.

    Each trial only recomputes completion times from the insertion position on.
    """
    order = list(solution.jobs_order)
    best = instance.evaluate([job] + order, solution.completion_times, 0)
    for pos in range(1, len(order) + 1):
        order.insert(pos, job)
        cand = instance.evaluate(order, solution.completion_times, pos)
        if cand.weighted_tardiness < best.weighted_tardiness:
            best = cand
        order.pop(pos)
    return best


class IteratedGreedy:
    """Iterated Greedy with a constant-temperature acceptance criterion.

    Notation of Ruiz & Stützle: ``current`` is pi, ``best`` is pi_b, the
    reconstructed order is pi' and its local optimum pi''.
    """

    def __init__(
        self,
        instance: Instance,
        d: int = 4,
        temperature: float = 0.4,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        logger: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> None:
        if int(d) < 1:
            raise ValueError(f"Destruction size d must be at least 1, got {d}")
        self.instance = instance
        self.d = min(int(d), instance.number_of_jobs)
        self.t = float(temperature)
        self.rng = rng if rng is not None else random.Random(seed)
        self.logger = logger
        self.local_search = LocalSearch(instance)

    @classmethod
    def from_params(cls, instance: Instance, params: IGParams, **kwargs: Any) -> "IteratedGreedy":
        return cls(instance, d=params.d, temperature=params.temperature, **kwargs)

    def _log(self, event: str, **fields: Any) -> None:
        if self.logger:
            payload = {"event": event, **fields}
            self.logger(payload)

    def destroy(self, jobs_order: Sequence[int]) -> Tuple[List[int], List[int]]:
        """Remove ``d`` jobs at random positions; returns (partial order, removed jobs in removal order)."""
        partial = list(jobs_order)
        removed: List[int] = []
        for _ in range(self.d):
            removed.append(partial.pop(self.rng.randrange(len(partial))))
        return partial, removed

    def reconstruct(self, partial: Sequence[int], removed: Sequence[int]) -> Solution:
        solution = self.instance.evaluate(partial)
        for job in removed:
            solution = insert_job_optimally(self.instance, solution, int(job))
        return solution

    def perturb(self, current: Solution) -> Solution:
        """Destroy, greedily reconstruct, then descend with first-improvement insert."""
        partial, removed = self.destroy(current.jobs_order)
        reconstructed = self.reconstruct(partial, removed)
        return self.local_search.first_improvement(reconstructed, NeighborhoodMethod.INSERT)

    def accept(self, current: Solution, candidate: Solution, cache: AcceptanceCache) -> Solution:
        """Strictly better candidates always win; others need ``rng.random() <= exp(-delta / T)``."""
        if candidate.weighted_tardiness < current.weighted_tardiness:
            return candidate
        if self.rng.random() <= cache.probability(candidate.weighted_tardiness - current.weighted_tardiness):
            return candidate
        return current

    def run(self, max_runtime_ms: float) -> Solution:
        traces: List[QualityTrace] = []
        iteration = 0
        start = time.time()
        temperature = self.instance.reference_temperature(self.t)
        self._log("start", algorithm="ig", d=self.d, temperature=temperature, max_runtime_ms=max_runtime_ms)

        start_order = self.instance.initial_solution(InitializationMethod.SLACK_HEURISTIC)
        current = self.local_search.first_improvement(self.instance.evaluate(start_order), NeighborhoodMethod.INSERT)
        best = current
        self._log("init_done", val=int(current.weighted_tardiness), elapsed_ms=_elapsed_ms(start))

        cache = AcceptanceCache(temperature)
        while _elapsed_ms(start) < max_runtime_ms:
            current = self.accept(current, self.perturb(current), cache)
            if current.weighted_tardiness < best.weighted_tardiness:
                best = current
                elapsed = _elapsed_ms(start)
                traces.append(QualityTrace(best.weighted_tardiness, iteration, elapsed))
                self._log("new_best", iter=iteration, best=int(best.weighted_tardiness), elapsed_ms=elapsed)
            iteration += 1

        runtime = _elapsed_ms(start)
        self._log("end", best=int(best.weighted_tardiness), iterations=iteration, runtime_ms=runtime)
        return best.with_run_info(iteration, runtime, traces)
