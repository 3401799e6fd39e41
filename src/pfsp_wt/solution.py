"""Immutable solution values shared by every search component."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class QualityTrace:
    """Snapshot taken whenever the incumbent improves."""

    tardiness: int
    iteration: int
    elapsed_ms: int

    def as_row(self) -> dict:
        return {"tardiness": self.tardiness, "iteration": self.iteration, "elapsed_ms": self.elapsed_ms}


@dataclass(frozen=True)
class Solution:
    """A jobs order together with its completion times and objective value.

    Solutions are never modified after construction.  Search steps build a new
    value (see :meth:`build`) and run metadata is attached with
    :meth:`with_run_info`, so an accepted or best-so-far snapshot cannot be
    altered through another reference.
    """

    jobs_order: Tuple[int, ...]
    completion_times: np.ndarray = field(compare=False, repr=False)
    weighted_tardiness: int
    iterations: int = 0
    runtime_ms: int = 0
    quality_traces: Tuple[QualityTrace, ...] = ()

    @classmethod
    def build(cls, jobs_order: Sequence[int], completion_times: np.ndarray, weighted_tardiness: int) -> "Solution":
        matrix = np.asarray(completion_times, dtype=np.int64)
        matrix.setflags(write=False)
        return cls(jobs_order=tuple(int(j) for j in jobs_order), completion_times=matrix,
                   weighted_tardiness=int(weighted_tardiness))

    @property
    def size(self) -> int:
        return len(self.jobs_order)

    def with_run_info(self, iterations: int, runtime_ms: int, quality_traces: Iterable[QualityTrace] = ()) -> "Solution":
        return replace(self, iterations=int(iterations), runtime_ms=int(runtime_ms),
                       quality_traces=tuple(quality_traces))

    def __str__(self) -> str:
        return f"Total WT = {self.weighted_tardiness}"


__all__ = ["QualityTrace", "Solution"]
