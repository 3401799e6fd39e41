# src/pfsp_wt/instance.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union
import math
import os
import random
import numpy as np
import pandas as pd

from .design import InitializationMethod
from .exceptions import InvalidInstance, UnknownEnumValue
from .solution import Solution

# Column 0 of a completion-time matrix holds the job id of that position.
IDX_JOB_ID = 0


@dataclass(frozen=True, eq=False)
class Instance:
    """Weighted-tardiness PFSP instance.

    All arrays are 1-based: row/column 0 of ``processing_times`` and index 0 of
    ``due_dates``/``priorities`` are zero sentinels, so job ``j`` on machine
    ``k`` is ``processing_times[j, k]``.  The arrays are read-only once the
    instance is built.
    """
    name: str
    processing_times: np.ndarray  # shape: (jobs + 1, machines + 1)
    due_dates: np.ndarray         # shape: (jobs + 1,)
    priorities: np.ndarray        # shape: (jobs + 1,)
    best_tardiness: Optional[int] = None
    _rows: List[List[int]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        p = np.ascontiguousarray(self.processing_times, dtype=np.int64)
        due = np.ascontiguousarray(self.due_dates, dtype=np.int64)
        prio = np.ascontiguousarray(self.priorities, dtype=np.int64)
        if p.ndim != 2 or p.shape[0] < 2 or p.shape[1] < 2:
            raise InvalidInstance(f"Instance '{self.name}' needs at least one job and one machine, got shape {p.shape}")
        if due.shape != (p.shape[0],) or prio.shape != (p.shape[0],):
            raise InvalidInstance(
                f"Instance '{self.name}': due dates {due.shape} and priorities {prio.shape} "
                f"must have {p.shape[0]} entries (jobs + sentinel)"
            )
        if (p[1:, 1:] < 0).any():
            raise InvalidInstance(f"Instance '{self.name}' has negative processing times")
        for arr in (p, due, prio):
            arr.setflags(write=False)
        object.__setattr__(self, "processing_times", p)
        object.__setattr__(self, "due_dates", due)
        object.__setattr__(self, "priorities", prio)
        # plain-int rows keep the recurrence loop free of numpy scalar overhead
        object.__setattr__(self, "_rows", p.tolist())

    @classmethod
    def from_lists(
        cls,
        processing_times: Sequence[Sequence[int]],
        due_dates: Sequence[int],
        priorities: Sequence[int],
        name: str = "",
    ) -> "Instance":
        """Build from 0-based per-job lists (``processing_times[job][machine]``)."""
        n = len(processing_times)
        if n == 0:
            raise InvalidInstance("An instance needs at least one job")
        m = len(processing_times[0])
        if any(len(row) != m for row in processing_times):
            raise InvalidInstance("Every job needs one processing time per machine")
        if len(due_dates) != n or len(priorities) != n:
            raise InvalidInstance(f"Expected {n} due dates and priorities, got {len(due_dates)} and {len(priorities)}")
        p = np.zeros((n + 1, m + 1), dtype=np.int64)
        p[1:, 1:] = np.asarray(processing_times, dtype=np.int64).reshape(n, m)
        due = np.zeros(n + 1, dtype=np.int64)
        due[1:] = due_dates
        prio = np.zeros(n + 1, dtype=np.int64)
        prio[1:] = priorities
        return cls(name=name, processing_times=p, due_dates=due, priorities=prio)

    @property
    def number_of_jobs(self) -> int: return self.processing_times.shape[0] - 1
    @property
    def number_of_machines(self) -> int: return self.processing_times.shape[1] - 1

    # ---------- Temperature for the SA-like acceptance criteria ----------
    def reference_temperature(self, t: float) -> float:
        """``t * sum(p) / (N * M * 10)`` (Ruiz & Stützle style base temperature)."""
        total = int(self.processing_times[1:, 1:].sum())
        temperature = t * total / (self.number_of_jobs * self.number_of_machines * 10)
        if temperature == 0 or not math.isfinite(temperature):
            raise InvalidInstance(f"Temperature for '{self.name}' with t={t} is {temperature}; it must be non-zero")
        return float(temperature)

    # ---------- Initial solutions ----------
    def initial_solution(
        self,
        method: Union[InitializationMethod, str],
        rng: Optional[random.Random] = None,
    ) -> List[int]:
        method = InitializationMethod.parse(method)
        if method is InitializationMethod.RANDOM_PERMUTATION:
            return self.random_solution(rng)
        if method is InitializationMethod.SLACK_HEURISTIC:
            return self.slack_solution()
        raise UnknownEnumValue(f"Unhandled InitializationMethod: {method}")

    def random_solution(self, rng: Optional[random.Random] = None) -> List[int]:
        rng = rng if rng is not None else random.Random()
        order = list(range(1, self.number_of_jobs + 1))
        rng.shuffle(order)
        return order

    def slack_solution(self) -> List[int]:
        """Append, one at a time, the job minimising ``w_j * (d_j - C_last)``.

        ``C_last`` is the makespan of the partial order with the candidate
        appended; only that new row is computed.  The comparison is strict, so
        ties go to the job listed first among the remaining ones.
        """
        m = self.number_of_machines
        order: List[int] = []
        last_row: Optional[List[int]] = None
        remaining = list(range(1, self.number_of_jobs + 1))
        while remaining:
            best_idx = -1
            best_row: Optional[List[int]] = None
            best_val: Optional[int] = None
            for idx, job in enumerate(remaining):
                row = self._completion_row(job, last_row)
                val = int(self.priorities[job]) * (int(self.due_dates[job]) - row[m])
                if best_val is None or val < best_val:
                    best_idx, best_row, best_val = idx, row, val
            order.append(remaining.pop(best_idx))
            last_row = best_row
        return order

    # ---------- Completion times ----------
    def _completion_row(self, job: int, previous_row: Optional[Sequence[int]]) -> List[int]:
        """Completion times of ``job`` on machines 1..M (index 0 = job id)."""
        p = self._rows[job]
        row = [job]
        end = 0
        if previous_row is None:
            for k in range(1, len(p)):
                end += p[k]
                row.append(end)
        else:
            for k in range(1, len(p)):
                b = previous_row[k]
                end = (end if end > b else b) + p[k]
                row.append(end)
        return row

    def full_completion_times(self, jobs_order: Sequence[int]) -> np.ndarray:
        empty = np.zeros((0, self.number_of_machines + 1), dtype=np.int64)
        return self.incremental_completion_times(jobs_order, empty, 0)

    def incremental_completion_times(
        self,
        jobs_order: Sequence[int],
        previous: np.ndarray,
        from_index: int,
    ) -> np.ndarray:
        """Recompute only rows ``[from_index, len(jobs_order))``.

        Rows before ``from_index`` are copied from ``previous``; the caller
        guarantees ``jobs_order`` matches the order behind ``previous`` on that
        prefix.  ``previous`` is left untouched.
        """
        n = len(jobs_order)
        C = np.zeros((n, self.number_of_machines + 1), dtype=np.int64)
        start = max(0, min(int(from_index), n, previous.shape[0]))
        if start:
            C[:start] = previous[:start]
        prev_row: Optional[List[int]] = C[start - 1].tolist() if start else None
        for i in range(start, n):
            prev_row = self._completion_row(int(jobs_order[i]), prev_row)
            C[i] = prev_row
        return C

    def weighted_tardiness(self, completion_times: np.ndarray) -> int:
        if completion_times.shape[0] == 0:
            return 0
        jobs = completion_times[:, IDX_JOB_ID]
        lateness = completion_times[:, self.number_of_machines] - self.due_dates[jobs]
        return int((np.maximum(lateness, 0) * self.priorities[jobs]).sum())

    def evaluate(
        self,
        jobs_order: Sequence[int],
        previous: Optional[np.ndarray] = None,
        from_index: int = 0,
    ) -> Solution:
        if previous is None:
            C = self.full_completion_times(jobs_order)
        else:
            C = self.incremental_completion_times(jobs_order, previous, from_index)
        return Solution.build(jobs_order, C, self.weighted_tardiness(C))


# ---------- Loading ----------
def read_instance(path: Union[str, Path]) -> Instance:
    """Read the text format: ``N M``, N rows of ``machine p`` pairs, ``Reldue``,
    then N rows of ``-1 due -1 weight``."""
    with open(path, "r") as f:
        tokens = f.read().split()
    name = os.path.basename(str(path))
    try:
        n, m = int(tokens[0]), int(tokens[1])
        if n < 1 or m < 1:
            raise InvalidInstance(f"Instance '{name}' declares {n} jobs and {m} machines")
        pos = 2
        p = np.zeros((n + 1, m + 1), dtype=np.int64)
        for j in range(1, n + 1):
            for k in range(1, m + 1):
                p[j, k] = int(tokens[pos + 1])  # tokens[pos] is the machine number
                pos += 2
        if tokens[pos].lstrip("-").isdigit():
            raise InvalidInstance(f"Instance '{name}': expected the 'Reldue' marker, got '{tokens[pos]}'")
        pos += 1
        due = np.zeros(n + 1, dtype=np.int64)
        prio = np.zeros(n + 1, dtype=np.int64)
        for j in range(1, n + 1):
            due[j] = int(tokens[pos + 1])
            prio[j] = int(tokens[pos + 3])
            pos += 4
    except InvalidInstance:
        raise
    except (IndexError, ValueError) as exc:
        raise InvalidInstance(f"Malformed instance file '{path}': {exc}") from exc
    return Instance(name=name, processing_times=p, due_dates=due, priorities=prio)

def read_instances(directory: Union[str, Path], pattern: str = "*", verbose: bool = False) -> Dict[str, Instance]:
    out: Dict[str, Instance] = {}
    files = sorted(p for p in Path(directory).glob(pattern) if p.is_file())
    for idx, path in enumerate(files, start=1):
        if verbose:
            print(f"[read] {idx}/{len(files)} {path.name}")
        inst = read_instance(path)
        out[inst.name] = inst
    return out

def load_best_known(csv_path: str) -> Dict[str, int]:
    df = pd.read_csv(csv_path)
    if not {"instance", "best_tardiness"} <= set(df.columns):
        raise ValueError("best_known.csv must have columns: instance,best_tardiness")
    return (
        df[["instance", "best_tardiness"]]
        .dropna()
        .set_index("instance")["best_tardiness"]
        .astype(int)
        .to_dict()
    )

def attach_best_known(instances: Mapping[str, Instance], best_known: Mapping[str, int]) -> Dict[str, Instance]:
    """Return a copy of ``instances`` with ``best_tardiness`` filled in where known."""
    return {
        name: replace(inst, best_tardiness=int(best_known[name])) if name in best_known else inst
        for name, inst in instances.items()
    }
