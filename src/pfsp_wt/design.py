# src/pfsp_wt/design.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Sequence, Tuple, Union

from .exceptions import UnknownEnumValue


class _KeyedEnum(Enum):
    """Enum that can be parsed from a member, its name or a short CLI key."""

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {}

    @classmethod
    def parse(cls, value: Union[str, "_KeyedEnum"]):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            name = cls._aliases().get(key, key.upper())
            if name in cls.__members__:
                return cls.__members__[name]
        choices = sorted(set(cls._aliases()) | {m.lower() for m in cls.__members__})
        raise UnknownEnumValue(f"Unknown {cls.__name__} '{value}'. Use one of: {', '.join(choices)}")


class Pivot(_KeyedEnum):
    FIRST_IMPROVEMENT = "first"
    BEST_IMPROVEMENT = "best"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {"first": "FIRST_IMPROVEMENT", "best": "BEST_IMPROVEMENT"}


class NeighborhoodMethod(_KeyedEnum):
    TRANSPOSE = "transpose"
    EXCHANGE = "exchange"
    INSERT = "insert"


class NeighborhoodOrder(_KeyedEnum):
    TRANSPOSE_EXCHANGE_INSERT = "tei"
    TRANSPOSE_INSERT_EXCHANGE = "tie"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {"tei": "TRANSPOSE_EXCHANGE_INSERT", "tie": "TRANSPOSE_INSERT_EXCHANGE"}

    @property
    def methods(self) -> Tuple[NeighborhoodMethod, ...]:
        if self is NeighborhoodOrder.TRANSPOSE_EXCHANGE_INSERT:
            return (NeighborhoodMethod.TRANSPOSE, NeighborhoodMethod.EXCHANGE, NeighborhoodMethod.INSERT)
        if self is NeighborhoodOrder.TRANSPOSE_INSERT_EXCHANGE:
            return (NeighborhoodMethod.TRANSPOSE, NeighborhoodMethod.INSERT, NeighborhoodMethod.EXCHANGE)
        raise UnknownEnumValue(f"Unhandled NeighborhoodOrder: {self}")


class InitializationMethod(_KeyedEnum):
    RANDOM_PERMUTATION = "random"
    SLACK_HEURISTIC = "slack"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {"random": "RANDOM_PERMUTATION", "slack": "SLACK_HEURISTIC"}


# ---------- Run parameters (defaults of the tuned benchmark configuration) ----------
@dataclass(frozen=True)
class SAParams:
    init: InitializationMethod = InitializationMethod.SLACK_HEURISTIC
    temperature: float = 150.0
    steps_multiplier: float = 0.20
    cooling_modifier: float = 1.45


@dataclass(frozen=True)
class IGParams:
    d: int = 4
    temperature: float = 0.4


@dataclass(frozen=True)
class AlgorithmDesign:
    key: str
    identifier: str
    objective: str
    neighborhood: str
    acceptance: str
    parameters: Mapping[str, str] = field(default_factory=dict)
    notes: Sequence[str] = field(default_factory=tuple)

DESIGNS: Mapping[str, AlgorithmDesign] = {
    "sa": AlgorithmDesign(
        key="sa",
        identifier="Simulated Annealing",
        objective="Random-walk over the insert neighborhood with Metropolis acceptance and a slowly decreasing temperature.",
        neighborhood="insert (uniformly sampled moves)",
        acceptance="Improving moves always; worsening moves with probability exp(-delta/T).",
        parameters={
            "init":             "Initial order: random permutation or slack heuristic.",
            "temperature":      "Multiplier t of the instance reference temperature.",
            "steps_multiplier": "Search steps per temperature = |insert| * N * multiplier.",
            "cooling_modifier": "T <- T / (1 + T / T0 * modifier) after each temperature level.",
        },
        notes=("Starts from first-improvement II (insert); returns the best order ever seen.",),
    ),
    "ig": AlgorithmDesign(
        key="ig",
        identifier="Iterated Greedy",
        objective="Destroy d random jobs, greedily reinsert each at its best position, then first-improvement II.",
        neighborhood="insert (full first-improvement descent after reconstruction)",
        acceptance="Better than current always; otherwise probability exp(-delta/T) at a fixed temperature.",
        parameters={
            "d":           "Number of jobs removed by the destruction step.",
            "temperature": "Multiplier t of the instance reference temperature (constant).",
        },
        notes=("Always initialised with the slack heuristic followed by first-improvement II (insert).",),
    ),
}

def get_design(key: str) -> AlgorithmDesign:
    k = key.lower()
    if k not in DESIGNS:
        raise UnknownEnumValue(f"Unknown algorithm '{key}'. Available: {', '.join(sorted(DESIGNS))}")
    return DESIGNS[k]

def describe_design(key: str) -> str:
    d = get_design(key)
    lines = [f"{d.identifier} ({d.key})", d.objective, f"Neighborhood: {d.neighborhood}", f"Acceptance: {d.acceptance}"]
    if d.parameters:
        lines.append("Parameters:")
        for k, v in d.parameters.items():
            lines.append(f"  - {k}: {v}")
    if d.notes:
        lines.append("Notes:")
        for t in d.notes:
            lines.append(f"  - {t}")
    return "\n".join(lines)
