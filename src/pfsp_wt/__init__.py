"""Permutation Flow Shop heuristics for total weighted tardiness.

This package contains modules for reading PFSP instances, evaluating
completion times incrementally, enumerating transpose/exchange/insert
neighborhoods, running Iterative Improvement / VND local search and the
Simulated Annealing and Iterated Greedy metaheuristics.
"""

from .design import (
    DESIGNS,
    IGParams,
    InitializationMethod,
    NeighborhoodMethod,
    NeighborhoodOrder,
    Pivot,
    SAParams,
    describe_design,
    get_design,
)
from .exceptions import InvalidInstance, PFSPError, UnknownEnumValue, UnsupportedOperation
from .instance import Instance, read_instance, read_instances, load_best_known, attach_best_known
from .solution import QualityTrace, Solution
from .operators import ExchangeOperator, InsertOperator, Neighborhood, TransposeOperator
from .acceptance import AcceptanceCache
from .local_search import LocalSearch
from .algo_sa import SimulatedAnnealing
from .algo_ig import IteratedGreedy
from .solver import PFSPSolver
from .runner import run_benchmark, run_quality_traces
from .reporting import add_rpd_column, paired_comparison, summarise_by_instance, summarise_rpd

__all__ = [
    "DESIGNS",
    "IGParams",
    "InitializationMethod",
    "NeighborhoodMethod",
    "NeighborhoodOrder",
    "Pivot",
    "SAParams",
    "describe_design",
    "get_design",
    "InvalidInstance",
    "PFSPError",
    "UnknownEnumValue",
    "UnsupportedOperation",
    "Instance",
    "read_instance",
    "read_instances",
    "load_best_known",
    "attach_best_known",
    "QualityTrace",
    "Solution",
    "ExchangeOperator",
    "InsertOperator",
    "Neighborhood",
    "TransposeOperator",
    "AcceptanceCache",
    "LocalSearch",
    "SimulatedAnnealing",
    "IteratedGreedy",
    "PFSPSolver",
    "run_benchmark",
    "run_quality_traces",
    "add_rpd_column",
    "paired_comparison",
    "summarise_by_instance",
    "summarise_rpd",
]
