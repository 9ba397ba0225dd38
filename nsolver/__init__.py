"""
Brute-force solver for the 24 game, extended to any target and any number of inputs.

Every ordering of the inputs is combined with every assignment of +, -, *, /
and every reduction order; expressions that evaluate exactly to the target
are returned as derivation traces.
"""

from .operations import Operation, InvariantViolation
from .enumeration import (
    GroupingMode,
    operator_assignments,
    grouping_orders,
    tree_orders,
    input_permutations,
)
from .evaluator import (
    DEFAULT_TARGET,
    ReductionStep,
    SolutionRecord,
    SearchCancelled,
    calculate_solutions,
    reduce_expression,
)

__all__ = [
    "__version__",
    "Operation",
    "InvariantViolation",
    "GroupingMode",
    "operator_assignments",
    "grouping_orders",
    "tree_orders",
    "input_permutations",
    "DEFAULT_TARGET",
    "ReductionStep",
    "SolutionRecord",
    "SearchCancelled",
    "calculate_solutions",
    "reduce_expression",
]

__version__ = "1.0.0"
