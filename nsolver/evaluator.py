"""
Expression evaluator and solution collector.

Every (input permutation, operator assignment, reduction order) triple is
folded down to a single value. Triples whose value equals the target exactly
are returned as SolutionRecord objects in enumeration order.
"""

import logging
from collections import deque
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from itertools import islice
from typing import List, Optional, Sequence, Tuple

from .enumeration import GroupingMode, input_permutations, operator_assignments, reduction_orders
from .operations import Operation, format_number

logger = logging.getLogger(__name__)

DEFAULT_TARGET = 24.0


class SearchCancelled(RuntimeError):
    """Raised when the caller's cancel event is set mid-search."""


@dataclass(frozen=True)
class ReductionStep:
    left: float
    operation: Operation
    right: float
    position: int
    buffer: Tuple[float, ...]

    def format(self) -> str:
        values = "".join(f"{format_number(v)}, " for v in self.buffer)
        return f"{format_number(self.left)}{self.operation.symbol}{format_number(self.right)}: {values}"


@dataclass(frozen=True)
class SolutionRecord:
    permutation: Tuple[float, ...]
    operations: Tuple[Operation, ...] = ()
    order: Tuple[int, ...] = ()
    steps: Tuple[ReductionStep, ...] = field(default_factory=tuple)
    value: float = 0.0

    @property
    def expression(self) -> str:
        """Fully parenthesized infix form, rebuilt from the recorded steps."""
        terms = [format_number(v) for v in self.permutation]
        for step in self.steps:
            left, right = terms[step.position], terms[step.position + 1]
            terms[step.position] = f"({left} {step.operation.symbol} {right})"
            del terms[step.position + 1]
        if self.steps:
            # the last merge wraps the whole expression
            return terms[0][1:-1]
        return terms[0]

    def format(self) -> str:
        lines = ["".join(f"{format_number(v)}, " for v in self.permutation)]
        lines.extend(step.format() for step in self.steps)
        lines.append(f"result: {format_number(self.value)}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()


def resolve_position(nominal: int, offset: int, length: int) -> int:
    """Shift a nominal position left by ``offset`` and clamp it onto an adjacent pair."""
    position = nominal - offset
    if position < 0:
        position = 0
    if position > length - 2:
        position = length - 2
    return position


def reduce_expression(
    values: Sequence[float],
    operations: Sequence[Operation],
    order: Sequence[int],
    mode: GroupingMode = GroupingMode.CLAMPED,
) -> Tuple[float, Tuple[ReductionStep, ...]]:
    """Fold ``values`` into one number, returning it with the steps taken."""
    buffer = list(values)
    steps = []
    clamped = GroupingMode(mode) is GroupingMode.CLAMPED

    for i, operation in enumerate(operations):
        if clamped:
            position = resolve_position(order[i], i, len(buffer))
        else:
            position = order[i]
        left, right = buffer[position], buffer[position + 1]
        buffer[position] = operation.apply(left, right)
        del buffer[position + 1]
        steps.append(ReductionStep(left, operation, right, position, tuple(buffer)))

    return buffer[0], tuple(steps)


def solve_permutation(
    permutation: Tuple[float, ...],
    target: float,
    assignments: Sequence[Tuple[Operation, ...]],
    orders: Sequence[Tuple[int, ...]],
    mode: GroupingMode = GroupingMode.CLAMPED,
    limit: Optional[int] = None,
) -> List[SolutionRecord]:
    """Collect every solution reachable from one input ordering."""
    found: List[SolutionRecord] = []
    for operations in assignments:
        for order in orders:
            value, steps = reduce_expression(permutation, operations, order, mode)
            if value == target:
                record = SolutionRecord(permutation, operations, order, steps, value)
                logger.debug(f"Solution found:\n{record.format()}")
                found.append(record)
                if limit is not None and len(found) >= limit:
                    return found
    return found


def _solve_permutation_task(args):
    return solve_permutation(*args)


def calculate_solutions(
    target: float,
    numbers: Sequence[float],
    mode: GroupingMode = GroupingMode.CLAMPED,
    workers: int = 1,
    cancel_event=None,
    max_solutions: Optional[int] = None,
) -> List[SolutionRecord]:
    """
    Return every way ``numbers`` combine into ``target``.

    Args:
        target: Value the final expression must equal exactly
        numbers: Input multiset; order does not matter
        mode: Reduction order scheme, see GroupingMode
        workers: Processes to fan input permutations out to (1 = in-process)
        cancel_event: Object with ``is_set()``, polled once per permutation
        max_solutions: Stop after this many records (None = unlimited)

    Raises:
        SearchCancelled: If ``cancel_event`` is set before the search finishes
        InvariantViolation: If operator enumeration goes out of range
    """
    target = float(target)
    numbers = [float(n) for n in numbers]
    mode = GroupingMode(mode)

    if not numbers:
        return []
    if len(numbers) == 1:
        if numbers[0] == target:
            return [SolutionRecord((numbers[0],), value=numbers[0])]
        return []

    steps = len(numbers) - 1
    assignments = list(operator_assignments(steps))
    orders = reduction_orders(steps, mode)
    logger.info(
        f"Searching {len(numbers)} numbers for {format_number(target)}: "
        f"{len(assignments)} operator assignments x {len(orders)} {mode.value} orders per permutation"
    )

    if workers > 1:
        solutions = _calculate_parallel(target, numbers, assignments, orders, mode, workers, cancel_event, max_solutions)
    else:
        solutions = []
        for permutation in input_permutations(numbers):
            _check_cancelled(cancel_event)
            remaining = None if max_solutions is None else max_solutions - len(solutions)
            solutions.extend(solve_permutation(permutation, target, assignments, orders, mode, remaining))
            if max_solutions is not None and len(solutions) >= max_solutions:
                logger.info(f"Reached solution cap of {max_solutions}")
                break

    if max_solutions is not None:
        solutions = solutions[:max_solutions]
    logger.info(f"Found {len(solutions)} solution(s)")
    return solutions


def _calculate_parallel(target, numbers, assignments, orders, mode, workers, cancel_event, max_solutions) -> List[SolutionRecord]:
    _check_cancelled(cancel_event)
    solutions: List[SolutionRecord] = []
    permutations = input_permutations(numbers)
    pending = deque()
    with ProcessPoolExecutor(max_workers=workers) as executor:
        def submit(permutation):
            pending.append(executor.submit(
                _solve_permutation_task, (permutation, target, assignments, orders, mode, max_solutions)
            ))

        try:
            # at most workers * 2 permutations in flight
            for permutation in islice(permutations, workers * 2):
                submit(permutation)
            # futures are drained in submission order, so the merge is deterministic
            while pending:
                solutions.extend(pending.popleft().result())
                if max_solutions is not None and len(solutions) >= max_solutions:
                    logger.info(f"Reached solution cap of {max_solutions}")
                    break
                _check_cancelled(cancel_event)
                permutation = next(permutations, None)
                if permutation is not None:
                    submit(permutation)
        finally:
            for future in pending:
                future.cancel()
    return solutions


def _check_cancelled(cancel_event) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise SearchCancelled("search cancelled")
