import logging
from typing import List, Optional, Sequence

from nsolver import GroupingMode, InvariantViolation, SolutionRecord
from nsolver.solve_n import Solution, format_elapsed, parse_numbers

from ..config import settings
from ..schemas import ReductionStepModel, SolutionModel, SolveRequest, SolveResponse

logger = logging.getLogger(__name__)


class InputTooLongError(ValueError):
    """Raised when a web request carries more numbers than the service allows."""

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"Input sets greater than {max_length} are not supported by this service "
            f"(got {length}). The amount of solutions can reach into the hundreds, which produces "
            f"an enormous output set. To calculate large input sets, run the n-game command line tool."
        )


class SolverService:
    """Service running the brute-force solver on behalf of the HTTP layer."""

    def __init__(self, max_input_length: Optional[int] = None, workers: Optional[int] = None):
        self.max_input_length = settings.max_input_length if max_input_length is None else max_input_length
        self.workers = settings.max_workers if workers is None else workers

    def resolve_numbers(self, request: SolveRequest) -> List[float]:
        """
        Turn a request into the input multiset.

        Raises:
            InputTooLongError: If more numbers than max_input_length are supplied
        """
        if request.numbers is not None:
            numbers = list(request.numbers)
        else:
            tokens = [t for t in request.text.split(" ") if t != ""]
            # The cap applies to what the user typed, before any parsing
            self.check_length(len(tokens))
            numbers = parse_numbers(tokens)
        self.check_length(len(numbers))
        return numbers

    def check_length(self, length: int) -> None:
        if length > self.max_input_length:
            logger.info(f"Rejecting input of length {length} (cap {self.max_input_length})")
            raise InputTooLongError(length, self.max_input_length)

    def solve(self, request: SolveRequest) -> SolveResponse:
        """
        Solve a request.

        Returns:
            SolveResponse: count, timing and (optionally) the solution traces

        Raises:
            InputTooLongError: If the input exceeds the configured cap
            InvariantViolation: If the search aborts on an internal error
        """
        numbers = self.resolve_numbers(request)
        target = request.target if request.target is not None else settings.default_target
        mode = GroupingMode(request.mode or settings.default_mode)
        include_traces = settings.include_traces if request.include_traces is None else request.include_traces

        solver = Solution(numbers, target=target, mode=mode, workers=self.workers, max_generated=settings.solution_cap)
        try:
            solutions = solver.find_all_solutions()
        except InvariantViolation as e:
            logger.error(f"Solver aborted for numbers {numbers}: {e}")
            raise

        logger.info(f"Solved {numbers} for {target}: {len(solutions)} solution(s) in {format_elapsed(solver.elapsed_ns)}")

        return SolveResponse(
            numbers=numbers,
            target=target,
            mode=mode.value,
            count=len(solutions),
            elapsed_ms=solver.elapsed_ns / 1_000_000,
            elapsed_display=format_elapsed(solver.elapsed_ns),
            solutions=self.to_models(solutions, include_traces),
        )

    def to_models(self, solutions: Sequence[SolutionRecord], include_traces: bool = True) -> List[SolutionModel]:
        models = []
        for record in solutions:
            models.append(SolutionModel(
                permutation=list(record.permutation),
                operators=[op.symbol for op in record.operations],
                order=list(record.order),
                expression=record.expression,
                steps=[
                    ReductionStepModel(
                        left=step.left,
                        operator=step.operation.symbol,
                        right=step.right,
                        position=step.position,
                        buffer=list(step.buffer),
                        text=step.format(),
                    )
                    for step in record.steps
                ] if include_traces else [],
                trace=record.format() if include_traces else None,
            ))
        return models


# Global service instance
solver_service = SolverService()
