import argparse
import logging
import sys
import time
from typing import Iterable, List, Optional

from .enumeration import GroupingMode
from .evaluator import DEFAULT_TARGET, SearchCancelled, calculate_solutions
from .operations import InvariantViolation

logger = logging.getLogger(__name__)


def parse_numbers(tokens: Iterable[str]) -> List[float]:
    """Convert tokens to floats; the first invalid token empties the whole input."""
    numbers = []
    for token in tokens:
        token = token.strip()
        if not token:
            continue
        try:
            numbers.append(float(token))
        except ValueError:
            logger.warning(f"Invalid number {token!r}, discarding input")
            return []
    return numbers


def format_elapsed(elapsed_ns: int) -> str:
    """Pick the coarsest unit that still shows a non-zero whole number."""
    if elapsed_ns // 1_000_000:
        return f"(milliseconds): {elapsed_ns // 1_000_000}"
    if elapsed_ns // 1_000:
        return f"(microseconds): {elapsed_ns // 1_000}"
    return f"(nanoseconds): {elapsed_ns}"


def format_summary(count: int, elapsed_ns: int) -> str:
    if count == 0:
        found = "No solution"
    else:
        found = f"{count} solution{'s' if count > 1 else ''}"
    return f"-=- {found}, time taken {format_elapsed(elapsed_ns)} -=-"


class Solution:
    def __init__(self, numbers, target=DEFAULT_TARGET, mode=GroupingMode.CLAMPED, workers=1, max_generated=None):
        self.numbers = numbers
        self.target = float(target)
        self.mode = GroupingMode(mode)
        self.workers = workers
        self.max_generated = max_generated
        self.solutions = []
        self.elapsed_ns = 0

    def get_all_solutions(self):
        return self.solutions

    def get_max_generated(self):
        return self.max_generated

    def set_max_generated(self, max_generated):
        self.max_generated = max_generated

    def find_all_solutions(self, cancel_event=None):
        start = time.perf_counter_ns()
        self.solutions = calculate_solutions(
            self.target,
            [float(n) for n in self.numbers],
            mode=self.mode,
            workers=self.workers,
            cancel_event=cancel_event,
            max_solutions=self.max_generated,
        )
        self.elapsed_ns = time.perf_counter_ns() - start
        return self.solutions

    def print_solutions(self, file=None):
        file = file or sys.stdout
        for sol in self.solutions:
            print(sol.format(), file=file)
            print("======", file=file)

    def summary(self):
        return format_summary(len(self.solutions), self.elapsed_ns)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="n-game", description="Solve the 24 game for any target and any amount of numbers.")
    parser.add_argument("numbers", nargs="*", help="The numbers to combine.")
    parser.add_argument("--numbers", dest="number_list", type=str, help="Comma separated numbers, as an alternative to positional ones.")
    parser.add_argument("--target", type=float, default=DEFAULT_TARGET, help="The target value.")
    parser.add_argument("--mode", choices=[m.value for m in GroupingMode], default=GroupingMode.CLAMPED.value,
                        help="Reduction order scheme: clamped permutations or distinct binary trees.")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes for the search.")
    parser.add_argument("--max-solutions", type=int, default=None, help="Stop after this many solutions.")
    parser.add_argument("--show-traces", action="store_true", help="Print the derivation of every solution.")
    parser.add_argument("--log-level", type=str.upper, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    tokens = list(args.numbers)
    if args.number_list:
        tokens.extend(args.number_list.split(","))
    if not tokens:
        print(f"{parser.prog} -=- requires at least one number to work with!")
        return 1

    solution = Solution(parse_numbers(tokens), args.target, args.mode, args.workers, args.max_solutions)
    try:
        solution.find_all_solutions()
    except InvariantViolation as e:
        logger.error(f"Aborting search: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 2
    except (SearchCancelled, KeyboardInterrupt):
        print("-=- search cancelled -=-", file=sys.stderr)
        return 130

    if args.show_traces:
        solution.print_solutions()
    print(solution.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
