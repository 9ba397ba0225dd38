"""
Enumeration of the three search axes: operator assignments, grouping orders
and input permutations.

All generators are lazy. Operator assignments and grouping orders depend only
on the number of reduction steps, so callers materialize them once per input
size and reuse them for every input permutation.
"""

import logging
from enum import Enum
from typing import Iterator, List, Sequence, Tuple

from .operations import Operation

logger = logging.getLogger(__name__)

OPERATION_COUNT = len(Operation)


class GroupingMode(str, Enum):
    """How reduction positions are generated and interpreted."""
    # (N-1)! permutations read relative to a shrinking buffer, clamped into range
    CLAMPED = "clamped"
    # Catalan(N-1) distinct binary trees as absolute post-order positions
    TREE = "tree"


def next_permutation(items: List) -> bool:
    """
    Rearrange ``items`` in place into the lexicographically next permutation.

    Returns False (leaving ``items`` sorted ascending) when ``items`` was
    already the last permutation. Equal neighbours are never swapped, which is
    what makes multisets produce each distinct ordering once.
    """
    i = len(items) - 2
    while i >= 0 and not items[i] < items[i + 1]:
        i -= 1
    if i < 0:
        items.reverse()
        return False

    j = len(items) - 1
    while not items[i] < items[j]:
        j -= 1
    items[i], items[j] = items[j], items[i]
    items[i + 1:] = reversed(items[i + 1:])
    return True


def operator_assignments(steps: int) -> Iterator[Tuple[Operation, ...]]:
    """Yield all 4**steps operator assignments, counting in base 4, low digit first."""
    for i in range(OPERATION_COUNT ** steps):
        digits = [Operation.ADDITION] * steps
        remainder = i
        j = 0
        while remainder != 0:
            digits[j] = Operation.from_digit(remainder % OPERATION_COUNT)
            remainder //= OPERATION_COUNT
            j += 1
        yield tuple(digits)


def grouping_orders(steps: int) -> Iterator[Tuple[int, ...]]:
    """Yield every permutation of range(steps) in lexicographic order."""
    order = list(range(steps))
    while True:
        yield tuple(order)
        if not next_permutation(order):
            return


def tree_orders(steps: int) -> Iterator[Tuple[int, ...]]:
    """
    Yield every binary tree over ``steps + 1`` ordered leaves.

    Each tree is encoded as the post-order sequence of absolute buffer
    positions at which adjacent values are merged, so the same fold that
    drives the clamped scheme can evaluate it.
    """
    yield from _tree_positions(steps + 1, 0)


def _tree_positions(leaves: int, base: int) -> Iterator[Tuple[int, ...]]:
    if leaves <= 1:
        yield ()
        return
    for left_leaves in range(1, leaves):
        for left in _tree_positions(left_leaves, base):
            # the left subtree has collapsed into buffer[base]
            for right in _tree_positions(leaves - left_leaves, base + 1):
                yield left + right + (base,)


def reduction_orders(steps: int, mode: GroupingMode = GroupingMode.CLAMPED) -> List[Tuple[int, ...]]:
    if GroupingMode(mode) is GroupingMode.TREE:
        orders = list(tree_orders(steps))
    else:
        orders = list(grouping_orders(steps))
    logger.debug(f"Generated {len(orders)} {GroupingMode(mode).value} reduction orders for {steps} steps")
    return orders


def input_permutations(numbers: Sequence[float]) -> Iterator[Tuple[float, ...]]:
    """Yield each distinct ordering of ``numbers``, starting from ascending order."""
    current = sorted(numbers)
    while True:
        yield tuple(current)
        if not next_permutation(current):
            return
