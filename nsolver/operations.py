import math
from enum import Enum


class InvariantViolation(RuntimeError):
    """Raised when the enumeration produces a value it never should."""


class Operation(Enum):
    """The four binary operators, in base-4 ordinal order."""
    ADDITION = 0
    SUBTRACTION = 1
    MULTIPLICATION = 2
    DIVISION = 3

    @classmethod
    def from_digit(cls, digit: int) -> "Operation":
        if digit < 0 or digit > len(cls) - 1:
            raise InvariantViolation(f"failed to convert digit {digit} to an operation (base {len(cls)})")
        return cls(digit)

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    def apply(self, left: float, right: float) -> float:
        if self is Operation.ADDITION:
            return left + right
        if self is Operation.SUBTRACTION:
            return left - right
        if self is Operation.MULTIPLICATION:
            return left * right
        return ieee_divide(left, right)


_SYMBOLS = {
    Operation.ADDITION: "+",
    Operation.SUBTRACTION: "-",
    Operation.MULTIPLICATION: "*",
    Operation.DIVISION: "/",
}


def ieee_divide(left: float, right: float) -> float:
    """Divide like IEEE-754 hardware does: x/0 is a signed infinity, 0/0 is nan."""
    if right != 0:
        return left / right
    if left == 0 or math.isnan(left):
        return math.nan
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


def format_number(value: float) -> str:
    """Render a float the way a default C++ stream would (6 significant digits)."""
    return f"{value:g}"
