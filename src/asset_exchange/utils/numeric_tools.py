from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from typing import TypeAlias

# Numeric representations a Quantity / Rate may carry
Numeric: TypeAlias = int | float | Decimal | Fraction

# Use where optimal type is `Decimal`, but other types are also acceptable (and will be converted to `Decimal`)
DecimalLike: TypeAlias = Decimal | int | str | float | Fraction


def as_decimal(value: DecimalLike) -> Decimal:
    """Converts input to `Decimal` safely.

    Ensures floats are converted via string to avoid precision noise. Fractions are
    divided out in the current decimal context.

    Args:
        value: Input value as `DecimalLike`.

    Returns:
        Value converted to `Decimal`.
    """
    if isinstance(value, Decimal):
        return value

    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)

    return Decimal(str(value))


def is_numeric(value: object) -> bool:
    """Return True if $value is one of the supported `Numeric` representations (bool excluded)."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float, Decimal, Fraction))


def is_positive(value: Numeric) -> bool:
    """Return True if $value is strictly greater than zero.

    NaN is never positive. Decimal NaN is checked explicitly because ordering
    comparisons on it raise `InvalidOperation`.
    """
    if isinstance(value, Decimal) and value.is_nan():
        return False
    return value > 0


def coerce_operands(left: Numeric, right: Numeric) -> tuple[Numeric, Numeric]:
    """Make two numeric values of different representations combinable.

    Python refuses `Decimal` arithmetic with `float` and `Fraction`. In these two cases the
    non-Decimal side is converted with `as_decimal`, so Decimal wins. All other combinations
    (int with anything, float with Fraction, same types) are returned untouched.

    Args:
        left: Left operand.
        right: Right operand.

    Returns:
        tuple[Numeric, Numeric]: Operands ready for arithmetic.
    """
    if isinstance(left, Decimal) and isinstance(right, (float, Fraction)):
        return left, as_decimal(right)
    if isinstance(right, Decimal) and isinstance(left, (float, Fraction)):
        return as_decimal(left), right
    return left, right


# Note: No 'as_float' or 'as_int' functions are provided.
# Use the Python builtin functions like `float()`, `int()`, `Fraction()` directly for conversion
