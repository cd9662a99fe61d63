"""
Money helpers.

Amounts are stored as integer minor units (cents). Conversion to and from
major units (dollars) happens only at the input/output boundary.

Examples:
    >>> to_display(150000)
    '$1,500.00'

    >>> to_cents(Decimal("50.00"))
    5000
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENTS_PER_UNIT = Decimal(100)

# Largest amount the signed 32-bit amount column holds, $21,474,836.47
MAX_CENTS = 2**31 - 1

Number = Union[int, float, str, Decimal]


def to_display(cents: int) -> str:
    """Formats cents as US dollars with thousands separators and two decimals."""
    value = Decimal(int(cents)) / CENTS_PER_UNIT
    if value < 0:
        return f"-${-value:,.2f}"
    return f"${value:,.2f}"


def to_cents(amount: Number) -> int:
    """Major units to integer cents, rounding half up."""
    value = Decimal(str(amount)) * CENTS_PER_UNIT
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major(cents: int) -> Decimal:
    return Decimal(int(cents)) / CENTS_PER_UNIT
