"""
Decimal helpers for yield reporting.

Prices arrive from the exchange as decimal strings and yields are
compounded in ``Decimal`` so that exactly neutral cycles stay exactly
neutral. Rounding here is for reporting only.
"""

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Final

from arbscan.config.constants import OUTPUT_PRECISION, PERCENTAGE_PRECISION


PERCENTAGE_QUANTUM: Final[Decimal] = Decimal(1).scaleb(-PERCENTAGE_PRECISION)
OUTPUT_QUANTUM: Final[Decimal] = Decimal(1).scaleb(-OUTPUT_PRECISION)


def parse_decimal(value: str | int | float | Decimal) -> Decimal | None:
    """
    Parse an exchange number into a Decimal.

    Floats go through ``str`` so ``0.1`` stays ``0.1``. NaN and
    Infinity parse successfully; callers decide whether they are usable.

    Returns:
        Parsed value, or None if the input is not a number.

    Example:
        >>> parse_decimal("0.00050000")
        Decimal('0.00050000')
        >>> parse_decimal("n/a") is None
        True
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def _quantize(value: Decimal, quantum: Decimal, places: int) -> Decimal:
    """Quantize half-up with enough digits for the integer part of ``value``."""
    context = Context(prec=max(value.adjusted(), 0) + places + 2)
    return value.quantize(quantum, rounding=ROUND_HALF_UP, context=context)


def round_percentage(value: Decimal) -> Decimal:
    """
    Round a percentage to reporting precision.

    Example:
        >>> round_percentage(Decimal("4.00049"))
        Decimal('4.000')
    """
    return _quantize(value, PERCENTAGE_QUANTUM, PERCENTAGE_PRECISION)


def round_output(value: Decimal) -> Decimal:
    """
    Round a theoretical output multiplier to reporting precision.

    Example:
        >>> round_output(Decimal("1.0400004"))
        Decimal('1.040000')
    """
    return _quantize(value, OUTPUT_QUANTUM, OUTPUT_PRECISION)


def format_profit(percentage: Decimal) -> str:
    """
    Format profit percentage for display.

    Args:
        percentage: Profit as percentage.

    Returns:
        Signed string with reporting precision.
    """
    rounded = round_percentage(percentage)
    if rounded.is_zero():
        rounded = abs(rounded)
    sign = "+" if rounded >= 0 else ""
    return f"{sign}{rounded}%"
