"""Signed 64-bit range checks shared by both evaluators.

Every integer an evaluation produces (operands, intermediate results, final
values) must fit in [INT_MIN, INT_MAX]; anything outside raises
IntegerOverflowError instead of growing without limit.
"""

from __future__ import annotations

from stackcalc.errors import IntegerOverflowError

INT_BITS = 64
INT_MIN = -(2 ** (INT_BITS - 1))
INT_MAX = 2 ** (INT_BITS - 1) - 1

# Decimal digits needed for INT_MAX; longer digit runs are rejected before int().
MAX_DIGITS = len(str(INT_MAX))


def checked(value: int) -> int:
    """Return value, or raise IntegerOverflowError if it is outside 64 bits."""
    if value < INT_MIN or value > INT_MAX:
        raise IntegerOverflowError(f"Result does not fit in {INT_BITS} bits")
    return value


def checked_power(base: int, exponent: int) -> int:
    """base ** exponent for a non-negative exponent, bounded to 64 bits.

    Bases 0, 1 and -1 never grow, so any exponent is fine for them; every other
    base overflows long before the exponent reaches INT_BITS.
    """
    if base in (0, 1, -1):
        return base ** exponent
    if exponent >= INT_BITS:
        raise IntegerOverflowError(f"{base}^{exponent} does not fit in {INT_BITS} bits")
    return checked(base ** exponent)


def parse_digits(digits: str) -> int:
    """Convert a run of decimal digits, rejecting values beyond INT_MAX."""
    if len(digits.lstrip("0")) > MAX_DIGITS:
        raise IntegerOverflowError(f"Number {digits[:MAX_DIGITS]}... does not fit in {INT_BITS} bits")
    return checked(int(digits))
