"""
Module: lp_kernel.db.types
Responsibility: Precision constants and utility functions for LP token
    amounts.  Centralizes precision, rounding, and formatting so that
    every model, domain function, and service uses identical definitions.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - Fixed-point contract: LP token amounts carry exactly AMOUNT_SCALE (8)
      fractional digits.  round_amount() is the ONLY sanctioned rounding
      function and format_amount() the ONLY sanctioned string rendering.
    - No floats anywhere.  Amounts are Decimal from ingestion to emission;
      float inputs are rejected by to_amount().

Failure modes:
    - InvalidAmountError from to_amount() on floats, non-numeric strings,
      NaN or infinity.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from lp_kernel.exceptions import InvalidAmountError

# 18 digits total, 8 fractional digits (matches the on-chain LP token scale)
AMOUNT_PRECISION = 18
AMOUNT_SCALE = 8

DEFAULT_ROUNDING = ROUND_HALF_UP
ZERO = Decimal("0")

_QUANTUM = Decimal(1).scaleb(-AMOUNT_SCALE)


def round_amount(value: Decimal, rounding: str = DEFAULT_ROUNDING) -> Decimal:
    """
    Quantize an amount to the 8-fractional-digit storage scale.

    Postconditions: Returns a Decimal with exponent -8.
    """
    return value.quantize(_QUANTUM, rounding=rounding)


def format_amount(value: Decimal) -> str:
    """
    Render an amount as a fixed-point string with exactly 8 fractional digits.

    Example:
        format_amount(Decimal("125")) -> "125.00000000"
    """
    return format(round_amount(value), "f")


def to_amount(value) -> Decimal:
    """
    Coerce an int, str or Decimal into a finite Decimal amount.

    Floats are rejected: binary floating point cannot represent most
    8-digit fractions exactly.

    Raises:
        InvalidAmountError: If value is a float, bool, or not a finite number.
    """
    if isinstance(value, (float, bool)):
        raise InvalidAmountError(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(value) from None
    if not amount.is_finite():
        raise InvalidAmountError(value)
    return amount
