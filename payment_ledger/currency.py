"""
Fixed-Point Amount Module

Every balance and operation amount is a Decimal quantized to four
fractional digits. NEVER uses float for monetary values.
"""

from decimal import (
    Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow,
    ROUND_HALF_UP, getcontext, localcontext
)
from typing import Union

# Set global decimal context for financial precision
getcontext().prec = 28

AMOUNT_PRECISION = 4
AMOUNT_QUANTUM = Decimal('0.1') ** AMOUNT_PRECISION
ZERO = Decimal('0').quantize(AMOUNT_QUANTUM)

# Largest amount a single operation may carry
MAX_AMOUNT = Decimal('1000000000000000')

# Digits available to balance arithmetic, far beyond any reachable sum of
# bounded amounts
BALANCE_PRECISION = 60

AmountLike = Union[Decimal, str, int]


def balance_context():
    """
    Context for balance arithmetic: any rounding raises instead of
    silently changing a balance
    """
    return localcontext(Context(
        prec=BALANCE_PRECISION,
        rounding=ROUND_HALF_UP,
        traps=[InvalidOperation, Inexact, Overflow, DivisionByZero]
    ))


def to_amount(value: AmountLike) -> Decimal:
    """
    Convert a value to a Decimal rounded to the ledger precision

    Args:
        value: Decimal, integer or string representation of number

    Returns:
        Quantized Decimal

    Raises:
        ValueError: If value is a float, not a number, not finite or
            larger than MAX_AMOUNT
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"Amounts must not be built from {type(value).__name__}")

    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("Amount must be a non-empty string")
        try:
            value = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to Decimal")
    elif not isinstance(value, Decimal):
        value = Decimal(value)

    if not value.is_finite():
        raise ValueError(f"Amount must be finite, got {value}")

    if abs(value) > MAX_AMOUNT:
        raise ValueError(f"Amount {value} exceeds the maximum of {MAX_AMOUNT}")

    with localcontext() as ctx:
        ctx.prec = BALANCE_PRECISION
        return value.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    """Render a balance or amount with exactly four fractional digits"""
    with localcontext() as ctx:
        ctx.prec = BALANCE_PRECISION
        return f"{amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP):.{AMOUNT_PRECISION}f}"
