"""
Financial utility functions.

All monetary values use :class:`decimal.Decimal` to guarantee
exact base-10 arithmetic and avoid IEEE-754 floating-point drift.
Nothing in here ever converts an amount to ``float``.
"""

from __future__ import annotations

from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    Context,
    Decimal,
    Inexact,
    InvalidOperation,
    Overflow,
    Rounded,
    localcontext,
)
from typing import Any


# ── Constants ────────────────────────────────────────────────────────────────

ZERO = Decimal("0")
ONE = Decimal("1")

# Additions and multiplications of finite operands never need rounding here;
# should one ever do, Inexact/Rounded raise instead of losing digits.
EXACT_CONTEXT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[InvalidOperation, Inexact, Rounded, Overflow],
)


# ── Conversion ───────────────────────────────────────────────────────────────

def to_decimal(value: Any) -> Decimal:
    """
    Safely convert a raw value to :class:`~decimal.Decimal`.

    Floats go through ``str`` first so ``0.98`` becomes ``Decimal("0.98")``
    and not its binary approximation.

    Raises
    ------
    ValueError
        If *value* is a boolean, is not a finite decimal number, or cannot
        be interpreted as one.
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to Decimal: booleans are not amounts")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise ValueError(f"Cannot convert {value!r} to Decimal: {exc}") from exc
    if not result.is_finite():
        raise ValueError(f"Cannot convert {value!r} to Decimal: value is not finite")
    return result


def decimal_to_str(value: Decimal) -> str:
    """Render a Decimal for JSON without going through float."""
    return format(value, "f")


# ── Adjustments ──────────────────────────────────────────────────────────────

def deduction_factor(rate: Decimal) -> Decimal:
    """
    Multiplier that removes *rate* from an amount.

    >>> deduction_factor(Decimal("0.02"))
    Decimal('0.98')
    """
    with exact_arithmetic():
        return ONE - rate


# ── Exact arithmetic ─────────────────────────────────────────────────────────

def exact_arithmetic():
    """
    Context manager for amount arithmetic with no rounding.

    The default context keeps 28 significant digits, so
    ``Decimal("123456789012345678901234567890") + Decimal("0.01")`` would
    silently come out as ``1.234567890123456789012345679E+29``.  Inside
    this block the same sum is exact.
    """
    return localcontext(EXACT_CONTEXT)
