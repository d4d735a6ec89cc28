"""
Exact decimal helpers shared by the reducer, finalizer, and report builder.

Provides parsing of decimal strings from the extract, plain-notation formatting for the
report, and division guarded against zero denominators. Zero-IO, stdlib-only.

Notes:
    - Stored aggregates are always Decimal. Floats appear only as sort keys in the
      finalizer and never feed back into stored values.
    - format_decimal strips trailing zeros and never emits exponent notation, so
      Decimal("2.0") renders as "2" and Decimal("1E+2") as "100".
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation

from .constants import DECIMAL_PRECISION
from .errors import DecimalFieldError

__all__ = [
    "ZERO",
    "make_context",
    "parse_decimal",
    "divide",
    "format_decimal",
]

ZERO = Decimal(0)

# Digits kept after the point for quotients (averages); matches the dashboard's display library.
QUOTIENT_PLACES = Decimal(1).scaleb(-20)


def make_context(precision: int = DECIMAL_PRECISION) -> Context:
    """Return a decimal Context for running sums with the given significant digits."""
    return Context(prec=precision)


def parse_decimal(value: object, field: str, *, coin: str | None = None) -> Decimal:
    """
    Parse a decimal string (or int) from the extract.

    Args:
        value (object): Raw value, normally a string such as "0.0125".
        field (str): Wire name of the field, used in the error message.
        coin (str | None): Coin the field belongs to, used in the error message.

    Returns:
        Decimal: The parsed value.

    Raises:
        DecimalFieldError: If value is missing, not numeric, NaN, or infinite.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise DecimalFieldError(field, value, coin=coin)
    try:
        d = Decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, ValueError) as exc:
        raise DecimalFieldError(field, value, coin=coin) from exc
    if not d.is_finite():
        raise DecimalFieldError(field, value, coin=coin)
    return d


def divide(numerator: Decimal, denominator: Decimal | int, ctx: Context) -> Decimal:
    """Quotient rounded to 20 places (half-up). Callers guarantee a non-zero denominator."""
    q = ctx.divide(numerator, Decimal(denominator))
    # quantize needs room for every integer digit plus the 20 fractional ones
    local = ctx.copy()
    local.prec = max(ctx.prec, q.adjusted() + 21)
    return q.quantize(QUOTIENT_PLACES, rounding=ROUND_HALF_UP, context=local)


def format_decimal(d: Decimal | int) -> str:
    """Render a decimal in plain notation without trailing zeros."""
    if isinstance(d, int):
        return str(d)
    if d.is_zero():
        return "0"
    digits = len(d.as_tuple().digits)
    return format(d.normalize(make_context(max(DECIMAL_PRECISION, digits))), "f")
