"""
Money and percentage helpers.

Every monetary value in SellerFees is a ``Decimal`` quantized to whole
cents with half-up rounding. Rounding happens after each computation
step, not only on output, so repeated solver evaluations never drift.
"""

from __future__ import annotations

import math
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: int | float | str | Decimal | None) -> Decimal:
    """
    Convert a number to ``Decimal`` without binary float artifacts.

    Lenient: anything unparseable becomes 0. Used by the normalization
    helpers; validated input fields go through ``parse_decimal``.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return ZERO


def parse_decimal(value: int | float | str | Decimal) -> Decimal:
    """
    Strict conversion for validated input fields.

    Accepts numbers and numeric strings, with a comma as the decimal
    separator when the string has no dot (``"12,50"``).

    Raises:
        ValueError: On booleans, unparseable strings, or non-finite values.
    """
    if isinstance(value, bool):
        raise ValueError("expected a number, got a boolean")
    if isinstance(value, str):
        value = value.strip()
        if "," in value and "." not in value:
            value = value.replace(",", ".")

    try:
        amount = to_decimal(value) if isinstance(value, (Decimal, float)) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValueError(f"invalid number: {value!r}") from exc

    if not amount.is_finite():
        raise ValueError(f"number must be finite, got {value!r}")
    return amount


def is_finite_number(value) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def round_money(value: int | float | str | Decimal) -> Decimal:
    """Half-up rounding to the cent."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def ceil_money(value: int | float | str | Decimal) -> Decimal:
    """Round up to the next cent."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_CEILING)


def floor_rate(value: Decimal, places: int = 4) -> Decimal:
    """Truncate a fraction down to ``places`` decimal digits."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_FLOOR)


def clamp_non_negative(value: Decimal) -> Decimal:
    return ZERO if value < 0 else value


def normalize_percent(value) -> Decimal:
    """
    Normalize a percent-like input to a fraction in ``[0, 1]``.

    Values above 1 are read as whole-number percentages (``10`` -> ``0.1``).
    Non-finite or negative values become 0; anything above 100% becomes 1.
    """
    if not is_finite_number(value):
        return ZERO

    percent = to_decimal(value)
    if percent > ONE:
        percent = percent / HUNDRED
    if percent < ZERO:
        return ZERO
    if percent > ONE:
        return ONE
    return percent


def normalize_money(value) -> Decimal:
    """Non-finite, missing, or negative amounts become 0."""
    if not is_finite_number(value):
        return ZERO
    amount = to_decimal(value)
    return ZERO if amount < 0 else amount


def finite_money(value) -> Decimal:
    """Round to the cent; non-finite or missing amounts become 0, negatives are kept."""
    if not is_finite_number(value):
        return ZERO
    return round_money(value)


# ─── Display formatting ───────────────────────────────────────


def format_currency(value: Decimal) -> str:
    """Format as Brazilian reais, e.g. ``R$ 1.234,56``."""
    cents = int(round_money(value) * HUNDRED)
    sign = "-" if cents < 0 else ""
    cents_abs = abs(cents)
    reais = f"{cents_abs // 100:,}".replace(",", ".")
    return f"{sign}R$ {reais},{cents_abs % 100:02d}"


def format_percent(value: Decimal) -> str:
    """Format a fraction as a percentage with up to 2 decimals, e.g. ``2,5%``."""
    percent = (to_decimal(value) * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
    text = f"{percent:f}".rstrip("0").rstrip(".")
    return f"{text.replace('.', ',')}%"
