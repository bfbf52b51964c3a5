# Overview: Decimal helpers for monetary amounts and markup fractions.

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
MARKUP_STEP = Decimal("0.0001")
ZERO = Decimal("0.00")


def to_decimal(value) -> Decimal:
    """
    Coerce ints, strings, floats and Decimals to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    expansion. Raises ValueError for NaN, infinity or garbage.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, AttributeError):
            raise ValueError(f"not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return result


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def quantize_markup(value: Decimal) -> Decimal:
    """Round a markup fraction to the four places its Numeric(5, 4) columns store."""
    return to_decimal(value).quantize(MARKUP_STEP, rounding=ROUND_HALF_UP)


def money_str(value: Decimal | None) -> str | None:
    """Serialize an amount as a fixed two-decimal string ("123900.00")."""
    if value is None:
        return None
    return str(quantize_money(to_decimal(value)))


def fraction_str(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return str(to_decimal(value).normalize())
