from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value, default=None):
    """Convert a row value (int, float, str or Decimal) to Decimal.

    Floats go through str() so 1.45 stays 1.45 instead of its binary expansion.
    """
    if value is None or value == "":
        if default is None:
            raise ValueError("Missing numeric value")
        return Decimal(default)
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"Invalid numeric value: {value!r}")
    # Infinity and NaN parse as Decimals but are not amounts
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value!r}")
    return result


def round_cents(amount):
    """Round to the nearest cent, half-up"""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def money_to_json(amount):
    """Currency amounts leave the engine as floats with two decimal places"""
    if amount is None:
        return None
    return float(round_cents(amount))


def format_money(amount, show_cents=True):
    value = round_cents(amount)
    if show_cents:
        return f"${value:,.2f}"
    return f"${value.quantize(Decimal('1'), rounding=ROUND_HALF_UP):,}"
