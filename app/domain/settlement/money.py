"""
Monetary value helpers.

All amounts are Decimal. Rounding to cents happens only when an
amount is stored or displayed, never in intermediate arithmetic.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal | int | str | float) -> Decimal:
    """Convert a raw value into a Decimal amount.

    Floats go through ``str`` so that binary representation noise
    (e.g. 0.1 + 0.2) never leaks into the ledger.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a monetary amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")
    return amount


def quantize(amount: Decimal) -> Decimal:
    """Round an amount to cents (half-up)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    """Render an amount for display, e.g. ``$1,234.50`` or ``-$20.00``."""
    rounded = quantize(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"
