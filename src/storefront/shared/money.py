"""Fixed-point currency helpers.

Amounts are persisted as floats (Protean ``Float`` fields) but every
calculation runs on ``Decimal`` quantized to cents, rounding half up.
"""

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Convert a float, int, str or Decimal into a cent-quantized Decimal."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def floor_units(value: Decimal) -> int:
    """Whole units of ``value``, rounded toward negative infinity."""
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def format_money(amount) -> str:
    """Plain two-decimal rendering used in customer-facing messages."""
    return f"{to_money(amount):.2f}"
