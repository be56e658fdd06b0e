"""
Money and rounding utilities for SplitRight
Pure numeric helpers shared by the allocation engine and the CLI
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional

from constants import (
    CURRENCIES, Currency, YEN_SYMBOL, DECIMAL_QUANTIZE, ROUNDING_STEPS,
    TIP_PERCENTAGE,
)

ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Coerce a number to Decimal, non-finite or invalid values become 0"""
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() keeps floats at their shortest repr (0.1 -> "0.1")
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            return ZERO

    if not result.is_finite():
        return ZERO
    return result


def calculate_subtotal(items: Iterable) -> Decimal:
    """Sum of price x quantity over items"""
    return sum((to_decimal(item.price) * item.quantity for item in items), ZERO)


def calculate_tip(subtotal, tip_type: str, tip_value) -> Decimal:
    """Tip amount for a subtotal, either a percentage of it or a fixed value"""
    subtotal = to_decimal(subtotal)
    tip_value = to_decimal(tip_value)

    if tip_type == TIP_PERCENTAGE:
        tip = subtotal * tip_value / 100
    else:
        tip = tip_value

    return to_decimal(tip)


def calculate_total(data) -> Decimal:
    """Subtotal plus tax plus tip for a SplitData"""
    subtotal = calculate_subtotal(data.items)
    tip = calculate_tip(subtotal, data.tip_type, data.tip_value)
    return subtotal + to_decimal(data.tax) + tip


def apply_rounding(amount, mode: str) -> Decimal:
    """Round to the cent or to the nearest 1, 5 or 10, ties away from zero"""
    amount = to_decimal(amount)
    step = ROUNDING_STEPS.get(mode)

    if step is None:
        return amount.quantize(DECIMAL_QUANTIZE, rounding=ROUND_HALF_UP)

    return (amount / step).quantize(Decimal("1"), rounding=ROUND_HALF_UP) * step


def safe_divide(numerator, denominator) -> Decimal:
    """Divide, returning 0 instead of raising on a zero denominator"""
    denominator = to_decimal(denominator)
    if denominator == 0:
        return ZERO
    return to_decimal(to_decimal(numerator) / denominator)


def get_currency(symbol: str) -> Optional[Currency]:
    """Look up a currency in the shared table by symbol"""
    for currency in CURRENCIES:
        if currency.symbol == symbol:
            return currency
    return None


def format_currency(amount, currency: str = YEN_SYMBOL) -> str:
    """Format currency amount, yen without decimals and others with two"""
    amount = to_decimal(amount)

    if currency == YEN_SYMBOL:
        whole = amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return f"{currency}{whole:,}"

    cents = amount.quantize(DECIMAL_QUANTIZE, rounding=ROUND_HALF_UP)
    return f"{currency}{cents}"
