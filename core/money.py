# core/money.py
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
ZERO = Decimal('0.00')

# Largest value a DecimalField(max_digits=10, decimal_places=2) column holds
MAX_AMOUNT = Decimal('99999999.99')


def to_money(value):
    """Quantize to two decimal places, rounding halves away from zero."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
