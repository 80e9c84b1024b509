from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

CENT = Decimal("0.01")
# amount columns are NUMERIC(12,2)
MAX_AMOUNT = Decimal("1e10")

def round_money(value: Any) -> Decimal:
    """Round to cents, half-up"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)

def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse a caller supplied amount into a positive cent value.

    Returns None for anything that is not a positive finite number below
    MAX_AMOUNT (booleans, NaN, infinities, unparsable strings, values that
    round to 0).
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite() or amount >= MAX_AMOUNT:
            return None
        amount = round_money(amount)
    except (InvalidOperation, ValueError):
        return None
    if amount <= 0 or amount >= MAX_AMOUNT:
        return None
    return amount
