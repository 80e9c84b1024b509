from decimal import Decimal
from pydantic import Field
from .base import TimeStampedModel

BUDGET_CATEGORIES = ('cafe', 'market', 'transport', 'entertainment', 'health', 'other')

class Budget(TimeStampedModel):
    """Monthly spend limit for one category.

    spent_amount is kept for the table layout only; spend is always
    recomputed from payment transactions.
    """
    user_id: str
    month: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    category: str
    limit_amount: Decimal = Field(gt=0)
    spent_amount: Decimal = Decimal(0)
