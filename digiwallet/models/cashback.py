from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

ANY_CATEGORY = "any"

class CashbackRuleType(str, Enum):
    PERCENT = "percent"
    FLAT = "flat"

class CashbackRule(BaseModel):
    """Cashback campaign; read-only for the ledger"""
    rule_id: str
    rule_type: CashbackRuleType
    category: Optional[str] = None
    rate: Decimal = Decimal(0)
    flat_amount: Decimal = Decimal(0)
    cap: Optional[Decimal] = None
    first_time_only: bool = False
    starts_at: Optional[date] = None
    ends_at: Optional[date] = None
    active: bool = True

    model_config = ConfigDict(from_attributes=True)

    def matches_category(self, category: str) -> bool:
        return self.category == ANY_CATEGORY or self.category == category

    def is_running(self, today: date) -> bool:
        if not self.active:
            return False
        if self.starts_at and today < self.starts_at:
            return False
        if self.ends_at and today > self.ends_at:
            return False
        return True
