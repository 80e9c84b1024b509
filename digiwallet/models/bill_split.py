from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from .base import utcnow

class SplitStatus(str, Enum):
    PENDING = "pending"
    SETTLED = "settled"
    CANCELLED = "cancelled"

class BillSplit(BaseModel):
    """One debtor's obligation on one original transaction.

    Status only moves pending -> settled or pending -> cancelled.
    """
    split_id: Optional[int] = None
    tx_id: str
    payer_user_id: str
    debtor_user_id: str
    total_amount: Decimal = Field(gt=0)
    share_amount: Decimal = Field(gt=0)
    weight: Decimal = Field(default=Decimal(1), gt=0)
    status: SplitStatus = SplitStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    settled_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def check_parties_and_share(self):
        if self.payer_user_id == self.debtor_user_id:
            raise ValueError("payer and debtor cannot be the same user")
        if self.share_amount > self.total_amount:
            raise ValueError("share amount cannot exceed total amount")
        return self

    @property
    def is_pending(self) -> bool:
        return self.status == SplitStatus.PENDING

    @property
    def is_settled(self) -> bool:
        return self.status == SplitStatus.SETTLED
