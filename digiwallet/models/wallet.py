from datetime import datetime
from decimal import Decimal
from typing import Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .base import TimeStampedModel, utcnow

class TransactionType(str, Enum):
    PAYMENT = "payment"
    CASHBACK = "cashback"
    TOPUP = "topup"
    TRANSFER_OUT = "transfer_out"
    TRANSFER_IN = "transfer_in"
    BILL_SPLIT = "bill_split"
    SPLIT_SETTLEMENT = "split_settlement"
    REFUND = "refund"

class TransactionStatus(str, Enum):
    PENDING = "pending"
    OK = "ok"
    FAILED = "failed"
    CANCELLED = "cancelled"

CREDIT_TYPES = frozenset({
    TransactionType.CASHBACK,
    TransactionType.TOPUP,
    TransactionType.TRANSFER_IN,
    TransactionType.REFUND,
})

class TransactionMeta(BaseModel):
    """Known metadata keys; unknown keys are kept for audit"""
    related_tx: Optional[str] = None
    to_user: Optional[str] = None
    from_user: Optional[str] = None
    rule_id: Optional[str] = None
    original_tx_id: Optional[str] = None
    split_id: Optional[int] = None
    qr_id: Optional[str] = None
    payment_method: Optional[str] = None
    method: Optional[str] = None
    kind: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    def to_json(self) -> dict:
        return self.model_dump(exclude_none=True)

class Transaction(BaseModel):
    """Immutable ledger entry"""
    tx_id: str
    user_id: str
    amount: Decimal = Field(gt=0)
    currency: str = "TRY"
    type: TransactionType
    status: TransactionStatus = TransactionStatus.OK
    merchant_id: Optional[str] = None
    meta: TransactionMeta = Field(default_factory=TransactionMeta)
    created_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("meta", mode="before")
    @classmethod
    def none_meta(cls, value):
        return value if value is not None else {}

    @property
    def increases_balance(self) -> bool:
        return self.type in CREDIT_TYPES

class Wallet(TimeStampedModel):
    """Wallet model for user balance"""
    user_id: str
    balance: Decimal = Field(default=Decimal(0), ge=0)
    currency: str = "TRY"

    def has_sufficient_funds(self, amount: Decimal) -> bool:
        return self.balance >= amount

    @property
    def formatted_balance(self) -> str:
        return f"{self.balance:.2f} {self.currency}"
