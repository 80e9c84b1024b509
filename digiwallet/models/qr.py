from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import BaseModel, field_validator

class QRPayload(BaseModel):
    """Decoded merchant QR code"""
    qr_id: str
    merchant_id: str
    amount: Any
    currency: Optional[str] = None
    description: Optional[str] = None
    ts: Optional[datetime] = None

    @field_validator("qr_id", "merchant_id")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("amount")
    @classmethod
    def present(cls, value: Any) -> Any:
        if value is None or value == "":
            raise ValueError("amount is required")
        return value

    @field_validator("ts")
    @classmethod
    def aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
