import re
from pydantic import BaseModel, ConfigDict, field_validator
from .base import TimeStampedModel

PHONE_PATTERN = re.compile(r"^\+90[0-9]{10}$")

class User(TimeStampedModel):
    """Wallet owner"""
    user_id: str
    name: str
    phone: str

    @field_validator("user_id", "name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, value: str) -> str:
        if not PHONE_PATTERN.match(value):
            raise ValueError("phone must look like +90XXXXXXXXXX")
        return value

class Merchant(BaseModel):
    merchant_id: str
    name: str
    category: str

    model_config = ConfigDict(from_attributes=True)
