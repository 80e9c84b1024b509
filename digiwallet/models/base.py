from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class TimeStampedModel(BaseModel):
    """Base model with timestamp fields"""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
