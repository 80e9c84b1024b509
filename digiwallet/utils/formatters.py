# digiwallet/utils/formatters.py
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import partial
from typing import Any, Optional
import pytz
from pydantic import BaseModel
from ..config import Config

def format_money(amount: Decimal, currency: Optional[str] = None) -> str:
    """12345.5 -> '12,345.50 TRY'"""
    return f"{Decimal(amount):,.2f} {currency or Config.CURRENCY}"

def format_datetime(dt: datetime) -> str:
    """Render in the business time zone"""
    local_tz = pytz.timezone(Config.TIMEZONE)
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(local_tz).strftime("%Y-%m-%d %H:%M")

def json_default(value: Any):
    """json.dumps hook for the types services hand back"""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, BaseModel):
        return value.model_dump()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

json_dumps = partial(json.dumps, default=json_default)
