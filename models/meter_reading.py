# models/meter_reading.py

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class MeterReadingCreate(BaseModel):
    reading_value: Decimal = Field(..., ge=0)
    reading_date: date


class MeterReadingRead(MeterReadingCreate):
    id: str
    room_id: str
    created_at: Optional[datetime] = None
