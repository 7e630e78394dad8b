# barbershop/schemas/availability.py

import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class WorkDay(BaseModel):
    """A professional's hours for one weekday"""
    active: bool = False
    start: str = "09:00"
    end: str = "18:00"


class ShopHours(BaseModel):
    """Global opening hours of the shop"""
    opening_time: str = "00:00"
    closing_time: str = "23:59"
    is_closed: bool = False


class BookedSlot(BaseModel):
    """Minimal view of an existing appointment used for conflict checks"""
    date: dt.date
    time: str
    duration: Optional[int] = None
    status: str = "confirmado"


class AvailabilityResponse(BaseModel):
    barber_id: str
    date: dt.date
    duration: int
    slots: List[str] = Field(default_factory=list)


def parse_work_days(raw: Optional[Dict]) -> Dict[str, WorkDay]:
    """Build WorkDay objects from the JSON stored on the barber row"""
    return {str(key): WorkDay(**value) for key, value in (raw or {}).items() if value}
