# barbershop/schemas/barber.py
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field

from barbershop.schemas.availability import WorkDay


class BarberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    photo: Optional[str] = Field(None, max_length=500)
    work_days: Optional[Dict[str, WorkDay]] = None  # Mon-Sat 09:00-19:00 when omitted
    commission_rate: Decimal = Field(Decimal("0"), ge=0, le=100)


class BarberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    photo: Optional[str] = Field(None, max_length=500)
    work_days: Optional[Dict[str, WorkDay]] = None
    commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None
