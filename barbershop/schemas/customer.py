# barbershop/schemas/customer.py
import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    birth_date: Optional[dt.date] = None


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    birth_date: Optional[dt.date] = None


class PackageCreate(BaseModel):
    package_name: str = Field(..., min_length=1, max_length=200)
    total_credits: int = Field(4, ge=1)
    price_paid: Decimal = Field(Decimal("0"), ge=0)


class PackageCreditsUpdate(BaseModel):
    total_credits: int = Field(..., ge=1)
