# barbershop/schemas/catalog.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    duration: int = Field(30, gt=0, le=24 * 60, description="Minutes")
    category: Optional[str] = Field("hair", max_length=30)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    category: Optional[str] = Field(None, max_length=30)
    is_active: Optional[bool] = None
