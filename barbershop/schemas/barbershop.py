# barbershop/schemas/barbershop.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from barbershop.schemas.appointment import TIME_PATTERN


class BarbershopCreate(BaseModel):
    """New shop for the signed-in owner; the slug is derived from the name when omitted"""
    name: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=300)
    phone: Optional[str] = Field(None, max_length=30)


class BarbershopSettingsUpdate(BaseModel):
    opening_time: Optional[str] = Field(None, pattern=TIME_PATTERN.pattern)
    closing_time: Optional[str] = Field(None, pattern=TIME_PATTERN.pattern)
    is_closed: Optional[bool] = None
    fee_dinheiro: Optional[Decimal] = Field(None, ge=0, le=100)
    fee_pix: Optional[Decimal] = Field(None, ge=0, le=100)
    fee_debito: Optional[Decimal] = Field(None, ge=0, le=100)
    fee_credito: Optional[Decimal] = Field(None, ge=0, le=100)
