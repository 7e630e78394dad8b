# barbershop/schemas/inventory.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=100)
    current_stock: int = Field(0, ge=0)
    min_stock: int = Field(5, ge=0)
    price_cost: Decimal = Field(Decimal("0"), ge=0)
    price_sell: Decimal = Field(Decimal("0"), ge=0)
    commission_rate: Decimal = Field(Decimal("0"), ge=0, le=100)


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=100)
    current_stock: Optional[int] = Field(None, ge=0)
    min_stock: Optional[int] = Field(None, ge=0)
    price_cost: Optional[Decimal] = Field(None, ge=0)
    price_sell: Optional[Decimal] = Field(None, ge=0)
    commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)
