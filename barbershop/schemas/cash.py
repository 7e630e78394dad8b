# barbershop/schemas/cash.py
import datetime as dt
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field


class CashOpenRequest(BaseModel):
    initial_value: Optional[Decimal] = Field(None, ge=0)  # defaults to the last close


class CashCloseRequest(BaseModel):
    final_value: Decimal = Field(..., ge=0)


class CashMovementRequest(BaseModel):
    type: Literal["entrada", "saida"] = "saida"
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = Field(None, max_length=300)
    payment_method: str = "dinheiro"


class DayStats(BaseModel):
    """Sales of the session day split by payment token"""
    date: dt.date
    total: Decimal = Decimal("0")
    dinheiro: Decimal = Decimal("0")
    pix: Decimal = Decimal("0")
    cartao: Decimal = Decimal("0")
    pacote: Decimal = Decimal("0")
    cash_in: Decimal = Decimal("0")
    cash_out: Decimal = Decimal("0")
    sales_count: int = 0


class CashStatus(BaseModel):
    session: Optional[dict] = None
    stats: Optional[DayStats] = None
    expected_value: Optional[Decimal] = None
    suggested_initial_value: Decimal = Decimal("0")
