# barbershop/schemas/expense.py
import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ExpenseCreate(BaseModel):
    description: str = Field("", max_length=300)
    amount: Optional[Decimal] = Field(None, gt=0)
    category: Optional[str] = Field(None, max_length=100)
    payment_method: Optional[str] = Field(None, max_length=20)
    date: Optional[dt.date] = None
