# barbershop/schemas/dashboard.py
import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class BarberPerformance(BaseModel):
    barber_id: str
    name: str
    services_count: int = 0
    gross: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")
    commission_rate: Decimal = Decimal("0")


class DailySummary(BaseModel):
    date: dt.date
    gross_revenue: Decimal = Decimal("0")
    total_commissions: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")
    total_tips: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    appointments_pending: int = 0
    barbers: List[BarberPerformance] = Field(default_factory=list)


class InsightResponse(BaseModel):
    insight: str
    generated: bool = True  # False when the fallback text was used
    summary: Optional[DailySummary] = None
