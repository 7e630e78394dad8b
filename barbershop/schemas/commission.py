# barbershop/schemas/commission.py
import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class SaleRecord(BaseModel):
    """A finalized sale row as used by the commission ledger"""
    id: Optional[str] = None
    barber_id: Optional[str] = None
    barber: Optional[str] = None
    service: str
    date: Optional[dt.date] = None
    price: Decimal = Decimal("0")
    product_commission: Decimal = Decimal("0")
    tip_amount: Decimal = Decimal("0")
    commission_rate: Optional[Decimal] = None  # snapshot taken at finalize time


class SaleCommission(BaseModel):
    sale: SaleRecord
    commission: Decimal
    is_tip: bool = False
    is_fixed: bool = False


class CommissionReport(BaseModel):
    barber_id: str
    barber_name: str
    commission_rate: Decimal
    services_count: int = 0
    gross_total: Decimal = Decimal("0")
    total_commission: Decimal = Decimal("0")
    total_tips: Decimal = Decimal("0")
    advances: Decimal = Decimal("0")
    net_payable: Decimal = Decimal("0")
    details: List[SaleCommission] = Field(default_factory=list)


class CommissionSummary(BaseModel):
    start_date: dt.date
    end_date: dt.date
    barbers: List[CommissionReport] = Field(default_factory=list)
    total_payable: Decimal = Decimal("0")


class BarberTermsUpdate(BaseModel):
    commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    advances: Optional[Decimal] = Field(None, ge=0)
