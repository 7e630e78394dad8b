# ============================================================================
# barbershop/api/v1/dashboard/commissions.py
# ============================================================================
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_current_barbershop
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.commission import BarberTermsUpdate, CommissionSummary
from barbershop.services.commission.commission_service import CommissionService

router = APIRouter()


@router.get("/commissions", response_model=CommissionSummary)
async def commission_report(
        start_date: date = Query(..., description="First day of the period"),
        end_date: date = Query(..., description="Last day of the period"),
        barber_id: Optional[UUID] = Query(None, description="Only this professional"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CommissionService.build_report(db, barbershop.id, start_date, end_date, barber_id)


@router.patch("/barbers/{barber_id}/terms")
async def update_barber_terms(
        payload: BarberTermsUpdate,
        barber_id: UUID = Path(..., description="The professional ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Commission rate and advances used by the payout report"""
    barber = CommissionService.update_barber_terms(
        db, barbershop.id, barber_id,
        commission_rate=payload.commission_rate,
        advances=payload.advances,
    )
    return barber.to_dict()
