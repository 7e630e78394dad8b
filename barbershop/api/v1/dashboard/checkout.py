# ============================================================================
# barbershop/api/v1/dashboard/checkout.py
# Point-of-sale endpoints
# ============================================================================
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_current_barbershop
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.checkout import CheckoutQuote, CheckoutRequest, CheckoutResult
from barbershop.services.appointment.appointment_query_service import AppointmentQueryService
from barbershop.services.availability.availability_service import shop_now
from barbershop.services.checkout.checkout_service import CheckoutService
from barbershop.services.realtime.appointment_feed import AppointmentFeed

router = APIRouter(prefix="/checkout")


@router.post("/quote", response_model=CheckoutQuote)
async def quote(
        payload: CheckoutRequest,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Cart pricing, fees and discount check without writing anything"""
    return CheckoutService.quote(db, barbershop, payload)


@router.post("/finalize", response_model=CheckoutResult, status_code=201)
async def finalize(
        payload: CheckoutRequest,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    result = CheckoutService.finalize(db, barbershop, payload)
    await AppointmentFeed.publish(barbershop.id, "INSERT", {"venda_id": result.venda_id})
    if payload.appointment_id:
        await AppointmentFeed.publish(
            barbershop.id, "UPDATE", {"id": str(payload.appointment_id), "status": "finalizado"}
        )
    return result


@router.get("/sales")
async def sales_history(
        start_date: Optional[date] = Query(None, description="Defaults to today"),
        end_date: Optional[date] = Query(None, description="Defaults to start_date"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    start_date = start_date or shop_now(barbershop.timezone).date()
    end_date = end_date or start_date
    return AppointmentQueryService.sales_history(db, barbershop.id, start_date, end_date)
