# ============================================================================
# barbershop/api/v1/dashboard/cash.py
# Cash drawer endpoints
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_current_barbershop
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.cash import CashCloseRequest, CashMovementRequest, CashOpenRequest, CashStatus
from barbershop.services.cash.cash_service import CashService

router = APIRouter(prefix="/cash")


@router.get("", response_model=CashStatus)
async def current_session(
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Open session with today's totals, or the suggested float when closed"""
    return CashService.current_status(db, barbershop)


@router.post("/open", status_code=201)
async def open_session(
        payload: CashOpenRequest,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CashService.open_session(db, barbershop, payload.initial_value).to_dict()


@router.post("/close")
async def close_session(
        payload: CashCloseRequest,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CashService.close_session(db, barbershop, payload.final_value).to_dict()


@router.post("/movements", status_code=201)
async def record_movement(
        payload: CashMovementRequest,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Manual cash in or withdrawal (sangria) on the open session"""
    transaction = CashService.record_movement(
        db,
        barbershop.id,
        payload.type,
        payload.amount,
        description=payload.description,
        payment_method=payload.payment_method,
    )
    return transaction.to_dict()


@router.get("/history")
async def history(
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Last five closed sessions"""
    return [s.to_dict() for s in CashService.history(db, barbershop.id)]
