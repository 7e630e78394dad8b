# ============================================================================
# barbershop/api/v1/dashboard/summary.py
# Daily numbers and the AI insight card
# ============================================================================
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_current_barbershop
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.dashboard import DailySummary, InsightResponse
from barbershop.services.ai.insight_service import InsightService
from barbershop.services.availability.availability_service import shop_now
from barbershop.services.dashboard.dashboard_service import DashboardService

router = APIRouter(prefix="/summary")


def _summary(db: Session, barbershop: Barbershop, target_date: Optional[date]) -> DailySummary:
    target_date = target_date or shop_now(barbershop.timezone).date()
    return DashboardService.daily_summary(db, barbershop.id, target_date)


@router.get("", response_model=DailySummary)
async def daily_summary(
        target_date: Optional[date] = Query(None, alias="date", description="Defaults to today"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return _summary(db, barbershop, target_date)


@router.get("/insight", response_model=InsightResponse)
async def insight(
        target_date: Optional[date] = Query(None, alias="date", description="Defaults to today"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Short analysis of the day's numbers; never fails, falls back to a fixed text"""
    return InsightService().generate(_summary(db, barbershop, target_date))
