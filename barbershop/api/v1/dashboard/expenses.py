# ============================================================================
# barbershop/api/v1/dashboard/expenses.py
# ============================================================================
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_current_barbershop
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.expense import ExpenseCreate
from barbershop.services.availability.availability_service import shop_now
from barbershop.services.expense.expense_service import ExpenseService

router = APIRouter(prefix="/expenses")


@router.get("")
async def list_expenses(
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return [e.to_dict() for e in ExpenseService.list_expenses(db, barbershop.id, start_date, end_date)]


@router.get("/monthly-total")
async def monthly_total(
        year: Optional[int] = Query(None, ge=2000, le=2100),
        month: Optional[int] = Query(None, ge=1, le=12),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Sum of the month's expenses; defaults to the current month"""
    today = shop_now(barbershop.timezone).date()
    year = year or today.year
    month = month or today.month
    return {
        "year": year,
        "month": month,
        "total": ExpenseService.month_total(db, barbershop.id, year, month),
    }


@router.post("", status_code=201)
async def create_expense(
        payload: ExpenseCreate,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    today = shop_now(barbershop.timezone).date()
    return ExpenseService.create_expense(db, barbershop.id, payload, today).to_dict()


@router.delete("/{expense_id}", status_code=204)
async def delete_expense(
        expense_id: UUID = Path(..., description="The expense ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    ExpenseService.delete_expense(db, barbershop.id, expense_id)
