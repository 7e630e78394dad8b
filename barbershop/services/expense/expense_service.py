# ============================================================================
# barbershop/services/expense/expense_service.py
# ============================================================================
import logging
from calendar import monthrange
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from barbershop.core.exceptions import NotFoundError, ValidationError
from barbershop.models.expense import Expense
from barbershop.schemas.expense import ExpenseCreate

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Geral"
DEFAULT_PAYMENT_METHOD = "dinheiro"


class ExpenseService:
    """Handles shop expense operations"""

    @staticmethod
    def create_expense(db: Session, barbershop_id: UUID, data: ExpenseCreate, today: date) -> Expense:
        description = (data.description or "").strip()
        if not description or data.amount is None:
            raise ValidationError("Description and amount are required")

        expense = Expense(
            barbershop_id=barbershop_id,
            description=description,
            amount=data.amount,
            category=(data.category or "").strip() or DEFAULT_CATEGORY,
            payment_method=data.payment_method or DEFAULT_PAYMENT_METHOD,
            date=data.date or today,
        )
        db.add(expense)
        db.commit()
        db.refresh(expense)
        logger.info(f"Recorded expense {expense.id}: {expense.description} {expense.amount}")
        return expense

    @staticmethod
    def delete_expense(db: Session, barbershop_id: UUID, expense_id: UUID):
        expense = db.query(Expense).filter(
            Expense.id == expense_id,
            Expense.barbershop_id == barbershop_id,
        ).first()
        if not expense:
            raise NotFoundError("Expense not found")
        db.delete(expense)
        db.commit()

    @staticmethod
    def list_expenses(
            db: Session,
            barbershop_id: UUID,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
    ) -> List[Expense]:
        query = db.query(Expense).filter(Expense.barbershop_id == barbershop_id)
        if start_date:
            query = query.filter(Expense.date >= start_date)
        if end_date:
            query = query.filter(Expense.date <= end_date)
        return query.order_by(Expense.date.desc(), Expense.created_at.desc()).all()

    @staticmethod
    def month_total(db: Session, barbershop_id: UUID, year: int, month: int) -> Decimal:
        first = date(year, month, 1)
        last = date(year, month, monthrange(year, month)[1])
        total = db.query(func.coalesce(func.sum(Expense.amount), 0)).filter(
            Expense.barbershop_id == barbershop_id,
            Expense.date >= first,
            Expense.date <= last,
        ).scalar()
        return Decimal(str(total))
