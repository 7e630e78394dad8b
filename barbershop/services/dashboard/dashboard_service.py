# ============================================================================
# barbershop/services/dashboard/dashboard_service.py
# Daily financial summary for the admin dashboard
# ============================================================================
from datetime import date
from decimal import Decimal
from uuid import UUID
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from barbershop.models.appointment import (
    Appointment,
    STATUS_FINALIZED,
    STATUS_PENDING,
    TIP_SERVICE_NAME,
    sale_row_clause,
)
from barbershop.models.barber import Barber
from barbershop.models.expense import Expense
from barbershop.schemas.dashboard import BarberPerformance, DailySummary
from barbershop.services.commission.commission_ledger import resolve_professional, sale_commission
from barbershop.services.commission.commission_service import sale_record_from_row
from barbershop.services.pricing.payment_ledger import to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class DashboardService:

    @staticmethod
    def daily_summary(db: Session, barbershop_id: UUID, target_date: date) -> DailySummary:
        barbers = db.query(Barber).filter(Barber.barbershop_id == barbershop_id).all()
        performance = {
            str(b.id): BarberPerformance(
                barber_id=str(b.id),
                name=b.name,
                commission_rate=to_decimal(b.commission_rate),
            )
            for b in barbers
        }
        live_rates = {str(b.id): b.commission_rate or 0 for b in barbers}

        rows = db.query(Appointment).filter(
            Appointment.barbershop_id == barbershop_id,
            Appointment.date == target_date,
            Appointment.status == STATUS_FINALIZED,
            sale_row_clause(),
        ).all()

        gross = ZERO
        tips = ZERO
        for row in rows:
            sale = sale_record_from_row(row)
            if sale.service == TIP_SERVICE_NAME:
                tips += to_decimal(sale.tip_amount)
                continue
            gross += to_decimal(sale.price)
            owner = resolve_professional(sale, barbers)
            if owner is None:
                continue
            entry = performance[owner]
            entry.services_count += 1
            entry.gross += to_decimal(sale.price)
            entry.commission += sale_commission(sale, live_rates[owner]).commission

        total_commissions = sum((p.commission for p in performance.values()), ZERO)

        expenses = db.query(func.coalesce(func.sum(Expense.amount), 0)).filter(
            Expense.barbershop_id == barbershop_id,
            Expense.date == target_date,
        ).scalar()
        pending = db.query(func.count(Appointment.id)).filter(
            Appointment.barbershop_id == barbershop_id,
            Appointment.date == target_date,
            Appointment.status == STATUS_PENDING,
        ).scalar()

        return DailySummary(
            date=target_date,
            gross_revenue=gross,
            total_commissions=total_commissions,
            net_profit=gross - total_commissions,
            total_tips=tips,
            expenses=to_decimal(expenses),
            appointments_pending=pending or 0,
            barbers=sorted(performance.values(), key=lambda p: p.gross, reverse=True),
        )
