# ============================================================================
# barbershop/services/commission/commission_service.py
# Commission report per professional over a date range
# ============================================================================
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from barbershop.core.exceptions import NotFoundError, ValidationError
from barbershop.models.appointment import Appointment, STATUS_FINALIZED, sale_row_clause
from barbershop.models.barber import Barber
from barbershop.schemas.commission import CommissionSummary, SaleRecord
from barbershop.services.commission.commission_ledger import (
    build_commission_report,
    resolve_professional,
)

logger = logging.getLogger(__name__)


def sale_record_from_row(row: Appointment) -> SaleRecord:
    return SaleRecord(
        id=str(row.id),
        barber_id=str(row.barber_id) if row.barber_id else None,
        barber=row.barber,
        service=row.service,
        date=row.date,
        price=row.price or 0,
        product_commission=row.product_commission or 0,
        tip_amount=row.tip_amount or 0,
        commission_rate=row.commission_rate,
    )


class CommissionService:
    """Builds payout reports from finalized sales"""

    @staticmethod
    def build_report(
            db: Session,
            barbershop_id: UUID,
            start_date: date,
            end_date: date,
            barber_id: Optional[UUID] = None,
    ) -> CommissionSummary:
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")

        barbers_query = db.query(Barber).filter(Barber.barbershop_id == barbershop_id)
        if barber_id:
            barbers_query = barbers_query.filter(Barber.id == barber_id)
        barbers = barbers_query.order_by(Barber.name.asc()).all()

        rows = db.query(Appointment).filter(
            Appointment.barbershop_id == barbershop_id,
            Appointment.status == STATUS_FINALIZED,
            sale_row_clause(),
            Appointment.date >= start_date,
            Appointment.date <= end_date,
        ).order_by(Appointment.date.desc(), Appointment.time.desc()).all()

        sales_by_barber = {str(b.id): [] for b in barbers}
        unattributed = 0
        for row in rows:
            sale = sale_record_from_row(row)
            owner = resolve_professional(sale, barbers)
            if owner is None:
                unattributed += 1
                continue
            sales_by_barber[owner].append(sale)

        if unattributed and not barber_id:
            logger.warning(f"{unattributed} finalized sales could not be attributed to a professional")

        reports = [
            build_commission_report(
                barber_id=str(barber.id),
                barber_name=barber.name,
                commission_rate=barber.commission_rate or 0,
                sales=sales_by_barber[str(barber.id)],
                advances=barber.advances or 0,
            )
            for barber in barbers
        ]

        return CommissionSummary(
            start_date=start_date,
            end_date=end_date,
            barbers=reports,
            total_payable=sum((r.net_payable for r in reports), Decimal("0")),
        )

    @staticmethod
    def update_barber_terms(
            db: Session,
            barbershop_id: UUID,
            barber_id: UUID,
            commission_rate: Optional[Decimal] = None,
            advances: Optional[Decimal] = None,
    ) -> Barber:
        """Save a professional's commission rate and advances"""
        barber = db.query(Barber).filter(
            Barber.id == barber_id,
            Barber.barbershop_id == barbershop_id,
        ).first()
        if not barber:
            raise NotFoundError("Professional not found")

        if commission_rate is not None:
            barber.commission_rate = commission_rate
        if advances is not None:
            barber.advances = advances

        db.commit()
        db.refresh(barber)
        logger.info(f"Updated commission terms for barber {barber.id}")
        return barber
