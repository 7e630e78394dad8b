# ============================================================================
# barbershop/services/appointment/appointment_query_service.py
# ============================================================================
"""Read-side queries for the calendar and the sales history"""
import logging
import re
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from barbershop.core.exceptions import ValidationError
from barbershop.models.appointment import ACTIVE_STATUSES, Appointment, ITEM_CHECKED_OUT, STATUS_CANCELLED
from barbershop.models.barber import Barber

logger = logging.getLogger(__name__)


def phone_key(phone: Optional[str]) -> str:
    """Last 9 digits; matches a number with or without country and area code"""
    return re.sub(r"\D", "", phone or "")[-9:]


class AppointmentQueryService:
    """Handles listing operations over appointments and sale rows"""

    @staticmethod
    def list_appointments(
            db: Session,
            barbershop_id: UUID,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            status: Optional[str] = None,
            barber_id: Optional[UUID] = None,
            limit: int = 500,
    ) -> List[Appointment]:
        query = db.query(Appointment).filter(Appointment.barbershop_id == barbershop_id)

        if start_date:
            query = query.filter(Appointment.date >= start_date)
        if end_date:
            query = query.filter(Appointment.date <= end_date)
        if status:
            query = query.filter(Appointment.status == status)
        if barber_id:
            query = query.filter(Appointment.barber_id == barber_id)

        return query.order_by(Appointment.date.asc(), Appointment.time.asc()).limit(limit).all()

    @staticmethod
    def day_agenda(db: Session, barbershop_id: UUID, target_date: date) -> Dict[str, List[dict]]:
        """Non-cancelled bookings of the day grouped by professional name"""
        barbers = db.query(Barber).filter(
            Barber.barbershop_id == barbershop_id,
            Barber.is_active.is_(True),
        ).order_by(Barber.name.asc()).all()
        names = {b.id: b.name for b in barbers}

        rows = db.query(Appointment).filter(
            Appointment.barbershop_id == barbershop_id,
            Appointment.date == target_date,
            Appointment.status != STATUS_CANCELLED,
            or_(Appointment.venda_id.is_(None), Appointment.item_type == ITEM_CHECKED_OUT),
        ).order_by(Appointment.time.asc()).all()

        agenda = defaultdict(list)
        for barber in barbers:
            agenda[barber.name] = []
        for row in rows:
            agenda[names.get(row.barber_id, row.barber or "Sem profissional")].append(row.to_dict())
        return dict(agenda)

    @staticmethod
    def customer_appointments(
            db: Session,
            barbershop_id: UUID,
            phone: str,
            from_date: date,
    ) -> List[Appointment]:
        """Upcoming pending or confirmed bookings made with this phone number"""
        key = phone_key(phone)
        if len(key) < 8:
            raise ValidationError("Informe o telefone usado no agendamento")

        rows = db.query(Appointment).filter(
            Appointment.barbershop_id == barbershop_id,
            Appointment.date >= from_date,
            Appointment.status.in_(ACTIVE_STATUSES),
            Appointment.venda_id.is_(None),
        ).order_by(Appointment.date.asc(), Appointment.time.asc()).all()
        return [row for row in rows if phone_key(row.customer_phone) == key]

    @staticmethod
    def sales_history(db: Session, barbershop_id: UUID, start_date: date, end_date: date) -> List[dict]:
        """Sale rows grouped by venda_id, newest first"""
        rows = db.query(Appointment).filter(
            Appointment.barbershop_id == barbershop_id,
            Appointment.venda_id.isnot(None),
            Appointment.date >= start_date,
            Appointment.date <= end_date,
        ).order_by(Appointment.created_at.desc()).all()

        sales: Dict[str, dict] = {}
        for row in rows:
            sale = sales.setdefault(row.venda_id, {
                "venda_id": row.venda_id,
                "date": row.date.isoformat(),
                "time": row.time,
                "barber": row.barber,
                "customer_name": row.customer_name,
                "payment_method": row.payment_method,
                "total": 0.0,
                "items": [],
            })
            if row.item_type == ITEM_CHECKED_OUT:
                continue
            sale["items"].append(row.to_dict())
            sale["total"] += float(row.price or 0)

        logger.debug(f"Loaded {len(sales)} sales between {start_date} and {end_date}")
        return list(sales.values())
