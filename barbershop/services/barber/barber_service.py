# ============================================================================
# barbershop/services/barber/barber_service.py
# ============================================================================
"""Professionals of a shop: profile, weekly hours and commission rate"""
import logging
from typing import Dict, List
from uuid import UUID

from sqlalchemy.orm import Session

from barbershop.core.exceptions import NotFoundError, ValidationError
from barbershop.models.barber import Barber
from barbershop.schemas.appointment import TIME_PATTERN
from barbershop.schemas.availability import WorkDay
from barbershop.schemas.barber import BarberCreate, BarberUpdate
from barbershop.services.availability.slots import time_to_minutes

logger = logging.getLogger(__name__)

WEEKDAY_KEYS = ("0", "1", "2", "3", "4", "5", "6")  # "0" = Sunday


def default_work_days() -> Dict[str, dict]:
    """Monday to Saturday 09:00-19:00, Sunday off"""
    return {
        day: {"active": day != "0", "start": "09:00", "end": "19:00"}
        for day in WEEKDAY_KEYS
    }


def validate_work_days(work_days: Dict[str, WorkDay]) -> Dict[str, dict]:
    """Check keys and hours, and return the JSON stored on the barber row"""
    stored = {}
    for day, config in work_days.items():
        if day not in WEEKDAY_KEYS:
            raise ValidationError(f"Dia da semana inválido: {day}")
        if not (TIME_PATTERN.match(config.start) and TIME_PATTERN.match(config.end)):
            raise ValidationError(f"Horário inválido no dia {day}")
        if config.active and time_to_minutes(config.start) >= time_to_minutes(config.end):
            raise ValidationError(f"O expediente do dia {day} termina antes de começar")
        stored[day] = config.model_dump()
    return stored


class BarberService:
    """Handles professional management"""

    @staticmethod
    def list_barbers(db: Session, barbershop_id: UUID, include_inactive: bool = True) -> List[Barber]:
        query = db.query(Barber).filter(Barber.barbershop_id == barbershop_id)
        if not include_inactive:
            query = query.filter(Barber.is_active.is_(True))
        return query.order_by(Barber.name.asc()).all()

    @staticmethod
    def get_barber(db: Session, barbershop_id: UUID, barber_id: UUID) -> Barber:
        barber = db.query(Barber).filter(
            Barber.id == barber_id,
            Barber.barbershop_id == barbershop_id,
        ).first()
        if not barber:
            raise NotFoundError("Professional not found")
        return barber

    @staticmethod
    def create_barber(db: Session, barbershop_id: UUID, data: BarberCreate) -> Barber:
        name = data.name.strip()
        if not name:
            raise ValidationError("Nome do profissional é obrigatório")
        work_days = validate_work_days(data.work_days) if data.work_days else default_work_days()

        barber = Barber(
            barbershop_id=barbershop_id,
            name=name,
            photo=data.photo,
            work_days=work_days,
            commission_rate=data.commission_rate,
            advances=0,
            is_active=True,
        )
        db.add(barber)
        db.commit()
        db.refresh(barber)
        logger.info(f"Added professional {barber.name} ({barber.id})")
        return barber

    @staticmethod
    def update_barber(db: Session, barbershop_id: UUID, barber_id: UUID, data: BarberUpdate) -> Barber:
        barber = BarberService.get_barber(db, barbershop_id, barber_id)
        changes = data.model_dump(exclude_unset=True, exclude={"work_days"})
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("Nome do profissional é obrigatório")

        if data.work_days is not None:
            # Days left out keep their current hours
            merged = dict(barber.work_days or {})
            merged.update(validate_work_days(data.work_days))
            barber.work_days = merged

        for field, value in changes.items():
            if value is not None:
                setattr(barber, field, value.strip() if field == "name" else value)

        db.commit()
        db.refresh(barber)
        logger.info(f"Updated professional {barber.id}")
        return barber

    @staticmethod
    def delete_barber(db: Session, barbershop_id: UUID, barber_id: UUID):
        """Bookings and sales keep the professional's name after the row is gone"""
        barber = BarberService.get_barber(db, barbershop_id, barber_id)
        db.delete(barber)
        db.commit()
        logger.info(f"Removed professional {barber_id}")
