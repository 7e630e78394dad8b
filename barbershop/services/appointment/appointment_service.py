# ============================================================================
# barbershop/services/appointment/appointment_service.py
# ============================================================================
"""Service for creating and moving appointments through their lifecycle"""
import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from barbershop.core.exceptions import (
    BarbershopError,
    InvalidTransitionError,
    NotFoundError,
    SlotConflictError,
    ValidationError,
)
from barbershop.models.appointment import (
    Appointment,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    STATUS_FINALIZED,
    STATUS_PENDING,
    ITEM_SERVICE,
)
from barbershop.models.barber import Barber
from barbershop.models.barbershop import Barbershop
from barbershop.models.service import Service
from barbershop.schemas.appointment import AppointmentCreate, SafeBookingResult
from barbershop.schemas.availability import ShopHours, parse_work_days
from barbershop.services.appointment.appointment_query_service import phone_key
from barbershop.services.availability.availability_service import AvailabilityService, shop_now
from barbershop.services.availability.slots import intervals_overlap, time_to_minutes
from barbershop.config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

ALLOWED_TRANSITIONS = {
    STATUS_PENDING: {STATUS_CONFIRMED, STATUS_CANCELLED},
    STATUS_CONFIRMED: {STATUS_FINALIZED, STATUS_CANCELLED},
    STATUS_FINALIZED: set(),
    STATUS_CANCELLED: set(),
}


class AppointmentService:
    """Handles appointment operations"""

    @staticmethod
    def _get_barber(db: Session, barbershop_id: UUID, barber_id: UUID) -> Barber:
        barber = db.query(Barber).filter(
            Barber.id == barber_id,
            Barber.barbershop_id == barbershop_id,
        ).first()
        if not barber:
            raise NotFoundError("Professional not found")
        return barber

    @staticmethod
    def _get_appointment(db: Session, barbershop_id: UUID, appointment_id: UUID) -> Appointment:
        appointment = db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.barbershop_id == barbershop_id,
        ).first()
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    @staticmethod
    def _check_overlap(
            db: Session,
            barbershop_id: UUID,
            barber: Barber,
            target_date: date,
            time: str,
            duration: int,
            exclude_id: Optional[UUID] = None,
    ):
        """Raise SlotConflictError when the interval hits another active booking"""
        start = time_to_minutes(time)
        booked = AvailabilityService.booked_slots_for(
            db, barbershop_id, barber, target_date, exclude_id=exclude_id
        )
        for slot in booked:
            if intervals_overlap(start, duration, time_to_minutes(slot.time),
                                 slot.duration or settings.DEFAULT_SERVICE_DURATION):
                raise SlotConflictError(
                    f"{barber.name} já possui um agendamento às {slot.time} em {target_date.isoformat()}"
                )

    @staticmethod
    def _check_bookable(
            barbershop: Barbershop,
            barber: Barber,
            data: AppointmentCreate,
            duration: int,
            now: Optional[datetime],
    ):
        """Customer bookings must fall inside working hours and in the future"""
        shop_settings = barbershop.settings
        shop_hours = ShopHours(
            opening_time=shop_settings.opening_time,
            closing_time=shop_settings.closing_time,
            is_closed=bool(shop_settings.is_closed),
        ) if shop_settings else ShopHours()

        open_slots = AvailabilityService.resolve_slots(
            target_date=data.date,
            work_days=parse_work_days(barber.work_days),
            shop_hours=shop_hours,
            duration_minutes=duration,
            appointments=[],
            now=now or shop_now(barbershop.timezone),
            granularity=settings.SLOT_GRANULARITY_MINUTES,
        )
        if data.time not in open_slots:
            raise ValidationError(
                f"{barber.name} não atende em {data.date.isoformat()} às {data.time}"
            )

    @staticmethod
    def create_appointment(
            db: Session,
            barbershop: Barbershop,
            data: AppointmentCreate,
            created_by_admin: bool = False,
            now: Optional[datetime] = None,
    ) -> Appointment:
        """
        Validate and insert a booking.

        Customer bookings start as `pendente` and are checked against working
        hours; staff bookings (walk-ins) start as `confirmado`. Both are
        checked for overlaps, and the store's unique index is the final word.
        """
        customer_name = (data.customer_name or "").strip()
        if not customer_name:
            raise ValidationError("Customer name is required")

        barber = AppointmentService._get_barber(db, barbershop.id, data.barber_id)

        service_name = (data.service or "").strip()
        price = data.price
        duration = data.duration
        if data.service_id:
            service = db.query(Service).filter(
                Service.id == data.service_id,
                Service.barbershop_id == barbershop.id,
            ).first()
            if not service:
                raise NotFoundError("Service not found")
            service_name = service.name
            price = service.price if price is None else price
            duration = duration or service.duration
        if not service_name:
            raise ValidationError("Service is required")
        duration = duration or settings.DEFAULT_SERVICE_DURATION

        if not created_by_admin:
            AppointmentService._check_bookable(barbershop, barber, data, duration, now)
        AppointmentService._check_overlap(db, barbershop.id, barber, data.date, data.time, duration)

        appointment = Appointment(
            barbershop_id=barbershop.id,
            barber_id=barber.id,
            barber=barber.name,
            customer_name=customer_name,
            customer_phone=data.customer_phone or "Balcão",
            service=service_name,
            date=data.date,
            time=data.time,
            duration=duration,
            price=price or 0,
            original_price=price or 0,
            status=STATUS_CONFIRMED if created_by_admin else STATUS_PENDING,
            created_by_admin=created_by_admin,
            item_type=ITEM_SERVICE,
        )

        db.add(appointment)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"Unique slot constraint rejected booking for {barber.name} at {data.date} {data.time}")
            raise SlotConflictError("Este horário acabou de ser reservado. Escolha outro horário.")
        db.refresh(appointment)

        logger.info(f"Created appointment {appointment.id} ({appointment.status}) for {barber.name}")
        return appointment

    @staticmethod
    def create_appointment_safe(
            db: Session,
            barbershop: Barbershop,
            data: AppointmentCreate,
            created_by_admin: bool = False,
            now: Optional[datetime] = None,
    ) -> SafeBookingResult:
        """Same as create_appointment, reporting failures in the result"""
        try:
            appointment = AppointmentService.create_appointment(
                db, barbershop, data, created_by_admin=created_by_admin, now=now
            )
        except BarbershopError as e:
            return SafeBookingResult(success=False, error=e.message, code=e.code)
        return SafeBookingResult(success=True, appointment_id=str(appointment.id))

    @staticmethod
    def update_status(
            db: Session,
            barbershop_id: UUID,
            appointment_id: UUID,
            new_status: str,
    ) -> Appointment:
        """Approve, reject, cancel or finalize a booking"""
        appointment = AppointmentService._get_appointment(db, barbershop_id, appointment_id)

        if new_status == appointment.status:
            return appointment
        if new_status not in ALLOWED_TRANSITIONS.get(appointment.status, set()):
            raise InvalidTransitionError(
                f"Cannot change appointment from {appointment.status} to {new_status}"
            )

        appointment.status = new_status
        db.commit()
        db.refresh(appointment)
        logger.info(f"Appointment {appointment.id} is now {new_status}")
        return appointment

    @staticmethod
    def cancel_by_customer(
            db: Session,
            barbershop_id: UUID,
            appointment_id: UUID,
            phone: str,
    ) -> Appointment:
        """Customers may cancel their own bookings until the shop confirms them"""
        appointment = AppointmentService._get_appointment(db, barbershop_id, appointment_id)
        key = phone_key(phone)
        if not key or phone_key(appointment.customer_phone) != key:
            raise NotFoundError("Appointment not found")
        if appointment.status == STATUS_CONFIRMED:
            raise InvalidTransitionError(
                "Agendamentos confirmados não podem ser cancelados pelo app. Entre em contato com a barbearia."
            )
        return AppointmentService.update_status(db, barbershop_id, appointment_id, STATUS_CANCELLED)

    @staticmethod
    def reschedule(
            db: Session,
            barbershop_id: UUID,
            appointment_id: UUID,
            barber_id: UUID,
            target_date: date,
            time: str,
    ) -> Appointment:
        """Move a booking (calendar drag and drop)"""
        appointment = AppointmentService._get_appointment(db, barbershop_id, appointment_id)
        if appointment.status not in (STATUS_PENDING, STATUS_CONFIRMED):
            raise InvalidTransitionError(f"A {appointment.status} appointment cannot be moved")

        barber = AppointmentService._get_barber(db, barbershop_id, barber_id)
        duration = appointment.duration or settings.DEFAULT_SERVICE_DURATION
        AppointmentService._check_overlap(
            db, barbershop_id, barber, target_date, time, duration, exclude_id=appointment.id
        )

        appointment.barber_id = barber.id
        appointment.barber = barber.name
        appointment.date = target_date
        appointment.time = time
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise SlotConflictError("Este horário já está ocupado.")
        db.refresh(appointment)
        logger.info(f"Moved appointment {appointment.id} to {barber.name} {target_date} {time}")
        return appointment

    @staticmethod
    def delete_appointment(db: Session, barbershop_id: UUID, appointment_id: UUID):
        """Hard delete; only cancelled bookings may be removed"""
        appointment = AppointmentService._get_appointment(db, barbershop_id, appointment_id)
        if appointment.status != STATUS_CANCELLED:
            raise InvalidTransitionError("Only cancelled appointments can be deleted")
        db.delete(appointment)
        db.commit()
        logger.info(f"Deleted cancelled appointment {appointment_id}")
