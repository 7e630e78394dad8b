# ===== barbershop/services/availability/availability_service.py =====
from typing import Dict, Iterable, List, Optional
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo
from sqlalchemy.orm import Session
import logging

from barbershop.config.settings import get_settings
from barbershop.core.exceptions import NotFoundError
from barbershop.models.appointment import (
    Appointment, ITEM_CHECKED_OUT, ITEM_SERVICE, STATUS_CANCELLED
)
from barbershop.models.barber import Barber
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.availability import BookedSlot, ShopHours, WorkDay, parse_work_days
from barbershop.services.availability.slots import intervals_overlap, minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)
settings = get_settings()

MINUTES_PER_DAY = 24 * 60


def weekday_key(target_date: date) -> str:
    """Key used in Barber.work_days: "0" is Sunday, "6" is Saturday"""
    return str((target_date.weekday() + 1) % 7)


def shop_now(timezone_name: Optional[str]) -> datetime:
    """Current wall-clock time at the shop"""
    try:
        tz = ZoneInfo(timezone_name or settings.DEFAULT_TIMEZONE)
    except (KeyError, ValueError):
        logger.warning(f"Unknown timezone {timezone_name!r}, using {settings.DEFAULT_TIMEZONE}")
        tz = ZoneInfo(settings.DEFAULT_TIMEZONE)
    return datetime.now(tz)


class AvailabilityService:
    """Computes which start times a professional can still be booked at"""

    @staticmethod
    def resolve_slots(
            target_date: date,
            work_days: Dict[str, WorkDay],
            shop_hours: ShopHours,
            duration_minutes: int,
            appointments: Iterable[BookedSlot],
            now: datetime,
            granularity: int = 15,
    ) -> List[str]:
        """
        Enumerate the offerable "HH:MM" start times for one professional and date.

        `appointments` are that professional's bookings; cancelled ones and other
        dates are ignored here. `now` must already be in the shop's timezone.
        The result depends only on the arguments.
        """
        if shop_hours.is_closed:
            return []

        day = work_days.get(weekday_key(target_date))
        if day is None or not day.active:
            return []

        duration = duration_minutes or settings.DEFAULT_SERVICE_DURATION
        shop_open = time_to_minutes(shop_hours.opening_time)
        shop_close = time_to_minutes(shop_hours.closing_time)
        work_start = time_to_minutes(day.start)
        work_end = time_to_minutes(day.end)

        busy = [
            (time_to_minutes(appt.time), appt.duration or settings.DEFAULT_SERVICE_DURATION)
            for appt in appointments
            if appt.date == target_date and appt.status != STATUS_CANCELLED
        ]

        today = now.date()
        if target_date < today:
            return []
        cutoff = now.hour * 60 + now.minute if target_date == today else -1

        slots = []
        for start in range(0, MINUTES_PER_DAY, granularity):
            end = start + duration
            if start < shop_open or end > shop_close:
                continue
            if start < work_start or end > work_end:
                continue
            if start <= cutoff:
                continue
            if any(intervals_overlap(start, duration, b_start, b_dur) for b_start, b_dur in busy):
                continue
            slots.append(minutes_to_time(start))

        return slots

    @staticmethod
    def booked_slots_for(
            db: Session,
            barbershop_id: UUID,
            barber: Barber,
            target_date: date,
            exclude_id: Optional[UUID] = None,
    ) -> List[BookedSlot]:
        """Load a professional's non-cancelled bookings for a date"""
        query = db.query(Appointment).filter(
            Appointment.barbershop_id == barbershop_id,
            Appointment.date == target_date,
            Appointment.status != STATUS_CANCELLED,
            Appointment.item_type.in_((ITEM_SERVICE, ITEM_CHECKED_OUT)),
        )
        if exclude_id:
            query = query.filter(Appointment.id != exclude_id)

        booked = []
        for appt in query.all():
            # Legacy rows only carry the display name
            if appt.barber_id == barber.id or (
                    appt.barber_id is None and (appt.barber or "").lower() == barber.name.lower()
            ):
                booked.append(BookedSlot(
                    date=appt.date,
                    time=appt.time,
                    duration=appt.duration,
                    status=appt.status,
                ))
        return booked

    @staticmethod
    def get_available_slots(
            db: Session,
            barbershop: Barbershop,
            barber_id: UUID,
            target_date: date,
            duration_minutes: Optional[int] = None,
            now: Optional[datetime] = None,
    ) -> List[str]:
        """Resolve slots from the stored barber config, shop hours and bookings"""
        barber = db.query(Barber).filter(
            Barber.id == barber_id,
            Barber.barbershop_id == barbershop.id,
        ).first()
        if not barber:
            raise NotFoundError("Professional not found")

        shop_settings = barbershop.settings
        shop_hours = ShopHours(
            opening_time=shop_settings.opening_time,
            closing_time=shop_settings.closing_time,
            is_closed=bool(shop_settings.is_closed),
        ) if shop_settings else ShopHours()

        slots = AvailabilityService.resolve_slots(
            target_date=target_date,
            work_days=parse_work_days(barber.work_days),
            shop_hours=shop_hours,
            duration_minutes=duration_minutes or settings.DEFAULT_SERVICE_DURATION,
            appointments=AvailabilityService.booked_slots_for(db, barbershop.id, barber, target_date),
            now=now or shop_now(barbershop.timezone),
            granularity=settings.SLOT_GRANULARITY_MINUTES,
        )
        logger.info(f"Resolved {len(slots)} slots for barber {barber_id} on {target_date}")
        return slots
