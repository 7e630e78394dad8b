# ============================================================================
# barbershop/api/v1/public/booking.py
# Customer-facing booking site endpoints - no authentication
# ============================================================================
from datetime import date
from typing import Optional
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_public_barbershop
from barbershop.config.database import get_db
from barbershop.config.settings import settings
from barbershop.models.appointment import Appointment
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.appointment import AppointmentCreate, CustomerCancelRequest, SafeBookingResult
from barbershop.schemas.availability import AvailabilityResponse
from barbershop.services.appointment.appointment_query_service import AppointmentQueryService
from barbershop.services.appointment.appointment_service import AppointmentService
from barbershop.services.availability.availability_service import AvailabilityService, shop_now
from barbershop.services.barber.barber_service import BarberService
from barbershop.services.catalog.catalog_service import CatalogService
from barbershop.services.booking.booking_flow import (
    BookingFlowState,
    apply_submit_result,
    to_booking_request,
)
from barbershop.services.realtime.appointment_feed import AppointmentFeed
from barbershop.tasks.notification_tasks import send_booking_notifications

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shops/{slug}")

ERROR_STATUS = {"slot_conflict": 409, "validation_error": 422, "not_found": 404}


async def announce_booking(db: Session, barbershop: Barbershop, appointment_id: str):
    """Realtime event and WhatsApp notifications for a new booking; failures are logged only"""
    appointment = db.get(Appointment, UUID(appointment_id))
    record = appointment.to_dict()
    await AppointmentFeed.publish(barbershop.id, "INSERT", record)
    try:
        send_booking_notifications.delay(record, barbershop.name, barbershop.phone)
    except Exception as e:
        logger.error(f"Could not queue booking notifications for {appointment_id}: {e}")


@router.get("")
async def get_shop(barbershop: Barbershop = Depends(get_public_barbershop)):
    data = barbershop.to_dict()
    data["settings"] = barbershop.settings.to_dict() if barbershop.settings else None
    return data


@router.get("/services")
async def list_services(
        barbershop: Barbershop = Depends(get_public_barbershop),
        db: Session = Depends(get_db),
):
    services = CatalogService.list_services(db, barbershop.id, include_inactive=False)
    return [s.to_dict() for s in services]


@router.get("/barbers")
async def list_barbers(
        barbershop: Barbershop = Depends(get_public_barbershop),
        db: Session = Depends(get_db),
):
    barbers = BarberService.list_barbers(db, barbershop.id, include_inactive=False)
    return [b.to_dict() for b in barbers]


@router.get("/availability", response_model=AvailabilityResponse)
async def get_availability(
        barber_id: UUID = Query(..., description="Professional to book"),
        target_date: date = Query(..., alias="date", description="Day to check (YYYY-MM-DD)"),
        duration: Optional[int] = Query(None, gt=0, le=24 * 60, description="Total service minutes"),
        barbershop: Barbershop = Depends(get_public_barbershop),
        db: Session = Depends(get_db),
):
    """Start times still open for the professional, recomputed on every call"""
    slots = AvailabilityService.get_available_slots(
        db=db,
        barbershop=barbershop,
        barber_id=barber_id,
        target_date=target_date,
        duration_minutes=duration,
    )
    return AvailabilityResponse(
        barber_id=str(barber_id),
        date=target_date,
        duration=duration or settings.DEFAULT_SERVICE_DURATION,
        slots=slots,
    )


@router.post("/appointments", response_model=SafeBookingResult)
async def create_appointment(
        payload: AppointmentCreate,
        barbershop: Barbershop = Depends(get_public_barbershop),
        db: Session = Depends(get_db),
):
    """Book a slot; a taken slot answers 409 with `success: false`"""
    result = AppointmentService.create_appointment_safe(db, barbershop, payload)
    if not result.success:
        return JSONResponse(status_code=ERROR_STATUS.get(result.code, 400), content=result.model_dump())

    await announce_booking(db, barbershop, result.appointment_id)
    return result


@router.post("/booking-flow/submit", response_model=BookingFlowState)
async def submit_booking_flow(
        state: BookingFlowState,
        barbershop: Barbershop = Depends(get_public_barbershop),
        db: Session = Depends(get_db),
):
    """Submit a wizard state and get the next state back"""
    try:
        request = to_booking_request(state)
    except ValueError as e:
        return state.model_copy(update={"error": str(e)})

    result = AppointmentService.create_appointment_safe(db, barbershop, request)
    if result.success:
        await announce_booking(db, barbershop, result.appointment_id)
    return apply_submit_result(state, result)


@router.get("/my-appointments")
async def my_appointments(
        phone: str = Query(..., min_length=8, description="Phone used when booking"),
        barbershop: Barbershop = Depends(get_public_barbershop),
        db: Session = Depends(get_db),
):
    """The customer's upcoming bookings, matched by phone number"""
    today = shop_now(barbershop.timezone).date()
    appointments = AppointmentQueryService.customer_appointments(db, barbershop.id, phone, today)
    return [a.to_dict() for a in appointments]


@router.post("/my-appointments/{appointment_id}/cancel")
async def cancel_my_appointment(
        payload: CustomerCancelRequest,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        barbershop: Barbershop = Depends(get_public_barbershop),
        db: Session = Depends(get_db),
):
    appointment = AppointmentService.cancel_by_customer(db, barbershop.id, appointment_id, payload.phone)
    record = appointment.to_dict()
    await AppointmentFeed.publish(barbershop.id, "UPDATE", record)
    return record
