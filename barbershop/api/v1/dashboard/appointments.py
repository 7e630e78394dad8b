# ============================================================================
# barbershop/api/v1/dashboard/appointments.py
# Calendar endpoints for the shop owner - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from barbershop.api.dependencies import get_current_barbershop
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.appointment import AppointmentCreate, RescheduleRequest, StatusUpdate
from barbershop.services.appointment.appointment_query_service import AppointmentQueryService
from barbershop.services.appointment.appointment_service import AppointmentService
from barbershop.services.availability.availability_service import shop_now
from barbershop.services.realtime.appointment_feed import AppointmentFeed

router = APIRouter(prefix="/appointments")


@router.get("")
async def list_appointments(
        start_date: Optional[date] = Query(None, description="Appointments on or after this date"),
        end_date: Optional[date] = Query(None, description="Appointments on or before this date"),
        status: Optional[str] = Query(None, description="pendente, confirmado, finalizado or cancelado"),
        barber_id: Optional[UUID] = Query(None, description="Only this professional"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    appointments = AppointmentQueryService.list_appointments(
        db=db,
        barbershop_id=barbershop.id,
        start_date=start_date,
        end_date=end_date,
        status=status,
        barber_id=barber_id,
    )
    return [a.to_dict() for a in appointments]


@router.get("/agenda")
async def day_agenda(
        target_date: Optional[date] = Query(None, alias="date", description="Defaults to today"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Bookings of one day grouped by professional"""
    target_date = target_date or shop_now(barbershop.timezone).date()
    return {
        "date": target_date.isoformat(),
        "agenda": AppointmentQueryService.day_agenda(db, barbershop.id, target_date),
    }


@router.post("", status_code=201)
async def create_walk_in(
        payload: AppointmentCreate,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Staff booking: skips the working-hours check and starts confirmed"""
    appointment = AppointmentService.create_appointment(db, barbershop, payload, created_by_admin=True)
    record = appointment.to_dict()
    await AppointmentFeed.publish(barbershop.id, "INSERT", record)
    return record


@router.patch("/{appointment_id}/status")
async def update_status(
        payload: StatusUpdate,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    appointment = AppointmentService.update_status(db, barbershop.id, appointment_id, payload.status)
    record = appointment.to_dict()
    await AppointmentFeed.publish(barbershop.id, "UPDATE", record)
    return record


@router.patch("/{appointment_id}/reschedule")
async def reschedule(
        payload: RescheduleRequest,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    appointment = AppointmentService.reschedule(
        db, barbershop.id, appointment_id, payload.barber_id, payload.date, payload.time
    )
    record = appointment.to_dict()
    await AppointmentFeed.publish(barbershop.id, "UPDATE", record)
    return record


@router.delete("/{appointment_id}", status_code=204)
async def delete_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Only cancelled appointments can be deleted"""
    AppointmentService.delete_appointment(db, barbershop.id, appointment_id)
    await AppointmentFeed.publish(barbershop.id, "DELETE", old_record={"id": str(appointment_id)})
