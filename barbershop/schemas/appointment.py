"""
Pydantic schemas for booking and agenda operations
"""
import datetime as dt
import re
from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

AppointmentStatus = Literal["pendente", "confirmado", "finalizado", "cancelado"]


def _validate_time(value: str) -> str:
    if not TIME_PATTERN.match(value or ""):
        raise ValueError("time must be in HH:MM format")
    return value


class AppointmentCreate(BaseModel):
    """Booking request from the public site or the admin calendar"""
    barber_id: UUID
    service_id: Optional[UUID] = None
    service: Optional[str] = Field(None, max_length=200)
    date: dt.date
    time: str
    customer_name: str = Field("", max_length=200)
    customer_phone: Optional[str] = Field(None, max_length=30)
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    price: Optional[Decimal] = Field(None, ge=0)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return _validate_time(v)


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class RescheduleRequest(BaseModel):
    """Move a booking to another professional, day or time"""
    barber_id: UUID
    date: dt.date
    time: str

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return _validate_time(v)


class SafeBookingResult(BaseModel):
    """Result shape of the atomic booking call"""
    success: bool
    appointment_id: Optional[str] = None
    error: Optional[str] = None
    code: Optional[str] = None


class CustomerCancelRequest(BaseModel):
    """The phone used at booking time identifies the customer"""
    phone: str = Field(..., min_length=1, max_length=30)
