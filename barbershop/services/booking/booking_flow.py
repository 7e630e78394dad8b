# ============================================================================
# barbershop/services/booking/booking_flow.py
# ============================================================================
"""
Customer booking wizard as explicit state.

The state is a plain pydantic model and every transition is a pure function
returning a new state, so the public site (or a chat channel) can keep it
serialized between requests.
"""
import datetime as dt
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from barbershop.schemas.appointment import AppointmentCreate, SafeBookingResult

Step = Literal["SERVICES", "PROFESSIONAL", "SLOT", "DETAILS", "DONE"]

STEP_ORDER: List[str] = ["SERVICES", "PROFESSIONAL", "SLOT", "DETAILS", "DONE"]

CONFLICT_MESSAGE = "Este horário acabou de ser reservado. Escolha outro horário."


class SelectedService(BaseModel):
    id: str
    name: str
    price: Decimal = Decimal("0")
    duration: int = 30


class BookingFlowState(BaseModel):
    step: Step = "SERVICES"
    services: List[SelectedService] = Field(default_factory=list)
    barber_id: Optional[str] = None
    barber_name: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    customer_name: str = ""
    customer_phone: str = ""
    appointment_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def total_price(self) -> Decimal:
        return sum((s.price for s in self.services), Decimal("0"))

    @property
    def total_duration(self) -> int:
        return sum(s.duration for s in self.services)

    @property
    def service_label(self) -> str:
        return " + ".join(s.name for s in self.services)


def _update(state: BookingFlowState, **changes) -> BookingFlowState:
    changes.setdefault("error", None)
    return state.model_copy(update=changes)


def toggle_service(state: BookingFlowState, service: SelectedService) -> BookingFlowState:
    """Add the service, or remove it when already selected"""
    if any(s.id == service.id for s in state.services):
        services = [s for s in state.services if s.id != service.id]
    else:
        services = state.services + [service]
    # Total duration changed, a previously picked time may no longer fit
    return _update(state, services=services, time=None)


def confirm_services(state: BookingFlowState) -> BookingFlowState:
    if not state.services:
        return _update(state, error="Selecione pelo menos um serviço")
    return _update(state, step="PROFESSIONAL")


def choose_professional(state: BookingFlowState, barber_id: str, barber_name: str) -> BookingFlowState:
    return _update(
        state,
        step="SLOT",
        barber_id=barber_id,
        barber_name=barber_name,
        date=None,
        time=None,
    )


def choose_date(state: BookingFlowState, date: dt.date) -> BookingFlowState:
    return _update(state, date=date, time=None)


def choose_time(state: BookingFlowState, time: str) -> BookingFlowState:
    if state.date is None:
        return _update(state, error="Selecione uma data")
    return _update(state, step="DETAILS", time=time)


def set_customer_details(state: BookingFlowState, name: str, phone: str = "") -> BookingFlowState:
    name = (name or "").strip()
    if not name:
        return _update(state, customer_phone=phone or "", error="Informe seu nome")
    return _update(state, customer_name=name, customer_phone=phone or "")


def go_back(state: BookingFlowState) -> BookingFlowState:
    index = STEP_ORDER.index(state.step)
    if index == 0 or state.step == "DONE":
        return state
    return _update(state, step=STEP_ORDER[index - 1])


def apply_submit_result(state: BookingFlowState, result: SafeBookingResult) -> BookingFlowState:
    """Advance on success; on a taken slot send the customer back to pick a time"""
    if result.success:
        return _update(state, step="DONE", appointment_id=result.appointment_id)
    if result.code == "slot_conflict":
        return state.model_copy(update={
            "step": "SLOT",
            "time": None,
            "error": result.error or CONFLICT_MESSAGE,
        })
    return state.model_copy(update={"error": result.error})


def to_booking_request(state: BookingFlowState) -> AppointmentCreate:
    """Build the booking payload; raises ValueError while the flow is incomplete"""
    if state.step != "DETAILS":
        raise ValueError(f"Booking cannot be submitted from step {state.step}")
    if not state.customer_name:
        raise ValueError("Customer name is required")
    return AppointmentCreate(
        barber_id=state.barber_id,
        service=state.service_label,
        date=state.date,
        time=state.time,
        customer_name=state.customer_name,
        customer_phone=state.customer_phone or None,
        duration=state.total_duration,
        price=state.total_price,
    )
