from datetime import date

import pytest

from barbershop.core.exceptions import InvalidTransitionError, NotFoundError, SlotConflictError, ValidationError
from barbershop.models.appointment import Appointment
from barbershop.schemas.appointment import AppointmentCreate
from barbershop.services.appointment.appointment_query_service import AppointmentQueryService
from barbershop.services.appointment.appointment_service import AppointmentService

MONDAY = date(2030, 1, 7)


def booking(barber, services, time="10:00", name="Ana", phone="11999990000", **extra):
    return AppointmentCreate(
        barber_id=barber.id,
        service_id=services["corte"].id,
        date=MONDAY,
        time=time,
        customer_name=name,
        customer_phone=phone,
        **extra,
    )


def test_customer_booking_starts_pending_with_catalog_values(db, shop, barber, services, shop_morning):
    appointment = AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)

    assert appointment.status == "pendente"
    assert appointment.service == "Corte"
    assert appointment.duration == 30
    assert float(appointment.price) == 50.0
    assert appointment.barber == "Carlos"


def test_overlapping_booking_is_rejected(db, shop, barber, services, shop_morning):
    AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)

    with pytest.raises(SlotConflictError):
        AppointmentService.create_appointment(
            db, shop, booking(barber, services, time="10:15", name="Bia"), now=shop_morning
        )


def test_adjacent_booking_is_accepted(db, shop, barber, services, shop_morning):
    AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    second = AppointmentService.create_appointment(
        db, shop, booking(barber, services, time="10:30", name="Bia"), now=shop_morning
    )
    assert second.time == "10:30"


def test_safe_booking_reports_conflict(db, shop, barber, services, shop_morning):
    AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    result = AppointmentService.create_appointment_safe(
        db, shop, booking(barber, services, name="Bia"), now=shop_morning
    )

    assert not result.success
    assert result.code == "slot_conflict"
    assert result.error


def test_customer_booking_outside_hours_is_rejected(db, shop, barber, services, shop_morning):
    with pytest.raises(ValidationError):
        AppointmentService.create_appointment(
            db, shop, booking(barber, services, time="06:00"), now=shop_morning
        )


def test_walk_in_skips_hours_and_is_confirmed(db, shop, barber, services, shop_morning):
    appointment = AppointmentService.create_appointment(
        db, shop, booking(barber, services, time="06:00"), created_by_admin=True, now=shop_morning
    )
    assert appointment.status == "confirmado"
    assert appointment.created_by_admin


def test_name_is_required(db, shop, barber, services, shop_morning):
    with pytest.raises(ValidationError):
        AppointmentService.create_appointment(
            db, shop, booking(barber, services, name="   "), now=shop_morning
        )


def test_status_machine(db, shop, barber, services, shop_morning):
    appointment = AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)

    with pytest.raises(InvalidTransitionError):
        AppointmentService.update_status(db, shop.id, appointment.id, "finalizado")

    AppointmentService.update_status(db, shop.id, appointment.id, "confirmado")
    AppointmentService.update_status(db, shop.id, appointment.id, "finalizado")

    with pytest.raises(InvalidTransitionError):
        AppointmentService.update_status(db, shop.id, appointment.id, "cancelado")


def test_same_status_is_a_no_op(db, shop, barber, services, shop_morning):
    appointment = AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    assert AppointmentService.update_status(db, shop.id, appointment.id, "pendente").status == "pendente"


def test_cancelled_slot_can_be_booked_again(db, shop, barber, services, shop_morning):
    first = AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    AppointmentService.update_status(db, shop.id, first.id, "cancelado")

    again = AppointmentService.create_appointment(
        db, shop, booking(barber, services, name="Bia"), now=shop_morning
    )
    assert again.status == "pendente"


def test_reschedule(db, shop, barber, services, shop_morning):
    first = AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    other = AppointmentService.create_appointment(
        db, shop, booking(barber, services, time="14:00", name="Bia"), now=shop_morning
    )

    moved = AppointmentService.reschedule(db, shop.id, first.id, barber.id, MONDAY, "10:15")
    assert moved.time == "10:15"

    with pytest.raises(SlotConflictError):
        AppointmentService.reschedule(db, shop.id, first.id, barber.id, MONDAY, "14:00")

    AppointmentService.update_status(db, shop.id, other.id, "confirmado")
    AppointmentService.update_status(db, shop.id, other.id, "finalizado")
    with pytest.raises(InvalidTransitionError):
        AppointmentService.reschedule(db, shop.id, other.id, barber.id, MONDAY, "16:00")


def test_only_cancelled_can_be_deleted(db, shop, barber, services, shop_morning):
    appointment = AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)

    with pytest.raises(InvalidTransitionError):
        AppointmentService.delete_appointment(db, shop.id, appointment.id)

    AppointmentService.update_status(db, shop.id, appointment.id, "cancelado")
    AppointmentService.delete_appointment(db, shop.id, appointment.id)
    assert AppointmentQueryService.list_appointments(db, shop.id) == []


def test_day_agenda_groups_by_professional(db, shop, barber, services, shop_morning):
    AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    cancelled = AppointmentService.create_appointment(
        db, shop, booking(barber, services, time="11:00", name="Bia"), now=shop_morning
    )
    AppointmentService.update_status(db, shop.id, cancelled.id, "cancelado")

    agenda = AppointmentQueryService.day_agenda(db, shop.id, MONDAY)
    assert list(agenda) == ["Carlos"]
    assert [a["customer_name"] for a in agenda["Carlos"]] == ["Ana"]


def test_unique_index_rejects_a_slot_the_overlap_check_missed(db, shop, barber, services, shop_morning, monkeypatch):
    AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    # Another request wrote the slot between the overlap check and the insert
    monkeypatch.setattr(AppointmentService, "_check_overlap", staticmethod(lambda *args, **kwargs: None))

    result = AppointmentService.create_appointment_safe(
        db, shop, booking(barber, services, name="Bia"), now=shop_morning
    )

    assert not result.success
    assert result.code == "slot_conflict"
    assert db.query(Appointment).filter(Appointment.date == MONDAY, Appointment.time == "10:00").count() == 1


def test_reschedule_into_a_taken_slot_hits_the_unique_index(db, shop, barber, services, shop_morning, monkeypatch):
    AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    other = AppointmentService.create_appointment(
        db, shop, booking(barber, services, time="14:00", name="Bia"), now=shop_morning
    )
    monkeypatch.setattr(AppointmentService, "_check_overlap", staticmethod(lambda *args, **kwargs: None))

    with pytest.raises(SlotConflictError):
        AppointmentService.reschedule(db, shop.id, other.id, barber.id, MONDAY, "10:00")

    db.refresh(other)
    assert other.time == "14:00"


def test_customer_sees_own_upcoming_bookings(db, shop, barber, services, shop_morning):
    AppointmentService.create_appointment(db, shop, booking(barber, services, time="11:00"), now=shop_morning)
    AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    AppointmentService.create_appointment(
        db, shop, booking(barber, services, time="14:00", name="Bia", phone="11988887777"), now=shop_morning
    )

    mine = AppointmentQueryService.customer_appointments(db, shop.id, "+55 (11) 99999-0000", MONDAY)
    assert [a.time for a in mine] == ["10:00", "11:00"]
    assert AppointmentQueryService.customer_appointments(db, shop.id, "11999990000", date(2030, 1, 8)) == []

    with pytest.raises(ValidationError):
        AppointmentQueryService.customer_appointments(db, shop.id, "123", MONDAY)


def test_customer_cancels_only_pending_bookings(db, shop, barber, services, shop_morning):
    pending = AppointmentService.create_appointment(db, shop, booking(barber, services), now=shop_morning)
    confirmed = AppointmentService.create_appointment(
        db, shop, booking(barber, services, time="11:00"), now=shop_morning
    )
    AppointmentService.update_status(db, shop.id, confirmed.id, "confirmado")

    with pytest.raises(NotFoundError):
        AppointmentService.cancel_by_customer(db, shop.id, pending.id, "11911112222")
    with pytest.raises(InvalidTransitionError):
        AppointmentService.cancel_by_customer(db, shop.id, confirmed.id, "11999990000")

    cancelled = AppointmentService.cancel_by_customer(db, shop.id, pending.id, "(11) 99999-0000")
    assert cancelled.status == "cancelado"
