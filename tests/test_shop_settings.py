import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from barbershop.core.exceptions import ConflictError, NotFoundError, ValidationError
from barbershop.models.appointment import Appointment
from barbershop.schemas.appointment import AppointmentCreate
from barbershop.schemas.availability import WorkDay
from barbershop.schemas.barber import BarberCreate, BarberUpdate
from barbershop.schemas.barbershop import BarbershopCreate, BarbershopSettingsUpdate
from barbershop.schemas.catalog import ServiceCreate, ServiceUpdate
from barbershop.services.appointment.appointment_service import AppointmentService
from barbershop.services.availability.availability_service import AvailabilityService
from barbershop.services.barber.barber_service import BarberService
from barbershop.services.barbershop.barbershop_service import BarbershopService, normalize_slug
from barbershop.services.billing.billing_service import SubscriptionStatus
from barbershop.services.catalog.catalog_service import CatalogService

NOON_UTC = datetime(2030, 3, 4, 15, 0, tzinfo=timezone.utc)
MONDAY = date(2030, 1, 7)
SUNDAY = date(2030, 1, 6)


def test_normalize_slug():
    assert normalize_slug("Barbearia do Zé") == "barbearia-do-ze"
    assert normalize_slug("  Corte & Estilo!! ") == "corte-estilo"
    assert normalize_slug("!!!") == ""


def test_new_shop_gets_defaults_and_trial(db):
    owner = uuid.uuid4()
    shop = BarbershopService.create_barbershop(
        db, owner, BarbershopCreate(name="Navalha de Ouro", address="Rua A, 10"), now=NOON_UTC
    )

    assert shop.slug == "navalha-de-ouro"
    assert shop.subscription_status == "trialing"
    assert shop.settings.opening_time == "08:00"
    assert shop.settings.fee_table()["credito"] == Decimal("4.99")

    status = SubscriptionStatus.evaluate(shop, NOON_UTC.date())
    assert status.days_remaining == 20
    assert status.is_operationally_active


def test_one_shop_per_owner_and_unique_slug(db, shop):
    with pytest.raises(ConflictError):
        BarbershopService.create_barbershop(db, shop.owner_id, BarbershopCreate(name="Segunda Loja"))

    with pytest.raises(ConflictError):
        BarbershopService.create_barbershop(db, uuid.uuid4(), BarbershopCreate(name="Barbearia do Zé"))

    with pytest.raises(ValidationError):
        BarbershopService.create_barbershop(db, uuid.uuid4(), BarbershopCreate(name="Loja", slug="!!!"))


def test_update_settings(db, shop):
    updated = BarbershopService.update_settings(
        db, shop, BarbershopSettingsUpdate(opening_time="09:30", fee_pix=Decimal("0.99"))
    )
    assert updated.opening_time == "09:30"
    assert updated.closing_time == "20:00"
    assert updated.fee_pix == Decimal("0.99")

    with pytest.raises(ValidationError):
        BarbershopService.update_settings(db, shop, BarbershopSettingsUpdate(closing_time="09:00"))
    db.refresh(shop.settings)
    assert shop.settings.closing_time == "20:00"


def test_closed_shop_has_no_slots(db, shop, barber, shop_morning):
    BarbershopService.update_settings(db, shop, BarbershopSettingsUpdate(is_closed=True))
    db.refresh(shop)
    slots = AvailabilityService.get_available_slots(db, shop, barber.id, MONDAY, 30, now=shop_morning)
    assert slots == []


def test_new_barber_works_monday_to_saturday(db, shop):
    barber = BarberService.create_barber(db, shop.id, BarberCreate(name="Diego", commission_rate=Decimal("40")))

    assert barber.work_days["1"] == {"active": True, "start": "09:00", "end": "19:00"}
    assert barber.work_days["0"]["active"] is False
    assert barber.commission_rate == Decimal("40")


def test_barber_hours_drive_availability(db, shop, barber, shop_morning):
    BarberService.update_barber(
        db, shop.id, barber.id,
        BarberUpdate(work_days={"1": WorkDay(active=True, start="14:00", end="16:00")}),
    )
    db.refresh(barber)

    slots = AvailabilityService.get_available_slots(db, shop, barber.id, MONDAY, 30, now=shop_morning)
    assert slots[0] == "14:00"
    assert slots[-1] == "15:30"
    # other days keep their hours
    assert barber.work_days["0"]["start"] == "09:00"


def test_invalid_work_days_are_rejected(db, shop, barber):
    with pytest.raises(ValidationError):
        BarberService.update_barber(
            db, shop.id, barber.id, BarberUpdate(work_days={"7": WorkDay(active=True)})
        )
    with pytest.raises(ValidationError):
        BarberService.update_barber(
            db, shop.id, barber.id,
            BarberUpdate(work_days={"1": WorkDay(active=True, start="18:00", end="09:00")}),
        )


def test_removed_barber_leaves_history(db, shop, barber, services):
    booking = AppointmentService.create_appointment(
        db, shop,
        AppointmentCreate(barber_id=barber.id, service_id=services["corte"].id, date=SUNDAY,
                          time="10:00", customer_name="Ana"),
        created_by_admin=True,
    )
    BarberService.delete_barber(db, shop.id, barber.id)

    row = db.get(Appointment, booking.id)
    assert row.barber == "Carlos"
    assert row.status == "confirmado"
    with pytest.raises(NotFoundError):
        BarberService.get_barber(db, shop.id, barber.id)


def test_service_catalog(db, shop, services):
    created = CatalogService.create_service(
        db, shop.id, ServiceCreate(name="Sobrancelha", price=Decimal("15"), duration=10)
    )
    assert [s.name for s in CatalogService.list_services(db, shop.id)] == ["Barba", "Corte", "Sobrancelha"]

    CatalogService.update_service(db, shop.id, created.id, ServiceUpdate(is_active=False, price=Decimal("20")))
    active = CatalogService.list_services(db, shop.id, include_inactive=False)
    assert [s.name for s in active] == ["Barba", "Corte"]
    assert CatalogService.get_service(db, shop.id, created.id).price == Decimal("20")

    CatalogService.delete_service(db, shop.id, created.id)
    with pytest.raises(NotFoundError):
        CatalogService.get_service(db, shop.id, created.id)
