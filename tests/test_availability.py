from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from barbershop.core.exceptions import NotFoundError
from barbershop.models.appointment import Appointment
from barbershop.schemas.availability import BookedSlot, ShopHours, WorkDay
from barbershop.services.availability.availability_service import AvailabilityService, weekday_key

MONDAY = date(2030, 1, 7)
SUNDAY = date(2030, 1, 6)
MORNING_WORK = {"1": WorkDay(active=True, start="09:00", end="12:00")}
SHOP = ShopHours(opening_time="08:00", closing_time="20:00")
SHOP_TZ = ZoneInfo("America/Sao_Paulo")
EARLY = datetime(2030, 1, 1, 7, 0, tzinfo=SHOP_TZ)


def resolve(**overrides):
    kwargs = dict(
        target_date=MONDAY,
        work_days=MORNING_WORK,
        shop_hours=SHOP,
        duration_minutes=30,
        appointments=[],
        now=EARLY,
        granularity=15,
    )
    kwargs.update(overrides)
    return AvailabilityService.resolve_slots(**kwargs)


def test_weekday_key_starts_on_sunday():
    assert weekday_key(SUNDAY) == "0"
    assert weekday_key(MONDAY) == "1"
    assert weekday_key(date(2030, 1, 12)) == "6"


def test_slots_fill_working_hours():
    slots = resolve()
    assert slots[0] == "09:00"
    assert slots[-1] == "11:30"
    assert len(slots) == 11


def test_booking_blocks_overlapping_starts_only():
    booked = [BookedSlot(date=MONDAY, time="10:00", duration=30, status="confirmado")]
    slots = resolve(appointments=booked)
    assert "09:45" not in slots
    assert "10:00" not in slots
    assert "10:15" not in slots
    assert "09:30" in slots
    assert "10:30" in slots


def test_cancelled_and_other_day_bookings_are_ignored():
    booked = [
        BookedSlot(date=MONDAY, time="10:00", duration=30, status="cancelado"),
        BookedSlot(date=date(2030, 1, 8), time="09:00", duration=60, status="pendente"),
    ]
    assert resolve(appointments=booked) == resolve()


def test_closed_shop_or_day_off_has_no_slots():
    assert resolve(shop_hours=ShopHours(is_closed=True)) == []
    assert resolve(target_date=SUNDAY) == []
    assert resolve(work_days={"1": WorkDay(active=False)}) == []


def test_past_date_has_no_slots():
    assert resolve(now=datetime(2030, 1, 8, 7, 0, tzinfo=SHOP_TZ)) == []


def test_today_drops_elapsed_times():
    slots = resolve(now=datetime(2030, 1, 7, 10, 5, tzinfo=SHOP_TZ))
    assert slots[0] == "10:15"


def test_shop_hours_clip_working_hours():
    slots = resolve(shop_hours=ShopHours(opening_time="10:00", closing_time="11:00"))
    assert slots == ["10:00", "10:15", "10:30"]


def test_duration_must_fit_before_end():
    slots = resolve(duration_minutes=90)
    assert slots[-1] == "10:30"


def test_get_available_slots_uses_stored_bookings(db, shop, barber):
    db.add(Appointment(
        barbershop_id=shop.id,
        barber_id=barber.id,
        barber=barber.name,
        customer_name="Ana",
        service="Corte",
        date=MONDAY,
        time="09:00",
        duration=60,
        status="pendente",
    ))
    db.commit()

    slots = AvailabilityService.get_available_slots(
        db, shop, barber.id, MONDAY, duration_minutes=30, now=EARLY
    )
    assert "09:00" not in slots
    assert "09:30" not in slots
    assert slots[0] == "10:00"


def test_legacy_rows_match_by_name(db, shop, barber):
    db.add(Appointment(
        barbershop_id=shop.id,
        barber_id=None,
        barber="carlos",
        customer_name="Bia",
        service="Barba",
        date=MONDAY,
        time="09:00",
        duration=30,
        status="confirmado",
    ))
    db.commit()

    slots = AvailabilityService.get_available_slots(db, shop, barber.id, MONDAY, 30, now=EARLY)
    assert slots[0] == "09:30"


def test_unknown_barber(db, shop):
    import uuid

    with pytest.raises(NotFoundError):
        AvailabilityService.get_available_slots(db, shop, uuid.uuid4(), MONDAY, 30, now=EARLY)
