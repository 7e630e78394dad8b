from decimal import Decimal

import pytest

from barbershop.core.exceptions import (
    CashSessionClosedError,
    CheckoutError,
    InvalidTransitionError,
    PaymentShortfallError,
    ValidationError,
)
from barbershop.models.appointment import Appointment
from barbershop.models.cash import CashTransaction
from barbershop.models.service import InventoryItem
from barbershop.schemas.appointment import AppointmentCreate
from barbershop.schemas.checkout import CartItem, CheckoutRequest
from barbershop.schemas.customer import CustomerCreate, PackageCreate
from barbershop.services.appointment.appointment_service import AppointmentService
from barbershop.services.availability.availability_service import shop_now
from barbershop.services.cash.cash_service import CashService
from barbershop.services.checkout.checkout_service import CheckoutService
from barbershop.services.commission.commission_service import CommissionService
from barbershop.services.customer.customer_service import CustomerService
from barbershop.services.inventory.inventory_service import InventoryService


@pytest.fixture
def cash_open(db, shop):
    return CashService.open_session(db, shop, Decimal("100"))


def corte_item(services, quantity=1):
    corte = services["corte"]
    return CartItem(item_id=str(corte.id), name=corte.name, price=Decimal("50"), quantity=quantity)


def product_item(pomade, quantity=1):
    return CartItem(item_id=str(pomade.id), name="qualquer", price=Decimal("0"),
                    item_type="produto", quantity=quantity)


def sale_rows(db, venda_id=None):
    query = db.query(Appointment).filter(Appointment.venda_id.isnot(None), Appointment.item_type != "agendamento")
    if venda_id:
        query = query.filter(Appointment.venda_id == venda_id)
    return query.all()


def test_simple_sale_with_tip(db, shop, barber, services, cash_open):
    request = CheckoutRequest(
        barber_id=barber.id,
        items=[corte_item(services)],
        tip=Decimal("10"),
        payment_method="dinheiro",
    )
    result = CheckoutService.finalize(db, shop, request)

    assert result.venda_id.startswith("VENDA-")
    assert result.total == Decimal("60")
    assert result.payment_method_label == "DINHEIRO"

    rows = sale_rows(db, result.venda_id)
    assert len(rows) == 2
    assert all(r.status == "finalizado" for r in rows)
    tip_row = next(r for r in rows if r.item_type == "gorjeta")
    assert tip_row.service == "Caixinha / Gorjeta"
    assert float(tip_row.tip_amount) == 10.0
    service_row = next(r for r in rows if r.item_type == "servico")
    assert float(service_row.commission_rate) == 50.0
    assert service_row.duration == 30

    transaction = db.query(CashTransaction).filter(CashTransaction.venda_id == result.venda_id).one()
    assert transaction.type == "entrada"
    assert float(transaction.amount) == 60.0


def test_quote_writes_nothing(db, shop, barber, services, cash_open):
    request = CheckoutRequest(barber_id=barber.id, items=[corte_item(services, quantity=2)])
    quote = CheckoutService.quote(db, shop, request)

    assert quote.cart.total == Decimal("100")
    assert quote.payment_method_label == "PIX"
    assert sale_rows(db) == []


def test_checkout_requires_open_cash(db, shop, barber, services):
    request = CheckoutRequest(barber_id=barber.id, items=[corte_item(services)])
    with pytest.raises(CashSessionClosedError):
        CheckoutService.finalize(db, shop, request)


def test_shortfall_needs_confirmation(db, shop, barber, services, cash_open):
    request = CheckoutRequest(
        barber_id=barber.id,
        items=[corte_item(services)],
        mixed_payment=True,
        split={"pix": Decimal("40")},
    )
    with pytest.raises(PaymentShortfallError):
        CheckoutService.finalize(db, shop, request)
    assert sale_rows(db) == []

    confirmed = request.model_copy(update={"confirm_discount": True})
    result = CheckoutService.finalize(db, shop, confirmed)
    assert result.payment.nominal_discount == Decimal("10")
    assert result.payment_method_label == "PIX(40.00)"


def test_mixed_payment_net_values(db, shop, barber, services, cash_open):
    request = CheckoutRequest(
        barber_id=barber.id,
        items=[corte_item(services, quantity=2)],
        mixed_payment=True,
        split={"pix": Decimal("60"), "credito": Decimal("40")},
    )
    result = CheckoutService.finalize(db, shop, request)

    assert result.payment_method_label == "PIX(60.00) + CREDITO(40.00)"
    assert result.payment.total_fees == Decimal("2.00")
    rows = sale_rows(db, result.venda_id)
    assert [float(r.net_value) for r in rows] == [49.0, 49.0]


def test_package_redemption(db, shop, barber, services, cash_open):
    customer = CustomerService.create_customer(db, shop.id, CustomerCreate(name="Ana"))
    package = CustomerService.add_package(
        db, shop.id, customer.id,
        PackageCreate(package_name="Pacote Corte", total_credits=4, price_paid=Decimal("120")),
    )
    request = CheckoutRequest(barber_id=barber.id, customer_id=customer.id, items=[corte_item(services)])

    result = CheckoutService.finalize(db, shop, request)

    assert result.payment_method_label == "PACOTE"
    assert result.total == Decimal("120")
    row = sale_rows(db, result.venda_id)[0]
    assert row.service == "Corte (Combo)"
    assert row.is_package_redemption
    assert row.package_id == package.id
    db.refresh(package)
    assert package.used_credits == 1

    second = CheckoutService.finalize(db, shop, request)
    assert second.total == Decimal("0")
    db.refresh(package)
    assert package.used_credits == 2


def test_pacote_without_package_is_rejected(db, shop, barber, services, cash_open):
    request = CheckoutRequest(barber_id=barber.id, items=[corte_item(services)], payment_method="pacote")
    with pytest.raises(ValidationError):
        CheckoutService.finalize(db, shop, request)


def test_products_use_inventory_price_and_decrement_stock(db, shop, barber, pomade, cash_open):
    request = CheckoutRequest(barber_id=barber.id, items=[product_item(pomade, quantity=2)])
    result = CheckoutService.finalize(db, shop, request)

    assert result.total == Decimal("70.00")
    rows = sale_rows(db, result.venda_id)
    assert {r.service for r in rows} == {"Pomada Modeladora"}
    assert all(float(r.product_commission) == 3.5 for r in rows)
    assert all(r.inventory_id == pomade.id for r in rows)
    db.refresh(pomade)
    assert pomade.current_stock == 1


def test_insufficient_stock_writes_nothing(db, shop, barber, pomade, cash_open):
    request = CheckoutRequest(barber_id=barber.id, items=[product_item(pomade, quantity=4)])
    with pytest.raises(ValidationError):
        CheckoutService.finalize(db, shop, request)

    assert sale_rows(db) == []
    db.refresh(pomade)
    assert pomade.current_stock == 3


def test_failed_step_rolls_back_previous_steps(db, shop, barber, pomade, cash_open, monkeypatch):
    def cash_down(*args, **kwargs):
        raise RuntimeError("cash ledger unavailable")

    monkeypatch.setattr(CashService, "record_movement", staticmethod(cash_down))
    request = CheckoutRequest(barber_id=barber.id, items=[product_item(pomade)])

    with pytest.raises(CheckoutError) as exc_info:
        CheckoutService.finalize(db, shop, request)

    assert exc_info.value.failed_step == "record_cash"
    assert sale_rows(db) == []
    stock = db.query(InventoryItem.current_stock).filter(InventoryItem.id == pomade.id).scalar()
    assert stock == 3


def test_checked_out_booking_is_not_counted_twice(db, shop, barber, services, cash_open):
    today = shop_now(shop.timezone).date()
    booking = AppointmentService.create_appointment(
        db, shop,
        AppointmentCreate(barber_id=barber.id, service_id=services["corte"].id, date=today,
                          time="06:00", customer_name="Ana"),
        created_by_admin=True,
    )
    request = CheckoutRequest(
        barber_id=barber.id,
        appointment_id=booking.id,
        items=[corte_item(services)],
        payment_method="pix",
    )
    result = CheckoutService.finalize(db, shop, request)

    db.refresh(booking)
    assert booking.status == "finalizado"
    assert booking.venda_id == result.venda_id

    stats = CashService.day_stats(db, shop.id, today)
    assert stats.total == Decimal("50")
    assert stats.pix == Decimal("50")

    report = CommissionService.build_report(db, shop.id, today, today)
    assert report.barbers[0].services_count == 1
    assert report.barbers[0].total_commission == Decimal("25.00")


def test_finalized_booking_cannot_be_checked_out_again(db, shop, barber, services, cash_open):
    today = shop_now(shop.timezone).date()
    booking = AppointmentService.create_appointment(
        db, shop,
        AppointmentCreate(barber_id=barber.id, service_id=services["corte"].id, date=today,
                          time="06:00", customer_name="Ana"),
        created_by_admin=True,
    )
    request = CheckoutRequest(barber_id=barber.id, appointment_id=booking.id, items=[corte_item(services)])
    CheckoutService.finalize(db, shop, request)

    with pytest.raises(InvalidTransitionError):
        CheckoutService.finalize(db, shop, request)


def test_same_product_on_two_lines_is_checked_as_one(db, shop, barber, pomade, cash_open):
    request = CheckoutRequest(
        barber_id=barber.id,
        items=[product_item(pomade, quantity=2), product_item(pomade, quantity=2)],
        payment_method="pix",
    )
    with pytest.raises(ValidationError):
        CheckoutService.finalize(db, shop, request)

    assert sale_rows(db) == []
    db.refresh(pomade)
    assert pomade.current_stock == 3


def test_same_product_on_two_lines_within_stock(db, shop, barber, pomade, cash_open):
    request = CheckoutRequest(
        barber_id=barber.id,
        items=[product_item(pomade), product_item(pomade, quantity=2)],
        payment_method="pix",
    )
    result = CheckoutService.finalize(db, shop, request)

    assert len(sale_rows(db, result.venda_id)) == 3
    db.refresh(pomade)
    assert pomade.current_stock == 0


def test_stock_step_undoes_its_own_decrements(db, shop, barber, pomade, cash_open, monkeypatch):
    gel = InventoryItem(barbershop_id=shop.id, name="Gel", current_stock=5, min_stock=1,
                        price_cost=Decimal("5"), price_sell=Decimal("20"), commission_rate=Decimal("0"))
    db.add(gel)
    db.commit()

    real_adjust = InventoryService.adjust_stock

    def adjust(db_, barbershop_id, item_id, delta):
        if item_id == gel.id and delta < 0:
            raise RuntimeError("stock table locked")
        return real_adjust(db_, barbershop_id, item_id, delta)

    monkeypatch.setattr(InventoryService, "adjust_stock", staticmethod(adjust))
    request = CheckoutRequest(
        barber_id=barber.id,
        items=[product_item(pomade, quantity=2), product_item(gel)],
        payment_method="pix",
    )
    with pytest.raises(CheckoutError) as exc_info:
        CheckoutService.finalize(db, shop, request)

    assert exc_info.value.failed_step == "decrement_stock"
    assert sale_rows(db) == []
    assert db.query(InventoryItem.current_stock).filter(InventoryItem.id == pomade.id).scalar() == 3
    assert db.query(InventoryItem.current_stock).filter(InventoryItem.id == gel.id).scalar() == 5


def test_pending_booking_is_confirmed_before_it_is_finalized(db, shop, barber, services, cash_open, monkeypatch):
    today = shop_now(shop.timezone).date()
    booking = AppointmentService.create_appointment(
        db, shop,
        AppointmentCreate(barber_id=barber.id, service_id=services["corte"].id, date=today,
                          time="06:00", customer_name="Ana"),
        created_by_admin=True,
    )
    booking.status = "pendente"
    db.commit()

    steps = []
    real_update = AppointmentService.update_status

    def update_status(db_, barbershop_id, appointment_id, new_status):
        steps.append(new_status)
        return real_update(db_, barbershop_id, appointment_id, new_status)

    monkeypatch.setattr(AppointmentService, "update_status", staticmethod(update_status))
    request = CheckoutRequest(barber_id=barber.id, appointment_id=booking.id, items=[corte_item(services)])
    result = CheckoutService.finalize(db, shop, request)

    assert steps == ["confirmado", "finalizado"]
    db.refresh(booking)
    assert booking.status == "finalizado"
    assert booking.item_type == "agendamento"
    assert booking.venda_id == result.venda_id
