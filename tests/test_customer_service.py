import uuid
from datetime import date
from decimal import Decimal

import pytest

from barbershop.core.exceptions import NotFoundError, ValidationError
from barbershop.models.barbershop import Barbershop
from barbershop.models.customer import CustomerPackage
from barbershop.schemas.customer import CustomerCreate, CustomerUpdate, PackageCreate
from barbershop.services.customer.customer_service import CustomerService


@pytest.fixture
def ana(db, shop):
    return CustomerService.create_customer(
        db, shop.id, CustomerCreate(name=" Ana Souza ", phone="(11) 99999-0000", birth_date=date(1990, 3, 15))
    )


@pytest.fixture
def combo(db, shop, ana):
    return CustomerService.add_package(
        db, shop.id, ana.id, PackageCreate(package_name="Combo", total_credits=4, price_paid=Decimal("150"))
    )


def test_create_customer_defaults(db, shop, ana):
    assert ana.name == "Ana Souza"
    bruno = CustomerService.create_customer(db, shop.id, CustomerCreate(name="Bruno"))
    assert bruno.phone == "Sem Telefone"


def test_search_customers(db, shop, ana):
    CustomerService.create_customer(db, shop.id, CustomerCreate(name="Bruno"))
    assert [c.name for c in CustomerService.list_customers(db, shop.id, search="ana")] == ["Ana Souza"]
    assert len(CustomerService.list_customers(db, shop.id)) == 2


def test_update_clears_phone_to_default(db, shop, ana):
    updated = CustomerService.update_customer(db, shop.id, ana.id, CustomerUpdate(phone=""))
    assert updated.phone == "Sem Telefone"
    assert updated.name == "Ana Souza"


def test_deleting_customer_removes_packages(db, shop, ana, combo):
    CustomerService.delete_customer(db, shop.id, ana.id)
    assert db.query(CustomerPackage).count() == 0
    with pytest.raises(NotFoundError):
        CustomerService.get_customer(db, shop.id, ana.id)


def test_consume_and_restore_credits(db, shop, combo):
    package = CustomerService.consume_credits(db, shop.id, combo.id, 3)
    assert package.used_credits == 3

    with pytest.raises(ValidationError):
        CustomerService.consume_credits(db, shop.id, combo.id, 2)

    assert CustomerService.restore_credits(db, shop.id, combo.id, 5).used_credits == 0


def test_total_credits_cannot_drop_below_used(db, shop, combo):
    CustomerService.consume_credits(db, shop.id, combo.id, 2)
    with pytest.raises(ValidationError):
        CustomerService.update_total_credits(db, shop.id, combo.id, 1)
    assert CustomerService.update_total_credits(db, shop.id, combo.id, 10).total_credits == 10


def test_packages_are_scoped_to_the_shop(db, shop, combo):
    other = Barbershop(owner_id=uuid.uuid4(), name="Outra", slug="outra")
    db.add(other)
    db.commit()
    with pytest.raises(NotFoundError):
        CustomerService.get_package(db, other.id, combo.id)


def test_birthdays(db, shop, ana):
    CustomerService.create_customer(db, shop.id, CustomerCreate(name="Bruno", birth_date=date(1985, 7, 1)))
    assert [c.name for c in CustomerService.birthdays_on(db, shop.id, date(2030, 3, 15))] == ["Ana Souza"]
    assert CustomerService.birthdays_on(db, shop.id, date(2030, 3, 16)) == []


def test_birthday_message_and_link(shop):
    message = CustomerService.birthday_message(shop, "Ana")
    assert "Feliz Aniversário, Ana!" in message
    assert "/barbearia-do-ze" in message

    link = CustomerService.whatsapp_link("(11) 99999-0000", "Oi Ana")
    assert link == "https://api.whatsapp.com/send?phone=5511999990000&text=Oi+Ana"
    assert CustomerService.whatsapp_link("Sem Telefone", "Oi") is None
