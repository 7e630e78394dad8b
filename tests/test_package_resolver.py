from decimal import Decimal

from barbershop.schemas.checkout import CartItem, PackageInfo
from barbershop.services.pricing.package_resolver import (
    find_eligible_package,
    is_package_eligible,
    resolve_cart,
)

CORTE = CartItem(item_id="s1", name="Corte", price=Decimal("50"))
BARBA = CartItem(item_id="s2", name="Barba", price=Decimal("30"))
POMADA = CartItem(item_id="p1", name="Pomada", price=Decimal("35"), item_type="produto")


def package(used=0, total=4, name="Pacote Corte Mensal", paid="120"):
    return PackageInfo(id="pkg", package_name=name, total_credits=total, used_credits=used,
                       price_paid=Decimal(paid))


def test_without_package_uses_catalog_prices():
    cart = resolve_cart([CORTE.model_copy(update={"quantity": 2}), BARBA], None)
    assert cart.total == Decimal("130")
    assert not cart.has_package_in_cart
    assert cart.credits_consumed == 0


def test_first_redemption_carries_price_paid():
    cart = resolve_cart([CORTE.model_copy(update={"quantity": 2})], package())
    assert cart.lines[0].unit_prices == [Decimal("120"), Decimal("0")]
    assert cart.lines[0].package_units == 2
    assert cart.total == Decimal("120")
    assert cart.credits_consumed == 2


def test_later_redemptions_are_free():
    cart = resolve_cart([CORTE], package(used=1))
    assert cart.total == Decimal("0")
    assert cart.has_package_in_cart


def test_units_beyond_remaining_credits_pay_catalog_price():
    cart = resolve_cart([CORTE.model_copy(update={"quantity": 3})], package(used=3))
    assert cart.lines[0].unit_prices == [Decimal("0"), Decimal("50"), Decimal("50")]
    assert cart.credits_consumed == 1


def test_only_matching_services_are_covered():
    cart = resolve_cart([CORTE, BARBA, POMADA], package(used=1))
    covered = {line.item.name: line.is_package_covered for line in cart.lines}
    assert covered == {"Corte": True, "Barba": False, "Pomada": False}
    assert cart.total == Decimal("65")


def test_combo_package_covers_any_service():
    combo = package(name="Combo")
    assert is_package_eligible(BARBA, combo)
    assert not is_package_eligible(POMADA, combo)


def test_find_eligible_package_skips_exhausted():
    exhausted = package(used=4)
    active = package(used=1, name="Combo")
    assert find_eligible_package([exhausted, active]) is active
    assert find_eligible_package([exhausted]) is None
