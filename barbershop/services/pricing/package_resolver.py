# barbershop/services/pricing/package_resolver.py
"""
Package (combo) pricing.

A cart line is covered by the customer's package when it is a service whose
name appears in the package name, or when the package is simply called
"combo". The whole amount paid for the package is attributed to its first
redemption; later redemptions are priced at zero.
"""
from decimal import Decimal
from typing import Iterable, List, Optional

from barbershop.schemas.checkout import CartItem, PackageInfo, PricedCart, PricedLine

ZERO = Decimal("0")


def find_eligible_package(packages: Iterable[PackageInfo]) -> Optional[PackageInfo]:
    """First package that still has credits, in the order given"""
    for package in packages:
        if package.is_active:
            return package
    return None


def is_package_eligible(item: CartItem, package: Optional[PackageInfo]) -> bool:
    if package is None or item.item_type != "servico":
        return False
    package_name = package.package_name.strip().lower()
    service_name = item.name.strip().lower()
    return package_name == "combo" or (bool(service_name) and service_name in package_name)


def resolve_cart(items: Iterable[CartItem], package: Optional[PackageInfo]) -> PricedCart:
    """
    Price every unit in the cart.

    Units covered by the package never exceed its remaining credits; extra
    units fall back to the catalog price. Only one unit per cart can carry
    the package price, and only when no credit was used before.
    """
    remaining = package.remaining_credits if package else 0
    first_redemption_pending = package is not None and package.used_credits == 0

    lines: List[PricedLine] = []
    consumed = 0
    for item in items:
        eligible = is_package_eligible(item, package)
        unit_prices = []
        package_units = 0
        for _ in range(item.quantity):
            if eligible and remaining > 0:
                if first_redemption_pending:
                    unit_prices.append(package.price_paid)
                    first_redemption_pending = False
                else:
                    unit_prices.append(ZERO)
                remaining -= 1
                package_units += 1
            else:
                unit_prices.append(item.price)
        consumed += package_units
        lines.append(PricedLine(item=item, unit_prices=unit_prices, package_units=package_units))

    total = sum((line.line_total for line in lines), ZERO)
    return PricedCart(
        lines=lines,
        total=total,
        has_package_in_cart=consumed > 0,
        credits_consumed=consumed,
    )
