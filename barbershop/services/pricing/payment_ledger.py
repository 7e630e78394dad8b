# barbershop/services/pricing/payment_ledger.py
"""
Split-payment arithmetic for the counter checkout.

Amounts are Decimal and fees are rounded to cents per method, so the net
total always reconciles exactly with tendered minus fees.
"""
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Mapping, Optional

from barbershop.schemas.checkout import PAYMENT_METHODS, MethodBreakdown, PaymentSummary

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
DISCOUNT_EPSILON = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_split(
        cart_total,
        tip,
        tendered: Mapping[str, object],
        fees: Mapping[str, object],
        has_package_in_cart: bool = False,
) -> PaymentSummary:
    """Fees, net receivable and nominal discount for a set of tendered amounts"""
    total_due = to_decimal(cart_total) + to_decimal(tip)
    total_tendered = sum((to_decimal(tendered.get(m)) for m in PAYMENT_METHODS), ZERO)
    nominal_discount = max(ZERO, total_due - total_tendered)

    methods = []
    for method in PAYMENT_METHODS:
        amount = to_decimal(tendered.get(method))
        if amount <= 0:
            continue
        fee_percent = to_decimal(fees.get(method))
        fee_amount = money(amount * fee_percent / HUNDRED)
        methods.append(MethodBreakdown(
            method=method,
            amount=amount,
            fee_percent=fee_percent,
            fee_amount=fee_amount,
            net_amount=amount - fee_amount,
        ))

    total_fees = sum((m.fee_amount for m in methods), ZERO)
    net_total = sum((m.net_amount for m in methods), ZERO)

    return PaymentSummary(
        total_due=total_due,
        total_tendered=total_tendered,
        nominal_discount=nominal_discount,
        total_fees=total_fees,
        net_total=net_total,
        methods=methods,
        requires_discount_confirmation=(
            not has_package_in_cart and nominal_discount > DISCOUNT_EPSILON
        ),
    )


def line_net_value(
        line_price,
        tendered: Mapping[str, object],
        fees: Mapping[str, object],
        total_due,
        mixed_payment: bool,
        payment_method: str,
) -> Decimal:
    """
    Net value of one sold unit after payment fees, used for commissions.

    With mixed payment the unit is split across methods in proportion to
    each method's share of the total due.
    """
    price = to_decimal(line_price)
    if price <= 0:
        return ZERO

    if not mixed_payment:
        fee_percent = to_decimal(fees.get(payment_method))
        return money(price * (1 - fee_percent / HUNDRED))

    due = to_decimal(total_due)
    if due <= 0:
        return ZERO

    net = ZERO
    for method in PAYMENT_METHODS:
        amount = to_decimal(tendered.get(method))
        if amount <= 0:
            continue
        share = price * amount / due
        net += share * (1 - to_decimal(fees.get(method)) / HUNDRED)
    return money(net)


def format_payment_method(
        tendered: Mapping[str, object],
        has_package_in_cart: bool,
        payment_method: str,
) -> str:
    """Label stored on sale rows: "PACOTE", "PIX" or "PIX(60.00) + CREDITO(40.00)" """
    if has_package_in_cart:
        return "PACOTE"
    parts = [
        f"{method.upper()}({money(tendered.get(method))})"
        for method in PAYMENT_METHODS
        if to_decimal(tendered.get(method)) > 0
    ]
    return " + ".join(parts) or payment_method.upper()


def single_method_split(method: str, amount) -> Dict[str, Decimal]:
    """Tendered mapping for a non-mixed payment: everything on one method"""
    split = {m: ZERO for m in PAYMENT_METHODS}
    split[method] = to_decimal(amount)
    return split


_LABEL_PART = re.compile(r"([A-Za-z]+)\(([\d.]+)\)")


def parse_payment_label(label: Optional[str], sale_total) -> Dict[str, Decimal]:
    """
    Amount per method from a stored payment label.

    Composite labels carry their own amounts; a single token gets the whole
    sale total. Unknown tokens are ignored.
    """
    text = (label or "").strip()
    amounts = {}
    parts = _LABEL_PART.findall(text)
    if parts:
        for method, amount in parts:
            method = method.lower()
            if method in PAYMENT_METHODS:
                amounts[method] = amounts.get(method, ZERO) + to_decimal(amount)
        return amounts

    token = text.lower()
    for method in PAYMENT_METHODS:
        if method in token:
            amounts[method] = to_decimal(sale_total)
            break
    return amounts
