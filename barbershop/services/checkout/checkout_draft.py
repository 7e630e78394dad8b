# ============================================================================
# barbershop/services/checkout/checkout_draft.py
# ============================================================================
"""
Point-of-sale cart as explicit state.

Reducers never mutate their input; each returns a new CheckoutDraft.
"""
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from barbershop.schemas.checkout import CartItem, CheckoutRequest, PricedCart

ZERO = Decimal("0")


class CheckoutDraft(BaseModel):
    items: List[CartItem] = Field(default_factory=list)
    barber_id: Optional[str] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    appointment_id: Optional[str] = None
    tip: Decimal = ZERO
    payment_method: str = "pix"
    mixed_payment: bool = False
    split: Dict[str, Decimal] = Field(default_factory=dict)
    confirm_discount: bool = False


def _same_item(a: CartItem, b: CartItem) -> bool:
    if a.item_id or b.item_id:
        return a.item_id == b.item_id
    return a.name == b.name and a.item_type == b.item_type


def add_item(draft: CheckoutDraft, item: CartItem) -> CheckoutDraft:
    """Add a line, or bump the quantity of the matching line"""
    items = list(draft.items)
    for index, existing in enumerate(items):
        if _same_item(existing, item):
            items[index] = existing.model_copy(update={"quantity": existing.quantity + item.quantity})
            break
    else:
        items.append(item)
    return draft.model_copy(update={"items": items})


def update_quantity(draft: CheckoutDraft, item_id: str, delta: int) -> CheckoutDraft:
    items = [
        i.model_copy(update={"quantity": max(1, i.quantity + delta)}) if i.item_id == item_id else i
        for i in draft.items
    ]
    return draft.model_copy(update={"items": items})


def remove_item(draft: CheckoutDraft, item_id: str) -> CheckoutDraft:
    return draft.model_copy(update={"items": [i for i in draft.items if i.item_id != item_id]})


def set_tip(draft: CheckoutDraft, tip) -> CheckoutDraft:
    return draft.model_copy(update={"tip": max(ZERO, Decimal(str(tip or 0)))})


def toggle_mixed(draft: CheckoutDraft) -> CheckoutDraft:
    return draft.model_copy(update={"mixed_payment": not draft.mixed_payment, "split": {}})


def select_method(draft: CheckoutDraft, method: str) -> CheckoutDraft:
    """Single-method payment; leaves mixed mode"""
    return draft.model_copy(update={"payment_method": method, "mixed_payment": False, "split": {}})


def set_split_amount(draft: CheckoutDraft, method: str, amount) -> CheckoutDraft:
    split = dict(draft.split)
    split[method] = max(ZERO, Decimal(str(amount or 0)))
    return draft.model_copy(update={"split": split, "mixed_payment": True})


def select_customer(
        draft: CheckoutDraft,
        customer_id: Optional[str],
        name: Optional[str] = None,
        phone: Optional[str] = None,
) -> CheckoutDraft:
    return draft.model_copy(update={
        "customer_id": customer_id,
        "customer_name": name,
        "customer_phone": phone,
    })


def select_barber(draft: CheckoutDraft, barber_id: str) -> CheckoutDraft:
    return draft.model_copy(update={"barber_id": barber_id})


def load_from_appointment(draft: CheckoutDraft, appointment: dict, service_id: Optional[str] = None) -> CheckoutDraft:
    """Start the cart from a calendar booking (the `to_dict()` of an Appointment)"""
    item = CartItem(
        item_id=service_id,
        name=appointment["service"],
        price=Decimal(str(appointment.get("price") or 0)),
        item_type="servico",
    )
    return CheckoutDraft(
        items=[item],
        barber_id=appointment.get("barber_id"),
        customer_name=appointment.get("customer_name"),
        customer_phone=appointment.get("customer_phone"),
        appointment_id=appointment.get("id"),
    )


def apply_pricing(draft: CheckoutDraft, cart: PricedCart) -> CheckoutDraft:
    """A package in the cart forces the `pacote` token and disables mixed payment"""
    if cart.has_package_in_cart:
        return draft.model_copy(update={"payment_method": "pacote", "mixed_payment": False, "split": {}})
    if draft.payment_method == "pacote":
        return draft.model_copy(update={"payment_method": "pix"})
    return draft


def to_checkout_request(draft: CheckoutDraft) -> CheckoutRequest:
    """Raises pydantic's ValidationError when no barber or no item is set"""
    return CheckoutRequest(
        barber_id=draft.barber_id,
        items=draft.items,
        customer_id=draft.customer_id,
        customer_name=draft.customer_name,
        customer_phone=draft.customer_phone,
        appointment_id=draft.appointment_id,
        tip=draft.tip,
        payment_method=draft.payment_method,
        mixed_payment=draft.mixed_payment,
        split=draft.split,
        confirm_discount=draft.confirm_discount,
    )
