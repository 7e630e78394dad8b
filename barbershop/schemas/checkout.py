"""
Pydantic schemas for the point-of-sale checkout
"""
from decimal import Decimal
from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

PaymentMethod = Literal["dinheiro", "pix", "debito", "credito", "pacote"]
ItemType = Literal["servico", "produto"]

PAYMENT_METHODS = ("dinheiro", "pix", "debito", "credito", "pacote")


# ============================================================================
# Cart
# ============================================================================

class CartItem(BaseModel):
    """One line of the cart: a catalog service or product and its quantity"""
    item_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    price: Decimal = Field(Decimal("0"), ge=0)
    item_type: ItemType = "servico"
    quantity: int = Field(1, ge=1)
    commission_rate: Decimal = Field(Decimal("0"), ge=0)  # products only


class PackageInfo(BaseModel):
    """The customer's prepaid package as seen by the pricing rules"""
    id: Optional[str] = None
    package_name: str
    total_credits: int = Field(..., ge=0)
    used_credits: int = Field(0, ge=0)
    price_paid: Decimal = Field(Decimal("0"), ge=0)

    @property
    def is_active(self) -> bool:
        return self.used_credits < self.total_credits

    @property
    def remaining_credits(self) -> int:
        return max(0, self.total_credits - self.used_credits)


class PricedLine(BaseModel):
    item: CartItem
    unit_prices: List[Decimal]
    package_units: int = 0  # units covered by the package

    @property
    def line_total(self) -> Decimal:
        return sum(self.unit_prices, Decimal("0"))

    @property
    def is_package_covered(self) -> bool:
        return self.package_units > 0


class PricedCart(BaseModel):
    lines: List[PricedLine] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    has_package_in_cart: bool = False
    credits_consumed: int = 0


# ============================================================================
# Payment
# ============================================================================

class MethodBreakdown(BaseModel):
    method: str
    amount: Decimal
    fee_percent: Decimal
    fee_amount: Decimal
    net_amount: Decimal


class PaymentSummary(BaseModel):
    total_due: Decimal
    total_tendered: Decimal
    nominal_discount: Decimal
    total_fees: Decimal
    net_total: Decimal
    methods: List[MethodBreakdown] = Field(default_factory=list)
    requires_discount_confirmation: bool = False


# ============================================================================
# Requests
# ============================================================================

class CheckoutRequest(BaseModel):
    """Everything needed to finalize a sale at the counter"""
    barber_id: UUID
    items: List[CartItem] = Field(..., min_length=1)
    customer_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    appointment_id: Optional[UUID] = None  # booking being checked out
    tip: Decimal = Field(Decimal("0"), ge=0)
    payment_method: PaymentMethod = "pix"
    mixed_payment: bool = False
    split: Dict[str, Decimal] = Field(default_factory=dict)
    confirm_discount: bool = False

    @field_validator("split")
    @classmethod
    def validate_split(cls, v):
        for method, amount in v.items():
            if method not in PAYMENT_METHODS:
                raise ValueError(f"Unknown payment method: {method}")
            if amount < 0:
                raise ValueError("Payment amounts cannot be negative")
        return v


class CheckoutQuote(BaseModel):
    cart: PricedCart
    payment: PaymentSummary
    payment_method_label: str


class CheckoutResult(BaseModel):
    venda_id: str
    sale_ids: List[str]
    total: Decimal
    payment: PaymentSummary
    payment_method_label: str
