# ============================================================================
# barbershop/services/checkout/checkout_service.py
# ============================================================================
"""
Counter checkout: prices the cart, splits the payment and writes the sale.

A sale is stored as one `finalizado` row per sold unit (plus a tip row),
all sharing a `venda_id`. The writes run as a saga so a failure part way
leaves no half-written sale behind.
"""
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from barbershop.config.settings import get_settings
from barbershop.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PaymentShortfallError,
    ValidationError,
)
from barbershop.models.appointment import (
    ACTIVE_STATUSES,
    Appointment,
    ITEM_CHECKED_OUT,
    ITEM_PRODUCT,
    ITEM_SERVICE,
    ITEM_TIP,
    STATUS_CONFIRMED,
    STATUS_FINALIZED,
    STATUS_PENDING,
    TIP_SERVICE_NAME,
)
from barbershop.models.barber import Barber
from barbershop.models.barbershop import Barbershop
from barbershop.models.service import InventoryItem, Service
from barbershop.schemas.checkout import (
    CartItem,
    CheckoutQuote,
    CheckoutRequest,
    CheckoutResult,
    PackageInfo,
)
from barbershop.services.appointment.appointment_service import AppointmentService
from barbershop.services.availability.availability_service import shop_now
from barbershop.services.cash.cash_service import CashService
from barbershop.services.checkout.checkout_saga import CheckoutSaga
from barbershop.services.customer.customer_service import CustomerService, package_info
from barbershop.services.inventory.inventory_service import InventoryService
from barbershop.services.pricing.package_resolver import find_eligible_package, resolve_cart
from barbershop.services.pricing.payment_ledger import (
    HUNDRED,
    ZERO,
    compute_split,
    format_payment_method,
    line_net_value,
    money,
    single_method_split,
    to_decimal,
)

logger = logging.getLogger(__name__)
settings = get_settings()

WALK_IN_NAME = "Venda Direta"


def new_venda_id() -> str:
    return f"VENDA-{uuid.uuid4().hex[:16].upper()}"


def _product_id(item: CartItem) -> UUID:
    try:
        return UUID(str(item.item_id))
    except ValueError:
        raise ValidationError(f"Invalid product id for {item.name}")


class CheckoutService:
    """Handles point-of-sale operations"""

    # ========================================================================
    # Pricing
    # ========================================================================

    @staticmethod
    def _fee_table(barbershop: Barbershop) -> Dict[str, Decimal]:
        if barbershop.settings is None:
            return {}
        return {k: to_decimal(v) for k, v in barbershop.settings.fee_table().items()}

    @staticmethod
    def _active_package(db: Session, barbershop_id: UUID, customer_id: Optional[UUID]) -> Optional[PackageInfo]:
        if not customer_id:
            return None
        packages = CustomerService.packages_for(db, barbershop_id, customer_id)
        return find_eligible_package(package_info(p) for p in packages)

    @staticmethod
    def _catalog_items(db: Session, barbershop_id: UUID, items: List[CartItem]) -> List[CartItem]:
        """Products take price and commission from the inventory, not from the client"""
        resolved = []
        for item in items:
            if item.item_type == ITEM_PRODUCT and item.item_id:
                product = InventoryService.get_item(db, barbershop_id, _product_id(item))
                item = item.model_copy(update={
                    "name": product.name,
                    "price": to_decimal(product.price_sell),
                    "commission_rate": to_decimal(product.commission_rate),
                })
            resolved.append(item)
        return resolved

    @staticmethod
    def _tendered(request: CheckoutRequest, total_due: Decimal, has_package: bool) -> Dict[str, Decimal]:
        if has_package:
            return single_method_split("pacote", total_due)
        if request.mixed_payment:
            return {k: to_decimal(v) for k, v in request.split.items()}
        if request.payment_method == "pacote":
            raise ValidationError("Pagamento com pacote exige um pacote ativo no carrinho")
        return single_method_split(request.payment_method, total_due)

    @staticmethod
    def quote(db: Session, barbershop: Barbershop, request: CheckoutRequest) -> CheckoutQuote:
        """Price the cart and compute fees without writing anything"""
        items = CheckoutService._catalog_items(db, barbershop.id, request.items)
        package = CheckoutService._active_package(db, barbershop.id, request.customer_id)
        cart = resolve_cart(items, package)

        total_due = cart.total + to_decimal(request.tip)
        tendered = CheckoutService._tendered(request, total_due, cart.has_package_in_cart)
        payment = compute_split(
            cart.total,
            request.tip,
            tendered,
            CheckoutService._fee_table(barbershop),
            has_package_in_cart=cart.has_package_in_cart,
        )
        label = format_payment_method(
            tendered if request.mixed_payment else {},
            cart.has_package_in_cart,
            request.payment_method,
        )
        return CheckoutQuote(cart=cart, payment=payment, payment_method_label=label)

    # ========================================================================
    # Finalize
    # ========================================================================

    @staticmethod
    def _originating_appointment(db: Session, barbershop_id: UUID, appointment_id: Optional[UUID]) -> Optional[Appointment]:
        if not appointment_id:
            return None
        appointment = db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.barbershop_id == barbershop_id,
        ).first()
        if not appointment:
            raise NotFoundError("Appointment not found")
        if appointment.status not in ACTIVE_STATUSES:
            raise InvalidTransitionError(f"A {appointment.status} appointment cannot be checked out")
        return appointment

    @staticmethod
    def _service_durations(db: Session, barbershop_id: UUID) -> Dict[str, int]:
        services = db.query(Service).filter(Service.barbershop_id == barbershop_id).all()
        return {str(s.id): s.duration for s in services if s.duration}

    @staticmethod
    def _build_sale_rows(
            db: Session,
            barbershop: Barbershop,
            barber: Barber,
            request: CheckoutRequest,
            quote: CheckoutQuote,
            tendered: Dict[str, Decimal],
            venda_id: str,
            customer_name: str,
            customer_phone: str,
            now: datetime,
            package: Optional[PackageInfo],
    ) -> List[Appointment]:
        fees = CheckoutService._fee_table(barbershop)
        durations = CheckoutService._service_durations(db, barbershop.id)
        total_due = quote.payment.total_due
        method = "pacote" if quote.cart.has_package_in_cart else request.payment_method

        def net(price):
            return line_net_value(price, tendered, fees, total_due, request.mixed_payment, method)

        common = dict(
            barbershop_id=barbershop.id,
            barber_id=barber.id,
            barber=barber.name,
            customer_id=request.customer_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            date=now.date(),
            time=now.strftime("%H:%M"),
            payment_method=quote.payment_method_label,
            status=STATUS_FINALIZED,
            venda_id=venda_id,
            commission_rate=to_decimal(barber.commission_rate),
        )

        rows = []
        for line in quote.cart.lines:
            item = line.item
            for index, unit_price in enumerate(line.unit_prices):
                redeemed = index < line.package_units
                is_product = item.item_type == ITEM_PRODUCT
                product_commission = (
                    money(unit_price * item.commission_rate / HUNDRED) if is_product else ZERO
                )
                rows.append(Appointment(
                    **common,
                    service=f"{item.name} (Combo)" if redeemed else item.name,
                    duration=0 if is_product else durations.get(item.item_id or "", settings.DEFAULT_SERVICE_DURATION),
                    price=unit_price,
                    original_price=item.price,
                    net_value=net(unit_price),
                    product_commission=product_commission,
                    item_type=ITEM_PRODUCT if is_product else ITEM_SERVICE,
                    inventory_id=_product_id(item) if is_product and item.item_id else None,
                    is_package_redemption=redeemed,
                    package_id=UUID(package.id) if redeemed and package and package.id else None,
                    tip_amount=ZERO,
                ))

        tip = to_decimal(request.tip)
        if tip > 0:
            rows.append(Appointment(
                **common,
                service=TIP_SERVICE_NAME,
                duration=0,
                price=tip,
                original_price=tip,
                net_value=net(tip),
                product_commission=ZERO,
                item_type=ITEM_TIP,
                tip_amount=tip,
            ))
        return rows

    @staticmethod
    def finalize(
            db: Session,
            barbershop: Barbershop,
            request: CheckoutRequest,
            now: Optional[datetime] = None,
    ) -> CheckoutResult:
        """
        Validate, then write the sale.

        Preconditions (checked before any write): an open cash session, a
        professional of this shop, and payment covering the total unless a
        package is in the cart or the discount was confirmed.
        """
        cash_session = CashService.require_open_session(db, barbershop.id)

        barber = db.query(Barber).filter(
            Barber.id == request.barber_id,
            Barber.barbershop_id == barbershop.id,
        ).first()
        if not barber:
            raise ValidationError("Selecione o profissional!")

        appointment = CheckoutService._originating_appointment(db, barbershop.id, request.appointment_id)
        customer = (
            CustomerService.get_customer(db, barbershop.id, request.customer_id)
            if request.customer_id else None
        )

        quote = CheckoutService.quote(db, barbershop, request)
        if quote.payment.requires_discount_confirmation and not request.confirm_discount:
            raise PaymentShortfallError(
                f"O valor pago ({quote.payment.total_tendered}) é menor que o total ({quote.payment.total_due})"
            )

        package = CheckoutService._active_package(db, barbershop.id, request.customer_id)
        tendered = CheckoutService._tendered(request, quote.payment.total_due, quote.cart.has_package_in_cart)

        # The same product may sit on several cart lines
        units_by_product: Dict[UUID, int] = {}
        for line in quote.cart.lines:
            if line.item.item_type == ITEM_PRODUCT and line.item.item_id:
                item_id = _product_id(line.item)
                units_by_product[item_id] = units_by_product.get(item_id, 0) + line.item.quantity
        product_units: List[Tuple[UUID, int]] = list(units_by_product.items())
        for item_id, quantity in product_units:
            product = db.get(InventoryItem, item_id)
            if (product.current_stock or 0) < quantity:
                raise ValidationError(f"Estoque insuficiente para {product.name}")

        now = now or shop_now(barbershop.timezone)
        venda_id = new_venda_id()
        customer_name = (
            request.customer_name
            or (customer.name if customer else None)
            or (appointment.customer_name if appointment else None)
            or WALK_IN_NAME
        )
        customer_phone = (
            request.customer_phone
            or (customer.phone if customer else None)
            or (appointment.customer_phone if appointment else None)
            or "Balcão"
        )
        rows = CheckoutService._build_sale_rows(
            db, barbershop, barber, request, quote, tendered, venda_id,
            customer_name, customer_phone, now, package,
        )

        saga = CheckoutSaga(venda_id, db=db)

        # 1. sale rows
        def insert_sales():
            db.add_all(rows)
            db.commit()
            return [row.id for row in rows]

        def delete_sales(sale_ids):
            db.query(Appointment).filter(Appointment.id.in_(sale_ids)).delete(synchronize_session=False)
            db.commit()

        saga.add_step("insert_sales", insert_sales, delete_sales)

        # 2. stock; all products or none
        def restore_stock(done):
            for item_id, quantity in reversed(done):
                InventoryService.adjust_stock(db, barbershop.id, item_id, quantity)

        def decrement_stock():
            done = []
            try:
                for item_id, quantity in product_units:
                    InventoryService.adjust_stock(db, barbershop.id, item_id, -quantity)
                    done.append((item_id, quantity))
            except Exception:
                db.rollback()
                restore_stock(done)
                raise
            return done

        if product_units:
            saga.add_step("decrement_stock", decrement_stock, restore_stock)

        # 3. package credits
        if package and quote.cart.credits_consumed:
            credits = quote.cart.credits_consumed
            saga.add_step(
                "consume_credits",
                lambda: CustomerService.consume_credits(db, barbershop.id, UUID(package.id), credits),
                lambda _: CustomerService.restore_credits(db, barbershop.id, UUID(package.id), credits),
            )

        # 4. cash transaction
        if quote.payment.total_tendered > 0:
            saga.add_step(
                "record_cash",
                lambda: CashService.record_movement(
                    db,
                    barbershop.id,
                    "entrada",
                    quote.payment.total_tendered,
                    description=f"Venda {venda_id}",
                    payment_method=quote.payment_method_label[:20],
                    venda_id=venda_id,
                ).id,
                lambda transaction_id: CashService.delete_movement(db, barbershop.id, transaction_id),
            )

        # 5. originating booking
        if appointment is not None:
            previous = (appointment.status, appointment.item_type, appointment.venda_id)

            def reopen_appointment(prev):
                appointment.status, appointment.item_type, appointment.venda_id = prev
                db.commit()

            def finalize_appointment():
                # pendente -> confirmado -> finalizado
                try:
                    if appointment.status == STATUS_PENDING:
                        AppointmentService.update_status(db, barbershop.id, appointment.id, STATUS_CONFIRMED)
                    AppointmentService.update_status(db, barbershop.id, appointment.id, STATUS_FINALIZED)
                    appointment.item_type = ITEM_CHECKED_OUT
                    appointment.venda_id = venda_id
                    db.commit()
                except Exception:
                    db.rollback()
                    reopen_appointment(previous)
                    raise
                return previous

            saga.add_step("finalize_appointment", finalize_appointment, reopen_appointment)

        results = saga.run()

        logger.info(
            f"Finalized sale {venda_id} on cash session {cash_session.id}: "
            f"{len(rows)} rows, total {quote.payment.total_due}, {quote.payment_method_label}"
        )
        return CheckoutResult(
            venda_id=venda_id,
            sale_ids=[str(i) for i in results["insert_sales"]],
            total=quote.payment.total_due,
            payment=quote.payment,
            payment_method_label=quote.payment_method_label,
        )
