# barbershop/models/appointment.py
"""
Appointments and counter sales share one table.

A booking starts as `pendente` (or `confirmado` when created by staff) and
ends as `finalizado` or `cancelado`. Sale rows written by the checkout are
inserted directly as `finalizado` and grouped by `venda_id`.
"""
from sqlalchemy import (
    Column, String, Integer, Numeric, Boolean, Date, DateTime, ForeignKey, Index, Uuid, or_
)
from sqlalchemy.sql import func
import uuid

from barbershop.models.base import Base

STATUS_PENDING = "pendente"
STATUS_CONFIRMED = "confirmado"
STATUS_FINALIZED = "finalizado"
STATUS_CANCELLED = "cancelado"

ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)

TIP_SERVICE_NAME = "Caixinha / Gorjeta"

ITEM_SERVICE = "servico"
ITEM_PRODUCT = "produto"
ITEM_TIP = "gorjeta"
# A booking that went through the checkout; its sale rows carry the money
ITEM_CHECKED_OUT = "agendamento"


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(
        Uuid, ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Professional: id is always written now; `barber` keeps the display name
    # and is the only reference on legacy rows.
    barber_id = Column(Uuid, ForeignKey("barbers.id", ondelete="SET NULL"), nullable=True)
    barber = Column(String(120), nullable=True)

    # Customer info
    customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(30), default="Balcão")

    # Appointment details
    service = Column(String(200), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM format
    duration = Column(Integer, default=30)

    # Pricing
    price = Column(Numeric(10, 2), default=0)
    original_price = Column(Numeric(10, 2), nullable=True)
    net_value = Column(Numeric(10, 2), nullable=True)  # after payment fees
    payment_method = Column(String(200), nullable=True)  # "PIX" or "PIX(60.00) + CREDITO(40.00)"
    tip_amount = Column(Numeric(10, 2), default=0)
    product_commission = Column(Numeric(10, 2), default=0)
    commission_rate = Column(Numeric(5, 2), nullable=True)  # snapshot at finalize time

    # Sale linkage
    item_type = Column(String(20), default=ITEM_SERVICE)  # servico, produto, gorjeta, agendamento
    inventory_id = Column(Uuid, ForeignKey("inventory.id", ondelete="SET NULL"), nullable=True)
    venda_id = Column(String(60), nullable=True, index=True)
    is_package_redemption = Column(Boolean, default=False)
    package_id = Column(
        Uuid, ForeignKey("customer_packages.id", ondelete="SET NULL"), nullable=True
    )

    # Status tracking
    status = Column(String(20), nullable=False, default=STATUS_PENDING)
    created_by_admin = Column(Boolean, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        # One active booking per professional and start time
        Index(
            "uq_appointments_active_slot",
            "barber_id",
            "date",
            "time",
            unique=True,
            postgresql_where=status.in_(ACTIVE_STATUSES),
            sqlite_where=status.in_(ACTIVE_STATUSES),
        ),
        Index("idx_appointments_shop_date", "barbershop_id", "date"),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, {self.date} {self.time}, status={self.status})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "barbershop_id": str(self.barbershop_id),
            "barber_id": str(self.barber_id) if self.barber_id else None,
            "barber": self.barber,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "service": self.service,
            "date": self.date.isoformat() if self.date else None,
            "time": self.time,
            "duration": self.duration,
            "price": float(self.price or 0),
            "original_price": float(self.original_price) if self.original_price is not None else None,
            "net_value": float(self.net_value) if self.net_value is not None else None,
            "payment_method": self.payment_method,
            "tip_amount": float(self.tip_amount or 0),
            "status": self.status,
            "venda_id": self.venda_id,
            "is_package_redemption": bool(self.is_package_redemption),
        }


def sale_row_clause():
    """Filter for rows that carry revenue (excludes bookings already checked out)"""
    return or_(Appointment.item_type.is_(None), Appointment.item_type != ITEM_CHECKED_OUT)
