# barbershop/models/barbershop.py
"""
Barbershop (tenant) and its settings.

Subscription fields are written by the payment provider's webhook receiver,
which runs outside this service; they are only read here.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Numeric, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from barbershop.models.base import Base


class Barbershop(Base):
    __tablename__ = "barbershops"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, nullable=False, index=True)  # auth provider user id
    name = Column(String(200), nullable=False)
    slug = Column(String(100), nullable=False, unique=True)
    phone = Column(String(30), nullable=True)  # receives booking alerts
    address = Column(String(300), nullable=True)
    timezone = Column(String(50), default="America/Sao_Paulo")

    # Subscription (read only)
    subscription_status = Column(String(30), default="trialing")  # trialing, active, canceled
    expires_at = Column(DateTime(timezone=True), nullable=True)
    trial_ends_at = Column(DateTime(timezone=True), nullable=True)
    current_plan = Column(String(50), nullable=True)
    subscription_id = Column(String(100), nullable=True)
    stripe_customer_id = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    settings = relationship(
        "BarbershopSettings", back_populates="barbershop", uselist=False
    )

    def __repr__(self):
        return f"<Barbershop(id={self.id}, slug={self.slug})>"

    def to_dict(self):
        """Public view of the shop, used by the booking site"""
        return {
            "id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "phone": self.phone,
            "address": self.address,
            "timezone": self.timezone,
        }


class BarbershopSettings(Base):
    __tablename__ = "barbershop_settings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(
        Uuid, ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    # Global opening hours
    opening_time = Column(String(5), default="08:00")  # HH:MM format
    closing_time = Column(String(5), default="20:00")  # HH:MM format
    is_closed = Column(Boolean, default=False)

    # Card machine / payment fees in percent
    fee_dinheiro = Column(Numeric(5, 2), default=0)
    fee_pix = Column(Numeric(5, 2), default=0)
    fee_debito = Column(Numeric(5, 2), default=0)
    fee_credito = Column(Numeric(5, 2), default=0)

    barbershop = relationship("Barbershop", back_populates="settings")

    def fee_table(self) -> dict:
        """Fee percentage per payment method token"""
        return {
            "dinheiro": self.fee_dinheiro or 0,
            "pix": self.fee_pix or 0,
            "debito": self.fee_debito or 0,
            "credito": self.fee_credito or 0,
            "pacote": 0,
        }

    def to_dict(self):
        return {
            "opening_time": self.opening_time,
            "closing_time": self.closing_time,
            "is_closed": bool(self.is_closed),
            "fees": {k: float(v) for k, v in self.fee_table().items()},
        }
