# barbershop/models/service.py
"""
Catalog entries: services offered on the booking site and products sold
at the counter.
"""
from sqlalchemy import CheckConstraint, Column, String, Numeric, Integer, ForeignKey, Boolean, DateTime, Text, Uuid
from sqlalchemy.sql import func
import uuid

from barbershop.models.base import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(
        Uuid,
        ForeignKey("barbershops.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    duration = Column(Integer, nullable=True)  # minutes
    category = Column(String(30), default="hair")  # hair, beard, combo, other
    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "price": float(self.price or 0),
            "duration": self.duration,
            "category": self.category,
            "is_active": bool(self.is_active),
        }


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(
        Uuid,
        ForeignKey("barbershops.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    category = Column(String(100), nullable=True)
    current_stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=5)
    price_cost = Column(Numeric(10, 2), nullable=False, default=0)
    price_sell = Column(Numeric(10, 2), nullable=False, default=0)
    commission_rate = Column(Numeric(5, 2), default=0)  # percent paid to the seller

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_inventory_stock_not_negative"),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock

    def to_dict(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "category": self.category,
            "current_stock": self.current_stock,
            "min_stock": self.min_stock,
            "price_cost": float(self.price_cost or 0),
            "price_sell": float(self.price_sell or 0),
            "commission_rate": float(self.commission_rate or 0),
            "is_low_stock": self.is_low_stock,
        }
