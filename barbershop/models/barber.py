# barbershop/models/barber.py
from sqlalchemy import Column, String, Boolean, DateTime, Numeric, ForeignKey, JSON, Uuid
from sqlalchemy.sql import func
import uuid

from barbershop.models.base import Base


class Barber(Base):
    """
    A professional working at the shop.

    work_days maps a weekday key ("0" = Sunday ... "6" = Saturday) to
    {"active": bool, "start": "HH:MM", "end": "HH:MM"}.
    """
    __tablename__ = "barbers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(
        Uuid, ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(120), nullable=False)
    photo = Column(String(500), nullable=True)
    work_days = Column(JSON, default=dict)
    commission_rate = Column(Numeric(5, 2), default=0)
    advances = Column(Numeric(10, 2), default=0)  # vales / expenses deducted at payout
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Barber(id={self.id}, name={self.name})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "barbershop_id": str(self.barbershop_id),
            "name": self.name,
            "photo": self.photo,
            "work_days": self.work_days or {},
            "commission_rate": float(self.commission_rate or 0),
            "advances": float(self.advances or 0),
            "is_active": bool(self.is_active),
        }
