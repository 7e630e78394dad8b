# barbershop/models/expense.py
from sqlalchemy import Column, String, Numeric, Date, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid

from barbershop.models.base import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(
        Uuid, ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description = Column(String(300), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), default="Geral")
    payment_method = Column(String(20), default="dinheiro")
    date = Column(Date, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": str(self.id),
            "description": self.description,
            "amount": float(self.amount or 0),
            "category": self.category,
            "payment_method": self.payment_method,
            "date": self.date.isoformat(),
        }
