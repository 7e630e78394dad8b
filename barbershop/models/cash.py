# barbershop/models/cash.py
from sqlalchemy import Column, String, Numeric, Date, DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.sql import func
import uuid

from barbershop.models.base import Base


class CashSession(Base):
    """A day's cash drawer, from opening float to counted close"""
    __tablename__ = "cash_flow"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(
        Uuid, ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False
    )
    initial_value = Column(Numeric(10, 2), nullable=False, default=0)
    expected_value = Column(Numeric(10, 2), nullable=True)
    final_value = Column(Numeric(10, 2), nullable=True)
    difference = Column(Numeric(10, 2), nullable=True)  # counted - expected
    status = Column(String(10), nullable=False, default="open")  # open, closed
    session_date = Column(Date, nullable=False)  # shop-local day the drawer was opened

    opened_at = Column(DateTime(timezone=True), server_default=func.now())
    closed_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(
            "uq_cash_flow_open_session",
            "barbershop_id",
            unique=True,
            postgresql_where=status == "open",
            sqlite_where=status == "open",
        ),
    )

    def to_dict(self):
        return {
            "id": str(self.id),
            "initial_value": float(self.initial_value or 0),
            "expected_value": float(self.expected_value) if self.expected_value is not None else None,
            "final_value": float(self.final_value) if self.final_value is not None else None,
            "difference": float(self.difference) if self.difference is not None else None,
            "status": self.status,
            "session_date": self.session_date.isoformat() if self.session_date else None,
            "opened_at": self.opened_at.isoformat() if self.opened_at else None,
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
        }


class CashTransaction(Base):
    """Money movement recorded against an open cash session"""
    __tablename__ = "cash_transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cash_flow_id = Column(
        Uuid, ForeignKey("cash_flow.id", ondelete="CASCADE"), nullable=False, index=True
    )
    barbershop_id = Column(
        Uuid, ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False
    )
    type = Column(String(10), nullable=False)  # entrada, saida
    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    venda_id = Column(String(60), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": str(self.id),
            "type": self.type,
            "amount": float(self.amount or 0),
            "payment_method": self.payment_method,
            "description": self.description,
            "venda_id": self.venda_id,
        }
