# barbershop/models/customer.py
from sqlalchemy import CheckConstraint, Column, String, Integer, Numeric, Date, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from barbershop.models.base import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(
        Uuid, ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(200), nullable=False)
    phone = Column(String(30), default="Sem Telefone")
    birth_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    packages = relationship(
        "CustomerPackage",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="CustomerPackage.created_at",
    )

    def to_dict(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "phone": self.phone,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "packages": [p.to_dict() for p in self.packages],
        }


class CustomerPackage(Base):
    """Prepaid bundle of service credits"""
    __tablename__ = "customer_packages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id = Column(
        Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    barbershop_id = Column(
        Uuid, ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False
    )
    package_name = Column(String(200), nullable=False)
    total_credits = Column(Integer, nullable=False, default=4)
    used_credits = Column(Integer, nullable=False, default=0)
    price_paid = Column(Numeric(10, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    customer = relationship("Customer", back_populates="packages")

    __table_args__ = (
        CheckConstraint("used_credits <= total_credits", name="ck_customer_packages_credits"),
    )

    @property
    def is_active(self) -> bool:
        return (self.used_credits or 0) < (self.total_credits or 0)

    def to_dict(self):
        return {
            "id": str(self.id),
            "package_name": self.package_name,
            "total_credits": self.total_credits,
            "used_credits": self.used_credits,
            "price_paid": float(self.price_paid or 0),
            "is_active": self.is_active,
        }
