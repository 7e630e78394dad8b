# ============================================================================
# barbershop/services/customer/customer_service.py
# ============================================================================
"""Customers, their prepaid packages and birthday greetings"""
import logging
import re
from datetime import date
from typing import List, Optional
from urllib.parse import urlencode
from uuid import UUID

from sqlalchemy.orm import Session

from barbershop.config.settings import get_settings
from barbershop.core.exceptions import NotFoundError, ValidationError
from barbershop.models.barbershop import Barbershop
from barbershop.models.customer import Customer, CustomerPackage
from barbershop.schemas.checkout import PackageInfo
from barbershop.schemas.customer import CustomerCreate, CustomerUpdate, PackageCreate

logger = logging.getLogger(__name__)
settings = get_settings()

DEFAULT_PHONE = "Sem Telefone"


def package_info(package: CustomerPackage) -> PackageInfo:
    return PackageInfo(
        id=str(package.id),
        package_name=package.package_name,
        total_credits=package.total_credits or 0,
        used_credits=package.used_credits or 0,
        price_paid=package.price_paid or 0,
    )


class CustomerService:
    """Handles customer and package operations"""

    @staticmethod
    def get_customer(db: Session, barbershop_id: UUID, customer_id: UUID) -> Customer:
        customer = db.query(Customer).filter(
            Customer.id == customer_id,
            Customer.barbershop_id == barbershop_id,
        ).first()
        if not customer:
            raise NotFoundError("Customer not found")
        return customer

    @staticmethod
    def list_customers(db: Session, barbershop_id: UUID, search: Optional[str] = None) -> List[Customer]:
        query = db.query(Customer).filter(Customer.barbershop_id == barbershop_id)
        if search:
            query = query.filter(Customer.name.ilike(f"%{search.strip()}%"))
        return query.order_by(Customer.name.asc()).all()

    @staticmethod
    def create_customer(db: Session, barbershop_id: UUID, data: CustomerCreate) -> Customer:
        name = data.name.strip()
        if not name:
            raise ValidationError("Customer name is required")
        customer = Customer(
            barbershop_id=barbershop_id,
            name=name,
            phone=(data.phone or "").strip() or DEFAULT_PHONE,
            birth_date=data.birth_date,
        )
        db.add(customer)
        db.commit()
        db.refresh(customer)
        logger.info(f"Created customer {customer.id}")
        return customer

    @staticmethod
    def update_customer(db: Session, barbershop_id: UUID, customer_id: UUID, data: CustomerUpdate) -> Customer:
        customer = CustomerService.get_customer(db, barbershop_id, customer_id)
        updates = data.model_dump(exclude_unset=True)
        if "phone" in updates:
            updates["phone"] = (updates["phone"] or "").strip() or DEFAULT_PHONE
        for field, value in updates.items():
            setattr(customer, field, value)
        db.commit()
        db.refresh(customer)
        return customer

    @staticmethod
    def delete_customer(db: Session, barbershop_id: UUID, customer_id: UUID):
        """Removes the customer together with all of their packages"""
        customer = CustomerService.get_customer(db, barbershop_id, customer_id)
        db.delete(customer)
        db.commit()
        logger.info(f"Deleted customer {customer_id}")

    # ========================================================================
    # Packages
    # ========================================================================

    @staticmethod
    def get_package(db: Session, barbershop_id: UUID, package_id: UUID) -> CustomerPackage:
        package = db.query(CustomerPackage).filter(
            CustomerPackage.id == package_id,
            CustomerPackage.barbershop_id == barbershop_id,
        ).first()
        if not package:
            raise NotFoundError("Package not found")
        return package

    @staticmethod
    def packages_for(db: Session, barbershop_id: UUID, customer_id: UUID) -> List[CustomerPackage]:
        """All packages of a customer, oldest first"""
        return db.query(CustomerPackage).filter(
            CustomerPackage.customer_id == customer_id,
            CustomerPackage.barbershop_id == barbershop_id,
        ).order_by(CustomerPackage.created_at.asc(), CustomerPackage.id.asc()).all()

    @staticmethod
    def add_package(db: Session, barbershop_id: UUID, customer_id: UUID, data: PackageCreate) -> CustomerPackage:
        CustomerService.get_customer(db, barbershop_id, customer_id)
        package = CustomerPackage(
            customer_id=customer_id,
            barbershop_id=barbershop_id,
            package_name=data.package_name.strip(),
            total_credits=data.total_credits,
            used_credits=0,
            price_paid=data.price_paid,
        )
        db.add(package)
        db.commit()
        db.refresh(package)
        logger.info(f"Added package {package.package_name} to customer {customer_id}")
        return package

    @staticmethod
    def delete_package(db: Session, barbershop_id: UUID, package_id: UUID):
        package = CustomerService.get_package(db, barbershop_id, package_id)
        db.delete(package)
        db.commit()

    @staticmethod
    def update_total_credits(db: Session, barbershop_id: UUID, package_id: UUID, total_credits: int) -> CustomerPackage:
        package = CustomerService.get_package(db, barbershop_id, package_id)
        if total_credits < (package.used_credits or 0):
            raise ValidationError(
                f"Total credits cannot be lower than the {package.used_credits} already used"
            )
        package.total_credits = total_credits
        db.commit()
        db.refresh(package)
        return package

    @staticmethod
    def consume_credits(db: Session, barbershop_id: UUID, package_id: UUID, credits: int = 1) -> CustomerPackage:
        package = CustomerService.get_package(db, barbershop_id, package_id)
        remaining = (package.total_credits or 0) - (package.used_credits or 0)
        if credits > remaining:
            raise ValidationError(f"Package {package.package_name} has only {remaining} credits left")
        package.used_credits = (package.used_credits or 0) + credits
        db.commit()
        db.refresh(package)
        logger.info(f"Consumed {credits} credit(s) from package {package.id}")
        return package

    @staticmethod
    def restore_credits(db: Session, barbershop_id: UUID, package_id: UUID, credits: int = 1) -> CustomerPackage:
        package = CustomerService.get_package(db, barbershop_id, package_id)
        package.used_credits = max(0, (package.used_credits or 0) - credits)
        db.commit()
        db.refresh(package)
        return package

    # ========================================================================
    # Birthdays
    # ========================================================================

    @staticmethod
    def birthdays_on(db: Session, barbershop_id: UUID, today: date) -> List[Customer]:
        customers = db.query(Customer).filter(
            Customer.barbershop_id == barbershop_id,
            Customer.birth_date.isnot(None),
        ).all()
        return [
            c for c in customers
            if (c.birth_date.month, c.birth_date.day) == (today.month, today.day)
        ]

    @staticmethod
    def birthday_message(barbershop: Barbershop, customer_name: str) -> str:
        booking_link = f"{settings.PUBLIC_BOOKING_URL.rstrip('/')}/{barbershop.slug}"
        return (
            f"🎉🎂 *Feliz Aniversário, {customer_name}!* 🎂🎉\n"
            "Que este dia seja repleto de alegrias, saúde e muitas realizações!\n"
            "Para comemorar, que tal dar aquele trato no visual?\n"
            f"Agende aqui: {booking_link}\n"
            "Um grande abraço da equipe! 💈✨"
        )

    @staticmethod
    def whatsapp_link(phone: Optional[str], text: str) -> Optional[str]:
        """Click-to-chat link; None when the customer has no usable phone"""
        digits = re.sub(r"\D", "", phone or "")
        if not digits:
            return None
        query = urlencode({"phone": f"{settings.WHATSAPP_COUNTRY_CODE}{digits}", "text": text})
        return f"https://api.whatsapp.com/send?{query}"
