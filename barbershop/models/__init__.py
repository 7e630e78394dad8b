# barbershop/models/__init__.py
from .base import Base
from .barbershop import Barbershop, BarbershopSettings
from .barber import Barber
from .service import Service, InventoryItem
from .customer import Customer, CustomerPackage
from .appointment import Appointment
from .cash import CashSession, CashTransaction
from .expense import Expense

__all__ = [
    "Base",
    "Barbershop",
    "BarbershopSettings",
    "Barber",
    "Service",
    "InventoryItem",
    "Customer",
    "CustomerPackage",
    "Appointment",
    "CashSession",
    "CashTransaction",
    "Expense",
]
