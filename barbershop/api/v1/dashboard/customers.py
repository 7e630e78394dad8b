# ============================================================================
# barbershop/api/v1/dashboard/customers.py
# Customers, prepaid packages and birthday greetings
# ============================================================================
from typing import Optional
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_current_barbershop
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.customer import CustomerCreate, CustomerUpdate, PackageCreate, PackageCreditsUpdate
from barbershop.services.availability.availability_service import shop_now
from barbershop.services.customer.customer_service import CustomerService
from barbershop.tasks.notification_tasks import send_whatsapp_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers")


@router.get("")
async def list_customers(
        search: Optional[str] = Query(None, description="Filter by name"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return [c.to_dict() for c in CustomerService.list_customers(db, barbershop.id, search)]


@router.post("", status_code=201)
async def create_customer(
        payload: CustomerCreate,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CustomerService.create_customer(db, barbershop.id, payload).to_dict()


# ============================================================================
# Birthdays (declared before /{customer_id} so the path is not shadowed)
# ============================================================================

@router.get("/birthdays")
async def birthdays_today(
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Customers with a birthday today, each with a ready greeting and click-to-chat link"""
    today = shop_now(barbershop.timezone).date()
    result = []
    for customer in CustomerService.birthdays_on(db, barbershop.id, today):
        message = CustomerService.birthday_message(barbershop, customer.name)
        data = customer.to_dict()
        data["message"] = message
        data["whatsapp_link"] = CustomerService.whatsapp_link(customer.phone, message)
        result.append(data)
    return result


@router.post("/{customer_id}/birthday-greeting", status_code=202)
async def send_birthday_greeting(
        customer_id: UUID = Path(..., description="The customer ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Queue the greeting over WhatsApp instead of opening the link by hand"""
    customer = CustomerService.get_customer(db, barbershop.id, customer_id)
    message = CustomerService.birthday_message(barbershop, customer.name)
    send_whatsapp_message.delay([customer.phone], message)
    logger.info(f"Queued birthday greeting for customer {customer.id}")
    return {"queued": True, "message": message}


@router.get("/{customer_id}")
async def get_customer(
        customer_id: UUID = Path(..., description="The customer ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CustomerService.get_customer(db, barbershop.id, customer_id).to_dict()


@router.patch("/{customer_id}")
async def update_customer(
        payload: CustomerUpdate,
        customer_id: UUID = Path(..., description="The customer ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CustomerService.update_customer(db, barbershop.id, customer_id, payload).to_dict()


@router.delete("/{customer_id}", status_code=204)
async def delete_customer(
        customer_id: UUID = Path(..., description="The customer ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    CustomerService.delete_customer(db, barbershop.id, customer_id)


# ============================================================================
# Packages
# ============================================================================

@router.post("/{customer_id}/packages", status_code=201)
async def add_package(
        payload: PackageCreate,
        customer_id: UUID = Path(..., description="The customer ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CustomerService.add_package(db, barbershop.id, customer_id, payload).to_dict()


@router.patch("/packages/{package_id}/credits")
async def update_total_credits(
        payload: PackageCreditsUpdate,
        package_id: UUID = Path(..., description="The package ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CustomerService.update_total_credits(db, barbershop.id, package_id, payload.total_credits).to_dict()


@router.post("/packages/{package_id}/consume")
async def consume_credit(
        package_id: UUID = Path(..., description="The package ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Manual redemption of one credit outside the checkout"""
    return CustomerService.consume_credits(db, barbershop.id, package_id).to_dict()


@router.delete("/packages/{package_id}", status_code=204)
async def delete_package(
        package_id: UUID = Path(..., description="The package ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    CustomerService.delete_package(db, barbershop.id, package_id)
