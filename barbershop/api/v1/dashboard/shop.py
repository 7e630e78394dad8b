# ============================================================================
# barbershop/api/v1/dashboard/shop.py
# Shop onboarding for a signed-in owner
# ============================================================================
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_current_barbershop, get_current_owner_id
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.barbershop import BarbershopCreate
from barbershop.services.barbershop.barbershop_service import BarbershopService

router = APIRouter(prefix="/barbershop")


def shop_with_settings(barbershop: Barbershop) -> dict:
    data = barbershop.to_dict()
    data["settings"] = barbershop.settings.to_dict() if barbershop.settings else None
    data["subscription_status"] = barbershop.subscription_status
    data["trial_ends_at"] = barbershop.trial_ends_at.isoformat() if barbershop.trial_ends_at else None
    return data


@router.post("", status_code=201)
async def create_barbershop(
        payload: BarbershopCreate,
        owner_id: UUID = Depends(get_current_owner_id),
        db: Session = Depends(get_db)
):
    """Create the shop of the authenticated user; one shop per owner"""
    barbershop = BarbershopService.create_barbershop(db, owner_id, payload)
    return shop_with_settings(barbershop)


@router.get("")
async def get_barbershop(barbershop: Barbershop = Depends(get_current_barbershop)):
    return shop_with_settings(barbershop)
