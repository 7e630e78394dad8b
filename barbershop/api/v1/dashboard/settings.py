# ============================================================================
# barbershop/api/v1/dashboard/settings.py
# Settings screen: shop hours and fees, professionals, services
# ============================================================================
from uuid import UUID

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_current_barbershop
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.barber import BarberCreate, BarberUpdate
from barbershop.schemas.barbershop import BarbershopSettingsUpdate
from barbershop.schemas.catalog import ServiceCreate, ServiceUpdate
from barbershop.services.barber.barber_service import BarberService
from barbershop.services.barbershop.barbershop_service import BarbershopService
from barbershop.services.catalog.catalog_service import CatalogService

router = APIRouter(prefix="/settings")


# ============================================================================
# SHOP HOURS AND FEES
# ============================================================================

@router.get("/shop")
async def get_shop_settings(barbershop: Barbershop = Depends(get_current_barbershop)):
    return barbershop.settings.to_dict() if barbershop.settings else None


@router.patch("/shop")
async def update_shop_settings(
        payload: BarbershopSettingsUpdate,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return BarbershopService.update_settings(db, barbershop, payload).to_dict()


# ============================================================================
# PROFESSIONALS
# ============================================================================

@router.get("/barbers")
async def list_barbers(
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return [b.to_dict() for b in BarberService.list_barbers(db, barbershop.id)]


@router.post("/barbers", status_code=201)
async def create_barber(
        payload: BarberCreate,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return BarberService.create_barber(db, barbershop.id, payload).to_dict()


@router.patch("/barbers/{barber_id}")
async def update_barber(
        payload: BarberUpdate,
        barber_id: UUID = Path(..., description="The professional ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return BarberService.update_barber(db, barbershop.id, barber_id, payload).to_dict()


@router.delete("/barbers/{barber_id}", status_code=204)
async def delete_barber(
        barber_id: UUID = Path(..., description="The professional ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    BarberService.delete_barber(db, barbershop.id, barber_id)


# ============================================================================
# SERVICES
# ============================================================================

@router.get("/services")
async def list_services(
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return [s.to_dict() for s in CatalogService.list_services(db, barbershop.id)]


@router.post("/services", status_code=201)
async def create_service(
        payload: ServiceCreate,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CatalogService.create_service(db, barbershop.id, payload).to_dict()


@router.patch("/services/{service_id}")
async def update_service(
        payload: ServiceUpdate,
        service_id: UUID = Path(..., description="The service ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return CatalogService.update_service(db, barbershop.id, service_id, payload).to_dict()


@router.delete("/services/{service_id}", status_code=204)
async def delete_service(
        service_id: UUID = Path(..., description="The service ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    CatalogService.delete_service(db, barbershop.id, service_id)
