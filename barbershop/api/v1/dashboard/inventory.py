# ============================================================================
# barbershop/api/v1/dashboard/inventory.py
# Product stock endpoints
# ============================================================================
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from barbershop.api.dependencies import get_current_barbershop
from barbershop.config.database import get_db
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.inventory import InventoryItemCreate, InventoryItemUpdate
from barbershop.services.inventory.inventory_service import InventoryService

router = APIRouter(prefix="/inventory")


@router.get("")
async def list_items(
        search: Optional[str] = Query(None, description="Filter by product name"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return [i.to_dict() for i in InventoryService.list_items(db, barbershop.id, search)]


@router.get("/low-stock")
async def low_stock(
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    """Products at or below their minimum stock"""
    return [i.to_dict() for i in InventoryService.low_stock(db, barbershop.id)]


@router.post("", status_code=201)
async def create_item(
        payload: InventoryItemCreate,
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return InventoryService.create_item(db, barbershop.id, payload).to_dict()


@router.patch("/{item_id}")
async def update_item(
        payload: InventoryItemUpdate,
        item_id: UUID = Path(..., description="The product ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    return InventoryService.update_item(db, barbershop.id, item_id, payload).to_dict()


@router.delete("/{item_id}", status_code=204)
async def delete_item(
        item_id: UUID = Path(..., description="The product ID"),
        barbershop: Barbershop = Depends(get_current_barbershop),
        db: Session = Depends(get_db)
):
    InventoryService.delete_item(db, barbershop.id, item_id)
