# ============================================================================
# barbershop/services/inventory/inventory_service.py
# ============================================================================
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from barbershop.core.exceptions import NotFoundError, ValidationError
from barbershop.models.service import InventoryItem
from barbershop.schemas.inventory import InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)


class InventoryService:
    """Products sold at the counter and their stock"""

    @staticmethod
    def get_item(db: Session, barbershop_id: UUID, item_id: UUID) -> InventoryItem:
        item = db.query(InventoryItem).filter(
            InventoryItem.id == item_id,
            InventoryItem.barbershop_id == barbershop_id,
        ).first()
        if not item:
            raise NotFoundError("Product not found")
        return item

    @staticmethod
    def list_items(db: Session, barbershop_id: UUID, search: Optional[str] = None) -> List[InventoryItem]:
        query = db.query(InventoryItem).filter(InventoryItem.barbershop_id == barbershop_id)
        if search:
            query = query.filter(InventoryItem.name.ilike(f"%{search.strip()}%"))
        return query.order_by(InventoryItem.name.asc()).all()

    @staticmethod
    def low_stock(db: Session, barbershop_id: UUID) -> List[InventoryItem]:
        return db.query(InventoryItem).filter(
            InventoryItem.barbershop_id == barbershop_id,
            InventoryItem.current_stock <= InventoryItem.min_stock,
        ).order_by(InventoryItem.current_stock.asc()).all()

    @staticmethod
    def create_item(db: Session, barbershop_id: UUID, data: InventoryItemCreate) -> InventoryItem:
        item = InventoryItem(barbershop_id=barbershop_id, **data.model_dump())
        db.add(item)
        db.commit()
        db.refresh(item)
        logger.info(f"Created product {item.name} ({item.id})")
        return item

    @staticmethod
    def update_item(db: Session, barbershop_id: UUID, item_id: UUID, data: InventoryItemUpdate) -> InventoryItem:
        item = InventoryService.get_item(db, barbershop_id, item_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(item, field, value)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete_item(db: Session, barbershop_id: UUID, item_id: UUID):
        item = InventoryService.get_item(db, barbershop_id, item_id)
        db.delete(item)
        db.commit()
        logger.info(f"Deleted product {item_id}")

    @staticmethod
    def adjust_stock(db: Session, barbershop_id: UUID, item_id: UUID, delta: int) -> InventoryItem:
        """Add `delta` units (negative to take out); stock never goes below zero"""
        item = InventoryService.get_item(db, barbershop_id, item_id)
        new_stock = (item.current_stock or 0) + delta
        if new_stock < 0:
            raise ValidationError(f"Estoque insuficiente para {item.name} ({item.current_stock} disponíveis)")
        item.current_stock = new_stock
        db.commit()
        db.refresh(item)
        if item.is_low_stock:
            logger.info(f"Product {item.name} is low on stock ({item.current_stock})")
        return item
