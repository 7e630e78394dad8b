# ============================================================================
# barbershop/services/catalog/catalog_service.py
# ============================================================================
import logging
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from barbershop.core.exceptions import NotFoundError, ValidationError
from barbershop.models.service import Service
from barbershop.schemas.catalog import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """Services offered on the booking site"""

    @staticmethod
    def list_services(db: Session, barbershop_id: UUID, include_inactive: bool = True) -> List[Service]:
        query = db.query(Service).filter(Service.barbershop_id == barbershop_id)
        if not include_inactive:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.name.asc()).all()

    @staticmethod
    def get_service(db: Session, barbershop_id: UUID, service_id: UUID) -> Service:
        service = db.query(Service).filter(
            Service.id == service_id,
            Service.barbershop_id == barbershop_id,
        ).first()
        if not service:
            raise NotFoundError("Service not found")
        return service

    @staticmethod
    def create_service(db: Session, barbershop_id: UUID, data: ServiceCreate) -> Service:
        name = data.name.strip()
        if not name:
            raise ValidationError("Nome do serviço é obrigatório")
        service = Service(barbershop_id=barbershop_id, **data.model_dump(exclude={"name"}), name=name)
        db.add(service)
        db.commit()
        db.refresh(service)
        logger.info(f"Created service {service.name} ({service.id})")
        return service

    @staticmethod
    def update_service(db: Session, barbershop_id: UUID, service_id: UUID, data: ServiceUpdate) -> Service:
        service = CatalogService.get_service(db, barbershop_id, service_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(service, field, value)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, barbershop_id: UUID, service_id: UUID):
        """Past bookings store the service name, so nothing else changes"""
        service = CatalogService.get_service(db, barbershop_id, service_id)
        db.delete(service)
        db.commit()
        logger.info(f"Deleted service {service_id}")
