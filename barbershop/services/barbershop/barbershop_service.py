# ============================================================================
# barbershop/services/barbershop/barbershop_service.py
# ============================================================================
"""
Shop onboarding and shop-wide settings.

A new shop starts a trial of TRIAL_DAYS and gets default opening hours and
card machine fees; the owner edits both from the settings screen.
"""
import logging
import re
import unicodedata
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from barbershop.config.settings import get_settings
from barbershop.core.exceptions import ConflictError, ValidationError
from barbershop.models.barbershop import Barbershop, BarbershopSettings
from barbershop.schemas.barbershop import BarbershopCreate, BarbershopSettingsUpdate
from barbershop.services.availability.slots import time_to_minutes

logger = logging.getLogger(__name__)
settings = get_settings()

DEFAULT_SHOP_SETTINGS = {
    "opening_time": "08:00",
    "closing_time": "20:00",
    "is_closed": False,
    "fee_dinheiro": Decimal("0"),
    "fee_pix": Decimal("0"),
    "fee_debito": Decimal("1.99"),
    "fee_credito": Decimal("4.99"),
}

SLUG_TAKEN_MESSAGE = "Esta URL (slug) já está em uso. Tente outro nome."


def normalize_slug(text: str) -> str:
    """'Barbearia do Zé' -> 'barbearia-do-ze'"""
    ascii_text = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"\s+", "-", ascii_text.strip().lower())
    slug = re.sub(r"[^a-z0-9_-]+", "", slug)
    return re.sub(r"-{2,}", "-", slug).strip("-")


class BarbershopService:
    """Handles shop creation and settings"""

    @staticmethod
    def get_for_owner(db: Session, owner_id: UUID) -> Optional[Barbershop]:
        return db.query(Barbershop).filter(Barbershop.owner_id == owner_id).first()

    @staticmethod
    def create_barbershop(
            db: Session,
            owner_id: UUID,
            data: BarbershopCreate,
            now: Optional[datetime] = None,
    ) -> Barbershop:
        """Create the owner's shop with its default settings and a trial period"""
        if BarbershopService.get_for_owner(db, owner_id):
            raise ConflictError("Você já possui uma barbearia cadastrada")

        name = data.name.strip()
        slug = normalize_slug(data.slug or name)
        if not name or not slug:
            raise ValidationError("Nome e URL são obrigatórios.")
        if db.query(Barbershop.id).filter(Barbershop.slug == slug).first():
            raise ConflictError(SLUG_TAKEN_MESSAGE)

        now = now or datetime.now(timezone.utc)
        trial_ends_at = now + timedelta(days=settings.TRIAL_DAYS)
        barbershop = Barbershop(
            owner_id=owner_id,
            name=name,
            slug=slug,
            address=data.address,
            phone=data.phone or None,
            timezone=settings.DEFAULT_TIMEZONE,
            subscription_status="trialing",
            trial_ends_at=trial_ends_at,
            expires_at=trial_ends_at,
        )
        db.add(barbershop)
        try:
            db.flush()
            db.add(BarbershopSettings(barbershop_id=barbershop.id, **DEFAULT_SHOP_SETTINGS))
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(SLUG_TAKEN_MESSAGE)
        db.refresh(barbershop)

        logger.info(f"Created barbershop {barbershop.slug} ({barbershop.id}) for owner {owner_id}")
        return barbershop

    @staticmethod
    def update_settings(
            db: Session,
            barbershop: Barbershop,
            data: BarbershopSettingsUpdate,
    ) -> BarbershopSettings:
        """Opening hours, emergency closing and payment fees"""
        shop_settings = barbershop.settings
        if shop_settings is None:
            shop_settings = BarbershopSettings(barbershop_id=barbershop.id, **DEFAULT_SHOP_SETTINGS)
            db.add(shop_settings)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(shop_settings, field, value)

        if time_to_minutes(shop_settings.opening_time) >= time_to_minutes(shop_settings.closing_time):
            db.rollback()
            raise ValidationError("O horário de abertura deve ser antes do fechamento")

        db.commit()
        db.refresh(shop_settings)
        if shop_settings.is_closed:
            logger.info(f"Barbershop {barbershop.id} is closed for bookings")
        return shop_settings
