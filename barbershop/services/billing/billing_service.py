# barbershop/services/billing/billing_service.py
"""
Subscription billing.

Checkout and portal sessions are created by hosted functions that hold the
payment provider keys; this service only calls them. Subscription fields on
the shop are written by the provider's webhook receiver and only read here.
"""
import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

import httpx
from pydantic import BaseModel

from barbershop.config.settings import get_settings
from barbershop.core.exceptions import ExternalServiceError, ValidationError
from barbershop.models.barbershop import Barbershop

logger = logging.getLogger(__name__)
settings = get_settings()

ACTIVE_SUBSCRIPTION_STATUSES = ("active", "trialing")


def _local_date(value: datetime, timezone_name: Optional[str]) -> date:
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(ZoneInfo(timezone_name or settings.DEFAULT_TIMEZONE)).date()


def expiry_label(days_remaining: int) -> str:
    if days_remaining < 0:
        days = abs(days_remaining)
        return "Expirada há 1 dia" if days == 1 else f"Expirada há {days} dias"
    if days_remaining == 0:
        return "Expira hoje"
    if days_remaining == 1:
        return "Expira amanhã"
    return f"Expira em {days_remaining} dias (corridos)"


STATUS_LABELS = {
    "trialing": "Período de Teste Grátis",
    "active": "Plano Profissional Ativo",
    "canceled": "Assinatura Cancelada",
}


class SubscriptionStatus(BaseModel):
    status: Optional[str] = None
    current_plan: Optional[str] = None
    days_remaining: Optional[int] = None
    is_expired: bool = False
    is_urgent: bool = False
    is_operationally_active: bool = False
    can_open_portal: bool = False
    label: str
    tone: str  # ok, warn, danger, muted

    @classmethod
    def evaluate(cls, barbershop: Barbershop, today: date) -> "SubscriptionStatus":
        """
        Calendar days until expiry and the derived flags.

        A trial without `expires_at` expires at `trial_ends_at`. Urgent covers
        the last SUBSCRIPTION_WARNING_DAYS days and anything already expired.
        """
        status = barbershop.subscription_status
        expires_at = barbershop.expires_at
        if expires_at is None and status == "trialing":
            expires_at = barbershop.trial_ends_at

        days_remaining = None
        if expires_at is not None:
            days_remaining = (_local_date(expires_at, barbershop.timezone) - today).days

        is_expired = days_remaining is not None and days_remaining < 0
        is_urgent = days_remaining is not None and days_remaining <= settings.SUBSCRIPTION_WARNING_DAYS
        active_by_status = status in ACTIVE_SUBSCRIPTION_STATUSES

        if is_expired or is_urgent:
            tone = "danger"
        elif status == "active":
            tone = "ok"
        elif status == "trialing":
            tone = "warn"
        else:
            tone = "muted"

        if days_remaining is not None:
            label = expiry_label(days_remaining)
        else:
            label = STATUS_LABELS.get(status, "Aguardando Ativação")

        return cls(
            status=status,
            current_plan=barbershop.current_plan,
            days_remaining=days_remaining,
            is_expired=is_expired,
            is_urgent=is_urgent,
            is_operationally_active=active_by_status and not is_expired,
            can_open_portal=bool(barbershop.stripe_customer_id) and status != "trialing",
            label=label,
            tone=tone,
        )


class BillingService:
    """Calls the hosted checkout and portal functions"""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self.http_client = http_client or httpx.AsyncClient(
            base_url=settings.FUNCTIONS_BASE_URL,
            timeout=settings.FUNCTIONS_TIMEOUT,
            follow_redirects=True,
        )

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {settings.FUNCTIONS_API_KEY}",
            "apikey": settings.FUNCTIONS_API_KEY,
        }

    async def _invoke(self, function_name: str, payload: dict) -> dict:
        try:
            response = await self.http_client.post(f"/{function_name}", json=payload, headers=self._headers())
        except httpx.TimeoutException:
            logger.error(f"Hosted function {function_name} timed out")
            raise ExternalServiceError(f"{function_name} timed out")
        except httpx.RequestError as e:
            logger.error(f"Hosted function {function_name} request error: {e}")
            raise ExternalServiceError(f"{function_name} unavailable")

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not 200 <= response.status_code < 300:
            message = data.get("error") or f"HTTP {response.status_code}"
            logger.error(f"Hosted function {function_name} failed: {message}")
            raise ExternalServiceError(message)
        return data

    async def create_checkout_session(self, barbershop_id, user_email: str, price_id: str) -> str:
        if not price_id:
            raise ValidationError("Select a plan")
        data = await self._invoke("create-checkout", {
            "barbershopId": str(barbershop_id),
            "userEmail": user_email,
            "priceId": price_id,
        })
        if not data.get("url"):
            raise ExternalServiceError("Checkout session returned no url")
        logger.info(f"Created checkout session for barbershop {barbershop_id} ({price_id})")
        return data["url"]

    async def create_portal_session(self, barbershop: Barbershop) -> str:
        if not barbershop.stripe_customer_id:
            raise ValidationError("No billing account for this barbershop yet")
        data = await self._invoke("create-portal-session", {"barbershopId": str(barbershop.id)})
        if not data.get("url"):
            raise ExternalServiceError("Portal session returned no url")
        return data["url"]

    async def aclose(self):
        await self.http_client.aclose()
