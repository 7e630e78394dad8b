# ============================================================================
# barbershop/api/v1/dashboard/billing.py
# Subscription status and hosted checkout/portal links
# ============================================================================
from fastapi import APIRouter, Depends

from barbershop.api.dependencies import get_current_barbershop
from barbershop.models.barbershop import Barbershop
from barbershop.schemas.billing import CheckoutSessionRequest, RedirectResponse
from barbershop.services.availability.availability_service import shop_now
from barbershop.services.billing.billing_service import BillingService, SubscriptionStatus

router = APIRouter(prefix="/billing")


async def get_billing_service():
    """BillingService with its HTTP client closed after the request"""
    service = BillingService()
    try:
        yield service
    finally:
        await service.aclose()


@router.get("/status", response_model=SubscriptionStatus)
async def subscription_status(barbershop: Barbershop = Depends(get_current_barbershop)):
    today = shop_now(barbershop.timezone).date()
    return SubscriptionStatus.evaluate(barbershop, today)


@router.post("/checkout", response_model=RedirectResponse)
async def create_checkout(
        payload: CheckoutSessionRequest,
        barbershop: Barbershop = Depends(get_current_barbershop),
        billing: BillingService = Depends(get_billing_service),
):
    url = await billing.create_checkout_session(barbershop.id, payload.email, payload.price_id)
    return RedirectResponse(url=url)


@router.post("/portal", response_model=RedirectResponse)
async def create_portal(
        barbershop: Barbershop = Depends(get_current_barbershop),
        billing: BillingService = Depends(get_billing_service),
):
    url = await billing.create_portal_session(barbershop)
    return RedirectResponse(url=url)
