"""
API v1 router setup
Organized into: public (booking site) and dashboard (JWT) routes
"""
from fastapi import APIRouter

from barbershop.api.v1.public import booking
from barbershop.api.v1.dashboard import (
    appointments,
    billing,
    cash,
    checkout,
    commissions,
    customers,
    expenses,
    inventory,
    settings,
    shop,
    summary,
)

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    booking.router,
    prefix="/public",  # booking.router already has "/shops/{slug}"
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES (JWT authentication required)
# ============================================================================
for dashboard_router in (
        shop.router,
        settings.router,
        appointments.router,
        checkout.router,
        commissions.router,
        cash.router,
        expenses.router,
        inventory.router,
        customers.router,
        summary.router,
        billing.router,
):
    api_v1_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """API information and route groups by authentication type."""
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required",
            "dashboard": "JWT Bearer token required (shop owner login)",
        }
    }
