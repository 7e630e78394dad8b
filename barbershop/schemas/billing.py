# barbershop/schemas/billing.py
from pydantic import BaseModel, Field


class CheckoutSessionRequest(BaseModel):
    price_id: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, max_length=320)


class RedirectResponse(BaseModel):
    url: str
