# barbershop/core/exceptions.py
"""Domain errors and their HTTP mapping"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BarbershopError(Exception):
    """Base class for every error raised by the business layer"""

    status_code = 400
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BarbershopError):
    """Required data missing or malformed; nothing was written"""
    status_code = 422
    code = "validation_error"


class NotFoundError(BarbershopError):
    status_code = 404
    code = "not_found"


class SlotConflictError(BarbershopError):
    """The slot was taken by another booking (overlap or unique constraint)"""
    status_code = 409
    code = "slot_conflict"


class ConflictError(BarbershopError):
    """The record already exists (slug taken, owner already has a shop)"""
    status_code = 409
    code = "conflict"


class InvalidTransitionError(BarbershopError):
    """Appointment status change not allowed from the current status"""
    status_code = 409
    code = "invalid_transition"


class CashSessionClosedError(BarbershopError):
    status_code = 409
    code = "cash_session_closed"


class PaymentShortfallError(BarbershopError):
    """Amount tendered is below the total and the discount was not confirmed"""
    status_code = 422
    code = "payment_shortfall"


class CheckoutError(BarbershopError):
    """A checkout step failed; completed steps were compensated"""
    status_code = 500
    code = "checkout_failed"

    def __init__(self, message: str, failed_step: str = None):
        super().__init__(message)
        self.failed_step = failed_step


class ExternalServiceError(BarbershopError):
    """A hosted function or third-party API call failed"""
    status_code = 502
    code = "external_service_error"


async def barbershop_error_handler(request: Request, exc: BarbershopError):
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    logger.warning(
        f"{exc.code}: {exc.message}",
        extra={"correlation_id": correlation_id, "path": request.url.path},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
    )


def register_exception_handlers(app: FastAPI):
    """Attach the domain error handler to the application"""
    app.add_exception_handler(BarbershopError, barbershop_error_handler)
