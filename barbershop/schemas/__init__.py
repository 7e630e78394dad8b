# barbershop/schemas/__init__.py
from .appointment import (
    AppointmentCreate,
    StatusUpdate,
    RescheduleRequest,
    SafeBookingResult,
    CustomerCancelRequest
)

from .availability import AvailabilityResponse

from .checkout import (
    CartItem,
    PackageInfo,
    PricedLine,
    PricedCart,
    PaymentSummary,
    CheckoutRequest,
    CheckoutQuote,
    CheckoutResult
)

from .commission import (
    SaleRecord,
    CommissionReport,
    CommissionSummary,
    BarberTermsUpdate
)

from .cash import (
    CashOpenRequest,
    CashCloseRequest,
    CashMovementRequest,
    DayStats,
    CashStatus
)

from .customer import (
    CustomerCreate,
    CustomerUpdate,
    PackageCreate,
    PackageCreditsUpdate
)

from .inventory import InventoryItemCreate, InventoryItemUpdate
from .expense import ExpenseCreate
from .dashboard import DailySummary, InsightResponse
from .billing import CheckoutSessionRequest, RedirectResponse
from .barbershop import BarbershopCreate, BarbershopSettingsUpdate
from .barber import BarberCreate, BarberUpdate
from .catalog import ServiceCreate, ServiceUpdate
