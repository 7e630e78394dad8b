# barbershop/services/commission/commission_ledger.py
"""Pure commission arithmetic over finalized sales"""
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from barbershop.models.appointment import TIP_SERVICE_NAME
from barbershop.schemas.commission import CommissionReport, SaleCommission, SaleRecord
from barbershop.services.pricing.payment_ledger import money, to_decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def resolve_professional(sale: SaleRecord, barbers: Sequence) -> Optional[str]:
    """
    Id of the professional a sale belongs to.

    Rows written by this service always carry `barber_id`; older rows only
    have the display name, matched case-insensitively. `barbers` are objects
    with `id` and `name`.
    """
    known_ids = {str(b.id) for b in barbers}
    if sale.barber_id and str(sale.barber_id) in known_ids:
        return str(sale.barber_id)
    if sale.barber:
        name = sale.barber.strip().lower()
        for barber in barbers:
            if barber.name.strip().lower() == name:
                return str(barber.id)
    return None


def sale_commission(sale: SaleRecord, live_rate) -> SaleCommission:
    """Commission owed on one sale row"""
    fixed = to_decimal(sale.product_commission)
    if fixed != 0:
        return SaleCommission(sale=sale, commission=fixed, is_fixed=True)
    if sale.service == TIP_SERVICE_NAME:
        return SaleCommission(sale=sale, commission=ZERO, is_tip=True)
    rate = to_decimal(sale.commission_rate if sale.commission_rate is not None else live_rate)
    return SaleCommission(sale=sale, commission=money(to_decimal(sale.price) * rate / HUNDRED))


def build_commission_report(
        barber_id: str,
        barber_name: str,
        commission_rate,
        sales: Iterable[SaleRecord],
        advances=ZERO,
) -> CommissionReport:
    """Aggregate one professional's sales into commission, tips and net payable"""
    details = [sale_commission(sale, commission_rate) for sale in sales]
    service_rows = [d for d in details if not d.is_tip]

    total_commission = sum((d.commission for d in details), ZERO)
    total_tips = sum((to_decimal(d.sale.tip_amount) for d in details), ZERO)
    advances = to_decimal(advances)

    return CommissionReport(
        barber_id=barber_id,
        barber_name=barber_name,
        commission_rate=to_decimal(commission_rate),
        services_count=len(service_rows),
        gross_total=sum((to_decimal(d.sale.price) for d in service_rows), ZERO),
        total_commission=total_commission,
        total_tips=total_tips,
        advances=advances,
        net_payable=total_commission + total_tips - advances,
        details=details,
    )
