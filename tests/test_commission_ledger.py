from decimal import Decimal
from types import SimpleNamespace

from barbershop.models.appointment import TIP_SERVICE_NAME
from barbershop.schemas.commission import SaleRecord
from barbershop.services.commission.commission_ledger import (
    build_commission_report,
    resolve_professional,
    sale_commission,
)

BARBERS = [SimpleNamespace(id="b1", name="Carlos"), SimpleNamespace(id="b2", name="Rafa")]


def test_snapshot_rate_wins_over_live_rate():
    sale = SaleRecord(service="Corte", price=Decimal("50"), commission_rate=Decimal("40"))
    assert sale_commission(sale, Decimal("50")).commission == Decimal("20.00")


def test_live_rate_for_rows_without_snapshot():
    sale = SaleRecord(service="Corte", price=Decimal("50"))
    assert sale_commission(sale, Decimal("50")).commission == Decimal("25.00")


def test_product_commission_is_fixed():
    sale = SaleRecord(service="Pomada", price=Decimal("35"), product_commission=Decimal("3.50"))
    result = sale_commission(sale, Decimal("50"))
    assert result.is_fixed
    assert result.commission == Decimal("3.50")


def test_tip_rows_earn_no_commission():
    sale = SaleRecord(service=TIP_SERVICE_NAME, price=Decimal("10"), tip_amount=Decimal("10"))
    result = sale_commission(sale, Decimal("50"))
    assert result.is_tip
    assert result.commission == Decimal("0")


def test_report_totals():
    sales = [
        SaleRecord(service="Corte", price=Decimal("50")),
        SaleRecord(service="Pomada", price=Decimal("30"), product_commission=Decimal("3")),
        SaleRecord(service=TIP_SERVICE_NAME, price=Decimal("10"), tip_amount=Decimal("10")),
    ]
    report = build_commission_report("b1", "Carlos", Decimal("50"), sales, advances=Decimal("5"))

    assert report.services_count == 2
    assert report.gross_total == Decimal("80")
    assert report.total_commission == Decimal("28.00")
    assert report.total_tips == Decimal("10")
    assert report.net_payable == Decimal("33.00")


def test_resolve_professional():
    assert resolve_professional(SaleRecord(service="x", barber_id="b2"), BARBERS) == "b2"
    assert resolve_professional(SaleRecord(service="x", barber=" carlos "), BARBERS) == "b1"
    assert resolve_professional(SaleRecord(service="x", barber="Desconhecido"), BARBERS) is None
