from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from openai import OpenAIError

from barbershop.schemas.dashboard import BarberPerformance, DailySummary
from barbershop.services.ai.insight_service import FALLBACK_INSIGHT, InsightService, insight_payload

SUMMARY = DailySummary(
    date=date(2030, 1, 7),
    gross_revenue=Decimal("350"),
    total_commissions=Decimal("150"),
    net_profit=Decimal("180"),
    barbers=[BarberPerformance(barber_id="b1", name="Carlos", services_count=5, gross=Decimal("300"))],
)


def fake_openai(content=None, error=None):
    def create(**kwargs):
        create.kwargs = kwargs
        if error:
            raise error
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, create


def test_payload():
    payload = insight_payload(SUMMARY)
    assert payload["data"] == "07/01/2030"
    assert payload["faturamentoBruto"] == 350.0
    assert payload["lucroLiquido"] == 180.0
    assert payload["barbeiros"] == [{"nome": "Carlos", "atendimentos": 5, "faturamento": 300.0}]


def test_generated_insight():
    client, create = fake_openai(content="  Ótimo dia, Carlos liderou!  ")
    result = InsightService(client=client).generate(SUMMARY)

    assert result.generated
    assert result.insight == "Ótimo dia, Carlos liderou!"
    assert "faturamentoBruto" in create.kwargs["messages"][1]["content"]


def test_api_error_falls_back():
    client, _ = fake_openai(error=OpenAIError("quota exceeded"))
    result = InsightService(client=client).generate(SUMMARY)
    assert not result.generated
    assert result.insight == FALLBACK_INSIGHT


def test_empty_answer_falls_back():
    client, _ = fake_openai(content="   ")
    assert InsightService(client=client).generate(SUMMARY).insight == FALLBACK_INSIGHT


def test_without_api_key():
    result = InsightService().generate(SUMMARY)
    assert not result.generated
    assert result.summary == SUMMARY
