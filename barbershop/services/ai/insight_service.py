# barbershop/services/ai/insight_service.py
"""Short AI commentary on the day's numbers"""
import json
import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from barbershop.config.settings import get_settings
from barbershop.schemas.dashboard import DailySummary, InsightResponse

logger = logging.getLogger(__name__)
settings = get_settings()

FALLBACK_INSIGHT = "Sarah processou os dados, mas não teve uma resposta clara agora."

SYSTEM_PROMPT = (
    "Você é a Sarah, assistente de IA de uma barbearia. "
    "Analise os dados e dê um insight rápido e motivador (máximo 3 frases)."
)


def insight_payload(summary: DailySummary) -> dict:
    """Compact view of the summary sent to the model"""
    return {
        "data": summary.date.strftime("%d/%m/%Y"),
        "faturamentoBruto": float(summary.gross_revenue),
        "lucroLiquido": float(summary.net_profit),
        "barbeiros": [
            {"nome": b.name, "atendimentos": b.services_count, "faturamento": float(b.gross)}
            for b in summary.barbers
        ],
    }


class InsightService:
    """Generates the dashboard insight; failures fall back to a fixed message"""

    def __init__(self, client: Optional[OpenAI] = None):
        if client is not None:
            self.client = client
        elif settings.OPENAI_API_KEY:
            self.client = OpenAI(api_key=settings.OPENAI_API_KEY)
        else:
            self.client = None
        self.model = settings.OPENAI_MODEL

    def generate(self, summary: DailySummary) -> InsightResponse:
        if self.client is None:
            logger.warning("OpenAI not configured, returning fallback insight")
            return InsightResponse(insight=FALLBACK_INSIGHT, generated=False, summary=summary)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": f"Dados: {json.dumps(insight_payload(summary), ensure_ascii=False)}"},
                ],
                temperature=0.7,
                max_tokens=settings.OPENAI_MAX_TOKENS,
            )
            text = (response.choices[0].message.content or "").strip()
        except (OpenAIError, IndexError, AttributeError) as e:
            logger.error(f"Insight generation failed: {e}")
            return InsightResponse(insight=FALLBACK_INSIGHT, generated=False, summary=summary)

        if not text:
            return InsightResponse(insight=FALLBACK_INSIGHT, generated=False, summary=summary)
        return InsightResponse(insight=text, summary=summary)
