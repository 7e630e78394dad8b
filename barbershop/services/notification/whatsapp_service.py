# barbershop/services/notification/whatsapp_service.py
"""WhatsApp messages through the Twilio API"""
import logging
import re
from typing import Iterable, List, Optional

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from barbershop.config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def format_whatsapp_number(number: str) -> Optional[str]:
    """`whatsapp:+55DDDNUMBER`; None when no digits are left"""
    digits = re.sub(r"\D", "", number or "")
    if not digits:
        return None
    # Numbers written with a leading + already carry their country code
    if number.strip().startswith("+"):
        return f"whatsapp:+{digits}"
    country = settings.WHATSAPP_COUNTRY_CODE
    if not digits.startswith(country):
        digits = f"{country}{digits}"
    return f"whatsapp:+{digits}"


def booking_confirmation_text(appointment: dict, shop_name: str) -> str:
    day, month = appointment["date"][8:10], appointment["date"][5:7]
    return (
        f"Olá, {appointment['customer_name']}! ✂️\n"
        f"Seu agendamento na *{shop_name}* foi recebido.\n"
        f"📅 {day}/{month} às {appointment['time']}\n"
        f"💈 {appointment['service']} com {appointment.get('barber') or 'nossa equipe'}\n"
        "Aguarde a confirmação da barbearia."
    )


def admin_alert_text(client_text: str) -> str:
    body = client_text.split("Olá,", 1)[1] if "Olá," in client_text else client_text
    return f"🔔 *NOVO AGENDAMENTO RECEBIDO!* 🔔\n\n{body.strip()}\n\n🚀 _Verifique seu painel para confirmar!_"


class WhatsAppService:
    def __init__(self, client: Optional[Client] = None):
        if client is not None:
            self.client = client
        elif settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN:
            self.client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        else:
            self.client = None
        self.from_number = format_whatsapp_number(settings.TWILIO_WHATSAPP_FROM)

    def send_message(self, numbers: Iterable[str], text: str) -> List[dict]:
        """Send `text` to every number; one result per recipient, never raises"""
        results = []
        for number in numbers:
            to = format_whatsapp_number(number)
            if to is None:
                results.append({"number": number, "success": False, "error": "invalid number"})
                continue
            if self.client is None or self.from_number is None:
                logger.warning(f"WhatsApp not configured, skipping message to {to}")
                results.append({"number": number, "success": False, "error": "not configured"})
                continue
            try:
                message = self.client.messages.create(body=text, from_=self.from_number, to=to)
                logger.info(f"WhatsApp sent to {to}: {message.sid}")
                results.append({"number": number, "success": True, "message_sid": message.sid})
            except TwilioException as e:
                logger.error(f"Twilio error sending WhatsApp to {to}: {str(e)}")
                results.append({"number": number, "success": False, "error": str(e)})
        return results

    def send_booking_notifications(self, appointment: dict, shop_name: str, shop_phone: Optional[str]) -> dict:
        """Confirmation to the customer and an alert to the shop"""
        client_text = booking_confirmation_text(appointment, shop_name)
        client = self.send_message([appointment.get("customer_phone") or ""], client_text)[0]
        shop = None
        if shop_phone:
            shop = self.send_message([shop_phone], admin_alert_text(client_text))[0]
        return {"client": client, "shop": shop}
