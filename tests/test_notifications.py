from types import SimpleNamespace

import pytest
from twilio.base.exceptions import TwilioException

from barbershop.services.notification.whatsapp_service import (
    WhatsAppService,
    admin_alert_text,
    booking_confirmation_text,
    format_whatsapp_number,
)
from barbershop.tasks import notification_tasks

APPOINTMENT = {
    "id": "a1",
    "customer_name": "Ana",
    "customer_phone": "(11) 99999-0000",
    "date": "2030-01-07",
    "time": "10:00",
    "service": "Corte",
    "barber": "Carlos",
}


class FakeMessages:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def create(self, body, from_, to):
        if self.fail:
            raise TwilioException("21211 invalid 'To' number")
        self.sent.append({"body": body, "from": from_, "to": to})
        return SimpleNamespace(sid=f"SM{len(self.sent)}")


def fake_client(fail=False):
    return SimpleNamespace(messages=FakeMessages(fail=fail))


@pytest.mark.parametrize("raw, expected", [
    ("(11) 99999-0000", "whatsapp:+5511999990000"),
    ("+55 11 99999-0000", "whatsapp:+5511999990000"),
    ("", None),
    ("sem número", None),
])
def test_format_whatsapp_number(raw, expected):
    assert format_whatsapp_number(raw) == expected


def test_confirmation_text():
    text = booking_confirmation_text(APPOINTMENT, "Barbearia do Zé")
    assert "Olá, Ana!" in text
    assert "07/01 às 10:00" in text
    assert "Corte com Carlos" in text


def test_admin_alert_drops_greeting():
    alert = admin_alert_text(booking_confirmation_text(APPOINTMENT, "Barbearia do Zé"))
    assert "NOVO AGENDAMENTO" in alert
    assert "Olá," not in alert


def test_send_message_reports_each_recipient():
    client = fake_client()
    results = WhatsAppService(client=client).send_message(["11999990000", ""], "Oi")

    assert results[0] == {"number": "11999990000", "success": True, "message_sid": "SM1"}
    assert results[1]["error"] == "invalid number"
    assert client.messages.sent[0]["to"] == "whatsapp:+5511999990000"
    assert client.messages.sent[0]["from"] == "whatsapp:+14155238886"


def test_twilio_errors_do_not_raise():
    results = WhatsAppService(client=fake_client(fail=True)).send_message(["11999990000"], "Oi")
    assert not results[0]["success"]
    assert "invalid" in results[0]["error"]


def test_unconfigured_service_skips():
    service = WhatsAppService()
    assert service.client is None
    assert service.send_message(["11999990000"], "Oi")[0]["error"] == "not configured"


def test_booking_notifications_alert_the_shop():
    client = fake_client()
    result = WhatsAppService(client=client).send_booking_notifications(APPOINTMENT, "Barbearia do Zé", "11988887777")

    assert result["client"]["success"]
    assert result["shop"]["success"]
    assert "NOVO AGENDAMENTO" in client.messages.sent[1]["body"]


def test_booking_task_without_shop_phone():
    result = notification_tasks.send_booking_notifications.apply(args=(APPOINTMENT, "Barbearia do Zé")).get()
    assert result["status"] == "success"
    assert result["shop"] is None
    assert result["client"]["error"] == "not configured"


def test_whatsapp_message_task():
    result = notification_tasks.send_whatsapp_message.apply(args=(["11999990000"], "Feliz aniversário!")).get()
    assert result["status"] == "success"
    assert len(result["results"]) == 1
