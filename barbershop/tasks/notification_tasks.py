# ===== barbershop/tasks/notification_tasks.py =====
from typing import Optional
import logging

from barbershop.config.celery_config import celery_app
from barbershop.services.notification.whatsapp_service import WhatsAppService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=0)
def send_booking_notifications(
        self,
        appointment: dict,
        shop_name: str,
        shop_phone: Optional[str] = None
):
    """
    Send the WhatsApp confirmation to the customer and an alert to the shop

    Args:
        appointment: Appointment.to_dict() of the new booking
        shop_name: Name shown in the confirmation
        shop_phone: Shop number that receives the alert (optional)

    Delivery failures are logged and reported in the result; the task is
    never retried.
    """
    logger.info(f"Sending booking notifications for appointment {appointment.get('id')}")
    try:
        result = WhatsAppService().send_booking_notifications(appointment, shop_name, shop_phone)
    except Exception as exc:
        logger.error(f"Booking notification failed for {appointment.get('id')}: {exc}")
        return {"status": "failed", "error": str(exc)}

    logger.info(f"Booking notifications done for {appointment.get('id')}: {result}")
    return {"status": "success", **result}


@celery_app.task(bind=True, max_retries=0)
def send_whatsapp_message(self, numbers: list, text: str):
    """Send a free-form WhatsApp message (birthday greetings, reminders)"""
    results = WhatsAppService().send_message(numbers, text)
    sent = sum(1 for r in results if r["success"])
    logger.info(f"WhatsApp message delivered to {sent}/{len(results)} recipients")
    return {"status": "success", "results": results}
