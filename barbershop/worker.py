"""
Celery worker entry point for the WhatsApp notification queue

    celery -A barbershop.worker worker --loglevel=info
"""
import logging
from celery.signals import worker_ready, worker_shutdown

from barbershop.config.celery_config import celery_app
from barbershop.config.settings import get_settings
from barbershop.utils.my_logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
settings = get_settings()


@worker_ready.connect
def worker_ready_handler(sender=None, **kwargs):
    own_tasks = sorted(name for name in celery_app.tasks if name.startswith("barbershop."))
    logger.info(f"🚀 Notification worker ready with {len(own_tasks)} tasks: {own_tasks}")
    if not (settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN):
        logger.warning("Twilio credentials missing, WhatsApp messages will be skipped")


@worker_shutdown.connect
def worker_shutdown_handler(sender=None, **kwargs):
    logger.info("🛑 Notification worker shutting down...")


if __name__ == "__main__":
    celery_app.start([
        "worker",
        f"--loglevel={settings.LOG_LEVEL.lower()}",
        f"--concurrency={settings.CELERY_WORKER_CONCURRENCY}",
        "--max-tasks-per-child=1000",
    ])
