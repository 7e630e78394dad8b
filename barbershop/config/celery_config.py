# barbershop/config/celery_config.py
"""Celery application factory"""
from celery import Celery

from barbershop.config.settings import get_settings


def create_celery_app() -> Celery:
    """Create and configure the Celery application"""
    settings = get_settings()

    app = Celery(
        "barbershop",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["barbershop.tasks.notification_tasks"],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone=settings.DEFAULT_TIMEZONE,
        enable_utc=True,
        task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
    )

    return app


celery_app = create_celery_app()
