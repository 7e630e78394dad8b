# barbershop/services/realtime/appointment_feed.py
"""
Per-shop change feed for the appointments table.

Dashboards subscribe to `realtime:barbershop:{id}:appointments` and refetch
on every event. Publishing is best effort: a Redis outage never fails the
write that triggered it.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from redis.exceptions import RedisError

from barbershop.config.redis import RedisKeys, get_redis
from barbershop.config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

EVENT_TYPES = ("INSERT", "UPDATE", "DELETE")


class AppointmentFeed:

    @staticmethod
    def channel_for(barbershop_id) -> str:
        return RedisKeys.APPOINTMENTS_CHANNEL.format(barbershop_id=barbershop_id)

    @staticmethod
    def build_event(event_type: str, record: Optional[dict] = None, old_record: Optional[dict] = None) -> dict:
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type}")
        return {
            "type": event_type,
            "table": "appointments",
            "record": record,
            "old_record": old_record,
            "commit_timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @staticmethod
    async def publish(
            barbershop_id,
            event_type: str,
            record: Optional[dict] = None,
            old_record: Optional[dict] = None,
    ) -> bool:
        """Returns True when the event reached Redis"""
        if not settings.REALTIME_ENABLED:
            return False

        event = AppointmentFeed.build_event(event_type, record, old_record)
        channel = AppointmentFeed.channel_for(barbershop_id)
        try:
            redis_client = await get_redis()
            receivers = await redis_client.publish(channel, json.dumps(event, default=str))
            logger.debug(f"Published {event_type} to {channel} ({receivers} subscribers)")
            return True
        except (RedisError, OSError) as e:
            logger.error(f"Failed to publish {event_type} to {channel}: {e}")
            return False
