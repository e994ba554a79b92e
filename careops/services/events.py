"""Push ``broadcast.refresh`` events to connected websocket clients."""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

logger = logging.getLogger(__name__)

UPDATES_GROUP = "updates"


def broadcast_refresh(keys):
    """Tell ``ws/updates/`` listeners which resources changed.

    Clients keep polling regardless, so a missing channel layer only
    delays their refresh.
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    now = timezone.now()
    event = {"type": "broadcast.refresh", "version": int(now.timestamp()), "ts": now.isoformat(), "keys": list(keys)[:50]}
    async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)
    logger.debug("broadcast refresh %s", event["keys"])
