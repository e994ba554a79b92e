import json

from channels.generic.websocket import AsyncWebsocketConsumer

from careops.services.events import UPDATES_GROUP


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Refresh hints for the dashboards.

    Events carry only the keys of changed resources; clients refetch
    them over the REST API with their own token.
    """
    GROUP = UPDATES_GROUP

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        if text_data and text_data.strip() == "ping":
            await self.send(json.dumps({"type": "pong"}))

    async def broadcast_refresh(self, event):
        # event: {"type": "broadcast.refresh", "version": int, "ts": "...", "keys": [...]}
        await self.send(json.dumps(event))
