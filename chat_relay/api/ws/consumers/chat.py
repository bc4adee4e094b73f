from fastapi import APIRouter
from starlette.websockets import WebSocket

from chat_relay.api.ws.websocket import ChatWebSocketEndpoint
from chat_relay.logging import logger
from chat_relay.settings import app_settings
from chat_relay.utils.metrics import ws_messages_received_total

router = APIRouter()


@router.websocket_route(app_settings.CHAT_PATH)
class Chat(ChatWebSocketEndpoint):
    """
    Group chat endpoint.

    Clients send a `register` event with their display name, then `message`
    events. Every attached client receives `connected`, `disconnected`,
    `participants` and `message` events.
    """

    async def on_receive(self, websocket: WebSocket, data: str | bytes | None):
        """
        Hands an inbound frame to the chat session.

        Args:
            websocket: The WebSocket connection instance
            data: Raw frame payload, text for JSON events
        """
        ws_messages_received_total.inc()
        logger.debug(f"Received data: {data!r}")

        await self.session.handle(data)
