from typing import Any

from starlette import status
from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket

from chat_relay.api.ws.session import ChatSession
from chat_relay.constants import WS_NAME_TAKEN_CODE
from chat_relay.logging import clear_log_context, logger, set_log_context
from chat_relay.managers.broadcaster import Broadcaster
from chat_relay.managers.connection_registry import Connection, ConnectionRegistry
from chat_relay.managers.outbox import PeerOutbox
from chat_relay.utils.metrics import ws_connections_active, ws_connections_total


class ChatWebSocketEndpoint(WebSocketEndpoint):  # type: ignore[misc]
    """
    WebSocket endpoint binding one transport to one ChatSession.

    The registry and broadcaster are read from the application state, so
    every endpoint instance of an application shares them while separate
    applications (e.g. in tests) stay isolated.
    """

    encoding = None  # Text frames are parsed by the session, binary is rejected there

    session: ChatSession
    connection: Connection

    @property
    def registry(self) -> ConnectionRegistry:
        return self.scope["app"].state.registry

    @property
    def broadcaster(self) -> Broadcaster:
        return self.scope["app"].state.broadcaster

    async def dispatch(self) -> None:
        """
        Manage the WebSocket connection lifecycle.

        The function performs the following steps:
        1. Accepts the connection and attaches it to the registry (on_connect).
        2. Passes every inbound frame to on_receive.
        3. Stops reading once the session closed itself (name rejected) or
           the transport reports a disconnect.
        4. Always runs on_disconnect, which evicts the connection and
           notifies the remaining peers, even if handling raised.
        """
        websocket = WebSocket(self.scope, receive=self.receive, send=self.send)
        await self.on_connect(websocket)

        close_code = status.WS_1000_NORMAL_CLOSURE

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.receive":
                    data = await self.decode(websocket, message)
                    await self.on_receive(websocket, data)
                    if self.session.closed:
                        # Only a rejected registration closes the session here
                        close_code = WS_NAME_TAKEN_CODE
                        break
                elif message["type"] == "websocket.disconnect":
                    close_code = int(
                        message.get("code") or status.WS_1000_NORMAL_CLOSURE
                    )
                    break
        except Exception as exc:
            close_code = status.WS_1011_INTERNAL_ERROR
            raise exc
        finally:
            await self.on_disconnect(websocket, close_code)

    async def decode(
        self, websocket: WebSocket, message: dict[str, Any]
    ) -> str | bytes | None:
        """
        Return the raw frame payload.

        Parsing is left to the session so that a malformed frame only drops
        that frame instead of closing the connection.
        """
        if message.get("text") is not None:
            return message["text"]
        return message.get("bytes")

    async def on_connect(self, websocket: WebSocket) -> None:
        """
        Accept the connection and attach it to the registry as anonymous.

        Anonymous connections already receive broadcasts.
        """
        await websocket.accept()

        outbox = PeerOutbox(websocket)
        self.connection = Connection(outbox=outbox)
        self.session = ChatSession(
            self.connection, self.registry, self.broadcaster
        )

        set_log_context(connection_id=self.connection.connection_id)

        await self.session.open()
        # Frames broadcast while attaching stay queued until the writer runs
        outbox.start()

        ws_connections_total.labels(status="accepted").inc()
        ws_connections_active.inc()
        logger.debug(
            f"Client connected to websocket (connection_id: "
            f"{self.connection.connection_id})"
        )

    async def on_disconnect(self, websocket: WebSocket, close_code: int) -> None:
        """
        Evict the connection, notify peers and stop its writer task.
        """
        ws_connections_active.dec()
        logger.debug(
            f"Client {self.connection.connection_id} disconnected with "
            f"code {close_code}"
        )

        try:
            await self.session.close()
        finally:
            clear_log_context()
            await self.connection.outbox.stop()
