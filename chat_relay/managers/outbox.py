import asyncio
from dataclasses import dataclass

from starlette.websockets import WebSocket, WebSocketDisconnect

from chat_relay.constants import (
    WS_CLOSE_TIMEOUT_SECONDS,
    WS_OUTBOX_OVERFLOW_CODE,
    WS_OUTBOX_OVERFLOW_REASON,
)
from chat_relay.exceptions import PeerSendFailure
from chat_relay.logging import logger
from chat_relay.settings import app_settings
from chat_relay.utils.metrics import ws_messages_sent_total, ws_send_failures_total


@dataclass(frozen=True)
class CloseFrame:
    """Queued request to close the transport after pending frames."""

    code: int
    reason: str


class PeerOutbox:
    """
    Outbound queue for a single WebSocket peer.

    Frames are queued without awaiting the network and written in order by
    a dedicated writer task, so a slow or dead peer never blocks the
    connection that triggered a broadcast.
    """

    def __init__(
        self, websocket: WebSocket, max_pending: int | None = None
    ) -> None:
        """
        Args:
            websocket: Transport the frames are written to.
            max_pending: Maximum number of queued frames before further
                pushes fail. Defaults to WS_OUTBOX_MAX_SIZE.
        """
        self.websocket = websocket
        self.max_pending = (
            max_pending
            if max_pending is not None
            else app_settings.WS_OUTBOX_MAX_SIZE
        )
        self._queue: asyncio.Queue[str | CloseFrame] = asyncio.Queue()
        self._writer: asyncio.Task[None] | None = None
        self._closing = False
        self._stopped = False

    @property
    def closed(self) -> bool:
        """True once a close was requested or the writer gave up."""
        return self._closing or self._stopped

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        """Spawn the writer task. Must be called from a running event loop."""
        if self._writer is None:
            self._writer = asyncio.create_task(
                self._write_loop(), name=f"outbox-{id(self.websocket)}"
            )

    def push(self, text: str) -> None:
        """
        Queue a text frame for delivery.

        Args:
            text: Serialized event.

        Raises:
            PeerSendFailure: If the outbox is closed or full. A full outbox
                is closed with WS_OUTBOX_OVERFLOW_CODE after its pending
                frames.
        """
        if self.closed:
            ws_send_failures_total.labels(reason="outbox_closed").inc()
            raise PeerSendFailure(
                f"Outbox of connection {id(self.websocket)} is closed"
            )

        if self._queue.qsize() >= self.max_pending:
            ws_send_failures_total.labels(reason="outbox_full").inc()
            # Disconnect the peer instead of letting it miss events
            self.close(WS_OUTBOX_OVERFLOW_CODE, WS_OUTBOX_OVERFLOW_REASON)
            raise PeerSendFailure(
                f"Outbox of connection {id(self.websocket)} is full "
                f"({self.max_pending} pending frames)"
            )

        self._queue.put_nowait(text)

    def close(self, code: int, reason: str) -> None:
        """
        Close the transport once every frame queued so far has been sent.

        Later pushes fail with PeerSendFailure. Calling close() again is a
        no-op.
        """
        if self.closed:
            return

        self._closing = True
        self._queue.put_nowait(CloseFrame(code=code, reason=reason))

    async def join(self) -> None:
        """Wait until every queued frame has been handled."""
        await self._queue.join()

    async def stop(self) -> None:
        """
        Stop the writer task.

        A pending close frame gets up to WS_CLOSE_TIMEOUT_SECONDS to be
        flushed; any other pending frames are discarded since the peer is
        gone.
        """
        writer = self._writer
        self._stopped = True

        if writer is None:
            return

        if self._closing and not writer.done():
            try:
                await asyncio.wait_for(
                    asyncio.shield(writer), WS_CLOSE_TIMEOUT_SECONDS
                )
            except asyncio.TimeoutError:
                logger.warning(
                    f"Timed out flushing close frame to connection "
                    f"{id(self.websocket)}"
                )

        if not writer.done():
            writer.cancel()

        await asyncio.gather(writer, return_exceptions=True)
        self._discard_pending()

    async def _write_loop(self) -> None:
        try:
            while True:
                item = await self._queue.get()
                try:
                    if isinstance(item, CloseFrame):
                        await self.websocket.close(
                            code=item.code, reason=item.reason
                        )
                        return

                    await self.websocket.send_text(item)
                    ws_messages_sent_total.inc()
                finally:
                    self._queue.task_done()
        except (WebSocketDisconnect, ConnectionError, RuntimeError) as e:
            # WebSocketDisconnect: Client disconnected
            # ConnectionError: Network errors
            # RuntimeError: WebSocket in invalid state
            ws_send_failures_total.labels(reason="send_error").inc()
            logger.warning(
                f"Failed to send to connection {id(self.websocket)}: {e}"
            )
        except Exception as e:
            # Catch-all for unexpected send errors
            ws_send_failures_total.labels(reason="send_error").inc()
            logger.warning(
                f"Unexpected error sending to connection "
                f"{id(self.websocket)}: {e}"
            )
        finally:
            self._stopped = True
            self._discard_pending()

    def _discard_pending(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
