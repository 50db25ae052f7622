from __future__ import annotations
import asyncio
from typing import Awaitable, Callable, List, Tuple, Union

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import WebSocketException
from websockets.frames import Frame, Opcode

from shared.errors import HandshakeError, ReadError, WriteError
from shared.log import get_logger
from wsprobe.config import ClientConfig

logger = get_logger(__name__)


ControlHandler = Callable[[Frame], None]
Payload = Union[str, bytes]

_CONTROL_OPCODES = (Opcode.PING, Opcode.PONG)


class InterceptingClientConnection(ClientConnection):
    """
    ClientConnection whose inbound ping/pong frames go through replaceable
    handlers.

    websockets reads frames as soon as the handshake completes, before anyone
    had a chance to install handlers. Control frames are therefore held back
    until release_control_frames() is called, then replayed in arrival order.
    The pong reply to a held ping is not delayed: the protocol layer queues
    it before events reach process_event.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.ping_handler: ControlHandler = self.default_control_handler
        self.pong_handler: ControlHandler = self.default_control_handler
        self.holding_control_frames = True
        self.held_control_frames: List[Frame] = []

    def default_control_handler(self, frame: Frame) -> None:
        # Library behaviour: pongs resolve ping waiters, pings need nothing more
        super().process_event(frame)

    def process_event(self, event) -> None:
        if isinstance(event, Frame) and event.opcode in _CONTROL_OPCODES:
            if self.holding_control_frames:
                self.held_control_frames.append(event)
            else:
                self.dispatch_control_frame(event)
        else:
            super().process_event(event)

    def dispatch_control_frame(self, frame: Frame) -> None:
        if frame.opcode is Opcode.PING:
            self.ping_handler(frame)
        else:
            self.pong_handler(frame)

    def release_control_frames(self) -> None:
        self.holding_control_frames = False
        held, self.held_control_frames = self.held_control_frames, []
        for frame in held:
            self.dispatch_control_frame(frame)

    async def ping_empty(self) -> Awaitable[float]:
        """
        Send a zero-length ping even if an earlier one is still unanswered.

        websockets keys pong waiters by payload and refuses a duplicate, so
        the stale waiter is cancelled and replaced by the new one.
        """
        stale = self.pong_waiters.pop(b"", None)
        if stale is not None:
            logger.debug("Replacing unanswered ping", extra={"direction": "tx", "frame_type": "PING"})
            stale[0].cancel()
        return await self.ping(b"")


class FramedConnection:
    """
    Wrapper around an InterceptingClientConnection.

    Splits the connection into a write side (send_text / send_ping) and a read
    side (receive), and translates library failures into WriteError /
    ReadError. ping_handler / pong_handler forward to the library connection.
    """

    def __init__(self, websocket: InterceptingClientConnection, url: str = "") -> None:
        self.websocket = websocket
        self.url = url

    @property
    def ping_handler(self) -> ControlHandler:
        return self.websocket.ping_handler

    @ping_handler.setter
    def ping_handler(self, handler: ControlHandler) -> None:
        self.websocket.ping_handler = handler

    @property
    def pong_handler(self) -> ControlHandler:
        return self.websocket.pong_handler

    @pong_handler.setter
    def pong_handler(self, handler: ControlHandler) -> None:
        self.websocket.pong_handler = handler

    def release_control_frames(self) -> None:
        """Start delivering control frames, replaying any held since the handshake."""
        self.websocket.release_control_frames()

    async def send_text(self, line: str) -> None:
        try:
            await self.websocket.send(line)
        except (WebSocketException, OSError) as exc:
            raise WriteError(f"cannot send text frame: {exc}") from exc
        logger.debug("Sent %d-byte text frame", len(line.encode()), extra={"direction": "tx", "frame_type": "TEXT"})

    async def send_ping(self) -> Awaitable[float]:
        """Send a zero-length ping; returns the waiter resolved by the matching pong."""
        try:
            pong_waiter = await self.websocket.ping_empty()
        except (WebSocketException, OSError) as exc:
            raise WriteError(f"cannot send ping frame: {exc}") from exc
        logger.debug("Sent ping frame", extra={"direction": "tx", "frame_type": "PING"})
        return pong_waiter

    async def receive(self) -> Tuple[Opcode, Payload]:
        """Wait for the next data frame and return (opcode, payload)."""
        try:
            message = await self.websocket.recv()
        except (WebSocketException, OSError) as exc:
            raise ReadError(f"cannot read frame: {exc}") from exc
        opcode = Opcode.TEXT if isinstance(message, str) else Opcode.BINARY
        logger.debug("Received %d-byte frame", len(message), extra={"direction": "rx", "frame_type": opcode.name})
        return opcode, message

    async def close(self) -> None:
        """Close the WebSocket connection"""
        try:
            await self.websocket.close(code=1000)
        except Exception as e:
            logger.error(f"Error closing connection: {e}")


async def establish(config: ClientConfig) -> FramedConnection:
    """
    Perform the opening handshake and return a ready FramedConnection.

    Origin is always sent; Authorization only when configured. Proxy settings
    come from the environment (websockets default). Every failure before the
    connection is open surfaces as HandshakeError.
    """
    logger.info("Connecting to %s", config.url, extra={"url": config.url})
    try:
        websocket = await connect(
            config.url,
            origin=config.origin,
            additional_headers=config.headers,
            ssl=config.ssl_context(),
            ping_interval=config.ping_interval,
            open_timeout=config.open_timeout,
            max_size=None,
            create_connection=InterceptingClientConnection,
        )
    except (WebSocketException, OSError, asyncio.TimeoutError, ValueError) as exc:
        logger.warning("Handshake failed: %s", exc, extra={"url": config.url})
        raise HandshakeError(config.url, str(exc) or type(exc).__name__) from exc

    logger.info("Connected to %s", config.url, extra={"url": config.url})
    return FramedConnection(websocket, url=config.url)
