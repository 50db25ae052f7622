from __future__ import annotations
import asyncio
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional

from websockets.frames import Opcode

from shared.errors import UnknownFrameType
from shared.log import get_logger
from shared.utils import RX_STYLE, format_hex
from wsprobe.control import ControlInterceptor

if TYPE_CHECKING:
    from wsprobe.connection import FramedConnection
    from wsprobe.console import Console

logger = get_logger(__name__)

# Console line that sends a control ping instead of a text frame
PING_COMMAND = "ping"


class Session:
    """
    One connection plus one console, moved in both directions at once.

    The console loop owns the connection's write side, the socket loop its
    read side. Whichever loop fails first fills the outcome slot; the session
    then cancels both loops, closes the connection, releases the console, and
    returns that first failure.
    """

    def __init__(self, connection: "FramedConnection", console: "Console") -> None:
        self.connection = connection
        self.console = console
        self.interceptor: Optional[ControlInterceptor] = None
        self._outcome: Optional[asyncio.Future] = None

    async def run(self) -> BaseException:
        """Run until the first loop failure and return it (never raises it)."""
        self._outcome = asyncio.get_running_loop().create_future()
        self.interceptor = ControlInterceptor.install(self.connection, self.console)

        async with self.console:
            tasks: List[asyncio.Task] = [
                asyncio.create_task(self._guard(self.console_loop), name="console-loop"),
                asyncio.create_task(self._guard(self.socket_loop), name="socket-loop"),
            ]
            try:
                outcome = await self._outcome
            finally:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                await self.connection.close()

        logger.debug("Session ended: %r", outcome)
        return outcome

    def report(self, exc: BaseException) -> None:
        """First report wins; later ones are dropped."""
        if self._outcome is None or self._outcome.done():
            logger.debug("Dropping late session outcome: %r", exc)
            return
        self._outcome.set_result(exc)

    async def _guard(self, loop: Callable[[], Awaitable[None]]) -> None:
        try:
            await loop()
        except Exception as exc:
            self.report(exc)

    async def console_loop(self) -> None:
        while True:
            line = await self.console.read_line()
            if line == PING_COMMAND:
                await self.connection.send_ping()
            else:
                await self.connection.send_text(line)

    async def socket_loop(self) -> None:
        while True:
            opcode, payload = await self.connection.receive()
            if opcode is Opcode.TEXT:
                text = payload if isinstance(payload, str) else bytes(payload).decode("utf-8")
            elif opcode is Opcode.BINARY:
                text = format_hex(payload)
            else:
                # FramedConnection.receive only yields TEXT or BINARY; reserved
                # opcodes fail the connection in websockets and arrive as ReadError
                raise UnknownFrameType(opcode)
            self.console.write_line(f"< {text}", style=RX_STYLE)
