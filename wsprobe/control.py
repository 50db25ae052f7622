from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from websockets.frames import Frame

from shared.utils import RX_STYLE
from wsprobe.connection import ControlHandler, FramedConnection

if TYPE_CHECKING:
    from wsprobe.console import Console

PING_LINE = "> PING"
PONG_LINE = "< PONG"


@dataclass
class ControlInterceptor:
    """
    Shows inbound ping/pong frames on the console, then hands them to the
    connection's original handlers so the protocol keeps working (pings still
    get their pong, pongs still resolve ping waiters). Installing releases
    any control frames the connection held back since the handshake.
    """
    console: "Console"
    default_ping: ControlHandler
    default_pong: ControlHandler

    @classmethod
    def install(cls, connection: FramedConnection, console: "Console") -> "ControlInterceptor":
        interceptor = cls(console, connection.ping_handler, connection.pong_handler)
        connection.ping_handler = interceptor.on_ping
        connection.pong_handler = interceptor.on_pong
        connection.release_control_frames()
        return interceptor

    def on_ping(self, frame: Frame) -> None:
        self.console.write_line(PING_LINE, style=RX_STYLE)
        self.default_ping(frame)

    def on_pong(self, frame: Frame) -> None:
        self.console.write_line(PONG_LINE, style=RX_STYLE)
        self.default_pong(frame)
