from __future__ import annotations
from typing import Any


class WsProbeError(Exception):
    """Base class for every terminal session failure."""
    pass


class HandshakeError(WsProbeError):
    """Raised when the opening handshake fails (DNS, TLS, HTTP upgrade, network)."""

    def __init__(self, url: str, detail: str) -> None:
        super().__init__(f"cannot connect to {url}: {detail}")
        self.url = url


class ConsoleError(WsProbeError):
    """Raised when the console hits end-of-input, an interrupt, or an I/O failure."""

    EOF = "eof"
    INTERRUPT = "interrupt"
    IO = "io"

    def __init__(self, message: str, reason: str = IO) -> None:
        super().__init__(message)
        self.reason = reason

    @property
    def is_quit(self) -> bool:
        """True when the operator ended the session (EOF or Ctrl-C)."""
        return self.reason in (self.EOF, self.INTERRUPT)


class WriteError(WsProbeError):
    """Raised when a frame cannot be sent."""
    pass


class ReadError(WsProbeError):
    """Raised when the next frame cannot be received."""
    pass


class UnknownFrameType(WsProbeError):
    """Raised when a received frame is neither text nor binary."""

    def __init__(self, frame_type: Any) -> None:
        super().__init__(f"unknown websocket frame type: {getattr(frame_type, 'value', frame_type)}")
        self.frame_type = frame_type
