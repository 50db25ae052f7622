import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shared.errors import ConsoleError


_EOF = object()


class DummyConsole:
    """Console double: queued input lines, recorded output lines."""

    def __init__(self, lines=()) -> None:
        self.inbox: asyncio.Queue = asyncio.Queue()
        for line in lines:
            self.inbox.put_nowait(line)
        self.written: List[str] = []
        self.styles: List[Optional[str]] = []
        self.enter_count = 0
        self.exit_count = 0
        self.read_cancelled = False

    def feed(self, line) -> None:
        self.inbox.put_nowait(line)

    def close_input(self) -> None:
        self.inbox.put_nowait(_EOF)

    async def read_line(self) -> str:
        try:
            item = await self.inbox.get()
        except asyncio.CancelledError:
            self.read_cancelled = True
            raise
        if item is _EOF:
            raise ConsoleError("end of input", reason=ConsoleError.EOF)
        if isinstance(item, BaseException):
            raise item
        return item

    def write_line(self, text: str, style: Optional[str] = None) -> None:
        self.written.append(text)
        self.styles.append(style)

    async def wait_for_line(self, text: str, timeout: float = 3.0) -> bool:
        loop = asyncio.get_running_loop()
        end = loop.time() + timeout
        while loop.time() < end:
            if text in self.written:
                return True
            await asyncio.sleep(0.01)
        return False

    async def __aenter__(self) -> "DummyConsole":
        self.enter_count += 1
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.exit_count += 1


class DummyConnection:
    """FramedConnection double: records sent frames, replays queued inbound frames."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, object]] = []
        self.incoming: asyncio.Queue = asyncio.Queue()
        self.default_calls: List[Tuple[str, object]] = []
        self.ping_handler = self._default_ping
        self.pong_handler = self._default_pong
        self.write_error: Optional[Exception] = None
        self.close_count = 0
        self.receive_cancelled = False
        self.release_count = 0

    def _default_ping(self, frame) -> None:
        self.default_calls.append(("ping", frame))

    def _default_pong(self, frame) -> None:
        self.default_calls.append(("pong", frame))

    def release_control_frames(self) -> None:
        self.release_count += 1

    def push(self, opcode, payload) -> None:
        self.incoming.put_nowait((opcode, payload))

    def push_error(self, exc: Exception) -> None:
        self.incoming.put_nowait(exc)

    async def send_text(self, line: str) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.sent.append(("text", line))

    async def send_ping(self):
        if self.write_error is not None:
            raise self.write_error
        self.sent.append(("ping", b""))
        return None

    async def receive(self):
        try:
            item = await self.incoming.get()
        except asyncio.CancelledError:
            self.receive_cancelled = True
            raise
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.close_count += 1


@pytest.fixture
def make_console():
    # Built inside the test so queues bind to the test's event loop
    return DummyConsole


@pytest.fixture
def make_connection():
    return DummyConnection
