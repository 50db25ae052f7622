#!/usr/bin/env python3
"""
wsprobe client entry point.

Connects to a WebSocket server and hands the connection and the console to
a Session. Handshake failures raise HandshakeError before any session exists;
everything after that is returned as the session outcome.
"""

from __future__ import annotations

from shared.log import get_logger
from wsprobe.config import ClientConfig
from wsprobe.connection import establish
from wsprobe.console import Console
from wsprobe.session import Session

logger = get_logger(__name__)


async def run_client(config: ClientConfig, console: Console) -> BaseException:
    connection = await establish(config)
    session = Session(connection, console)
    outcome = await session.run()
    logger.info("Disconnected from %s", config.url, extra={"url": config.url})
    return outcome
