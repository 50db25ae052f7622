#!/usr/bin/env python3
"""wsprobe command line: parse options, run one session, map its outcome to an exit code."""

from __future__ import annotations
import asyncio
from typing import Optional

import typer
from rich.console import Console as RichConsole
from rich.text import Text

from shared.errors import ConsoleError, HandshakeError
from shared.log import get_logger, set_log_level
from .client import run_client
from .config import VERSION, ClientConfig
from .console import Console

app = typer.Typer(help="Interactive WebSocket client for probing and debugging servers", add_completion=False)
err_console = RichConsole(stderr=True, highlight=False, soft_wrap=True)
logger = get_logger(__name__)


def _report(exc: BaseException) -> None:
    err_console.print(Text.assemble(("error", "bold red"), f": {exc}"))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"wsprobe {VERSION}")
        raise typer.Exit()


@app.command()
def main(
    url: str = typer.Argument(..., help="ws:// or wss:// URL to connect to"),
    origin: Optional[str] = typer.Option(None, "--origin", "-o", help="Origin header; derived from URL if omitted"),
    auth: Optional[str] = typer.Option(None, "--auth", envvar="WSPROBE_AUTH", help="Authorization header value"),
    insecure: bool = typer.Option(False, "--insecure", "-k", help="Skip TLS certificate validation"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    ping_interval: Optional[float] = typer.Option(None, "--ping-interval", help="Send keepalive pings every N seconds (0 disables)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
    version: Optional[bool] = typer.Option(None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
):
    """Type lines to send text frames ('ping' sends a ping frame). Ctrl-D quits."""
    if verbose:
        set_log_level("DEBUG")
    try:
        config = ClientConfig.build(url, origin=origin, authorization=auth, insecure=insecure, ping_interval=ping_interval)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="URL")

    console = Console(no_color=no_color)
    try:
        outcome = asyncio.run(run_client(config, console))
    except HandshakeError as e:
        _report(e)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        raise typer.Exit(0)

    if isinstance(outcome, ConsoleError) and outcome.is_quit:
        logger.debug("Console closed: %s", outcome)
        raise typer.Exit(0)
    _report(outcome)
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
