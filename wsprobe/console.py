from __future__ import annotations
from typing import Optional

import aioconsole
from rich.console import Console as RichConsole

from shared.errors import ConsoleError
from shared.log import get_logger
from shared.utils import styled

logger = get_logger(__name__)


class Console:
    """
    Line-oriented terminal used by a session.

    Input comes from aioconsole (cancellable, so a finished session can stop
    a pending read). Output goes through rich, one print per line.
    """

    def __init__(
        self,
        prompt: str = "> ",
        no_color: bool = False,
        output: Optional[RichConsole] = None,
    ) -> None:
        self.prompt = prompt
        self.output = output or RichConsole(no_color=no_color, highlight=False, soft_wrap=True)
        self.acquired = False
        self.released = False

    async def read_line(self) -> str:
        """Read the next line without its trailing newline."""
        try:
            return await aioconsole.ainput(self.prompt)
        except EOFError as exc:
            raise ConsoleError("end of input", reason=ConsoleError.EOF) from exc
        except KeyboardInterrupt as exc:
            raise ConsoleError("interrupted", reason=ConsoleError.INTERRUPT) from exc
        except OSError as exc:
            raise ConsoleError(f"console read failed: {exc}", reason=ConsoleError.IO) from exc

    def write_line(self, text: str, style: Optional[str] = None) -> None:
        self.output.print(styled(text, style), markup=False, highlight=False)

    async def __aenter__(self) -> "Console":
        self.acquired = True
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self.released:
            logger.warning("Console released twice")
            return
        self.released = True
        self.output.file.flush()
