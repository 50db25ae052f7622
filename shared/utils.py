from __future__ import annotations
import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from rich.text import Text

# ========================================
#           FRAME FORMATTING HELPERS
# ========================================
"""
Pure helpers used to turn received payloads into display lines.
Nothing here keeps state; every function is a plain string transform.
"""

# Style for every line describing something received from the peer.
RX_STYLE = "green"

_HEX_PAIR_RE = re.compile(r"(..)")


def format_hex(data: bytes) -> str:
    """
    Render bytes as lowercase hex pairs, each followed by one space.

    b"\\xab\\xcd" -> "ab cd "
    b""          -> ""
    """
    return _HEX_PAIR_RE.sub(r"\1 ", bytes(data).hex())


def styled(text: str, style: Optional[str] = None) -> Text:
    """Wrap text in a rich Text so it is printed verbatim (no markup parsing)."""
    return Text(text, style=style or "")


# ========================================
#           URL HELPERS
# ========================================

_WS_SCHEMES = {"ws": "http", "wss": "https"}


def is_websocket_url(url: str) -> bool:
    """
    Accepts 'ws://host[:port][/path]' and 'wss://...'.
    The host part must be non-empty.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme.lower() in _WS_SCHEMES and bool(parts.netloc)


def default_origin(url: str) -> str:
    """
    Derive an Origin header from a WebSocket URL.

    ws://example.com:8080/chat  -> http://example.com:8080
    wss://example.com/chat      -> https://example.com
    """
    parts = urlsplit(url)
    scheme = _WS_SCHEMES.get(parts.scheme.lower(), parts.scheme)
    return urlunsplit((scheme, parts.netloc, "", "", ""))
