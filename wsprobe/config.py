from __future__ import annotations
import ssl
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlsplit

from shared.utils import default_origin, is_websocket_url

VERSION = "0.1.0"


@dataclass(frozen=True)
class ClientConfig:
    url: str
    origin: str
    authorization: str = ""
    insecure: bool = False
    ping_interval: Optional[float] = None  # None disables library keepalive pings
    open_timeout: float = 10.0

    @classmethod
    def build(
        cls,
        url: str,
        origin: Optional[str] = None,
        authorization: Optional[str] = None,
        insecure: bool = False,
        ping_interval: Optional[float] = None,
    ) -> "ClientConfig":
        """Validate CLI inputs and fill in defaults (Origin derived from the URL)."""
        if not is_websocket_url(url):
            raise ValueError(f"not a ws:// or wss:// URL: {url}")
        return cls(
            url=url,
            origin=origin or default_origin(url),
            authorization=authorization or "",
            insecure=insecure,
            ping_interval=ping_interval if ping_interval else None,
        )

    @property
    def uses_tls(self) -> bool:
        return urlsplit(self.url).scheme.lower() == "wss"

    @property
    def headers(self) -> Dict[str, str]:
        """Extra handshake headers; Authorization only when set."""
        if self.authorization:
            return {"Authorization": self.authorization}
        return {}

    def ssl_context(self) -> Optional[ssl.SSLContext]:
        """TLS context for wss:// URLs, None for plain ws://"""
        if not self.uses_tls:
            return None
        ctx = ssl.create_default_context()
        if self.insecure:
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        return ctx
