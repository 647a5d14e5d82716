"""Listener and favicon settings for an App.

The values are read when the app is built (favicon) and when it starts
listening (address, TLS files, uvicorn logging). Individual fields can be
passed straight to ``App(...)`` as keyword overrides.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Settings for one App. Every field has a default::

        config = AppConfig(port=3000, favicon="static/icon.png")

    TLS needs both files::

        config = AppConfig(https=True, ssl_keyfile="key.pem", ssl_certfile="cert.pem")
    """

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    backlog: int = 2048

    # TLS (both files required when https=True)
    https: bool = False
    ssl_keyfile: str | Path | None = None
    ssl_certfile: str | Path | None = None

    # Installs a GET /favicon.ico route when set
    favicon: str | Path | None = None

    # Logging (forwarded to uvicorn; roost never installs handlers)
    log_level: str = "info"
    access_log: bool = False
