"""Network listener — plain or TLS, embedded in the running event loop.

Uses uvicorn's ``Server`` directly instead of ``uvicorn.run()`` so that
``listen()`` returns once the socket is accepting and the caller keeps
its own event loop. The socket is bound here rather than by uvicorn so
a bind failure raises ``OSError`` instead of exiting the process.

Lifecycle::

    UNBOUND --start()--> LISTENING --stop()--> UNBOUND
"""

from __future__ import annotations

import asyncio
import logging
import socket
import ssl
from dataclasses import dataclass, field
from enum import Enum
from os import PathLike
from typing import TYPE_CHECKING

import anyio
import uvicorn

from roost.config import AppConfig
from roost.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from roost._internal.asgi import Receive, Scope, Send

    ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

logger = logging.getLogger("roost.server")


class ListenerState(Enum):
    UNBOUND = "unbound"
    LISTENING = "listening"


@dataclass(frozen=True, slots=True)
class TLSCredentials:
    """Key and certificate, read as raw bytes at listen time."""

    keyfile: str | PathLike[str]
    certfile: str | PathLike[str]
    key: bytes = field(repr=False)
    cert: bytes = field(repr=False)


def check_tls_config(config: AppConfig) -> None:
    """Fail fast when TLS is requested without both credential files."""
    if config.https and not (config.ssl_keyfile and config.ssl_certfile):
        msg = "https=True requires both ssl_keyfile and ssl_certfile."
        raise ConfigurationError(msg)


async def _read_credential(path: str | PathLike[str], kind: str) -> bytes:
    try:
        data = await anyio.Path(path).read_bytes()
    except OSError as exc:
        msg = f"Cannot read TLS {kind} {str(path)!r}: {exc.strerror or exc}"
        raise ConfigurationError(msg) from exc
    if not data:
        msg = f"TLS {kind} {str(path)!r} is empty."
        raise ConfigurationError(msg)
    return data


async def load_credentials(
    keyfile: str | PathLike[str],
    certfile: str | PathLike[str],
) -> TLSCredentials:
    """Read the key and certificate files."""
    key = await _read_credential(keyfile, "key")
    cert = await _read_credential(certfile, "certificate")
    return TLSCredentials(keyfile=keyfile, certfile=certfile, key=key, cert=cert)


def bind_socket(host: str, port: int, backlog: int) -> socket.socket:
    """Create a listening TCP socket for *host*:*port*."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    return socket.create_server((host, port), family=family, backlog=backlog)


class Listener:
    """Owns the uvicorn server for one app.

    ``start`` is idempotent while listening; ``stop`` is idempotent while
    unbound. Both are serialized by an asyncio lock so overlapping calls
    cannot bind twice.
    """

    __slots__ = ("_app", "_config", "_lock", "_server", "_socket", "_ticker", "state")

    def __init__(self, app: ASGIApp, config: AppConfig) -> None:
        self._app = app
        self._config = config
        self._lock = asyncio.Lock()
        self._server: uvicorn.Server | None = None
        self._socket: socket.socket | None = None
        self._ticker: asyncio.Task[None] | None = None
        self.state = ListenerState.UNBOUND

    @property
    def port(self) -> int | None:
        """The bound port, or None while unbound."""
        if self._socket is None:
            return None
        return self._socket.getsockname()[1]

    @property
    def scheme(self) -> str:
        return "https" if self._config.https else "http"

    async def start(self, port: int) -> None:
        """Bind *port* and start accepting connections."""
        if self.state is ListenerState.LISTENING:
            logger.debug("Already listening on port %s; ignoring listen()", self.port)
            return

        check_tls_config(self._config)

        async with self._lock:
            if self.state is ListenerState.LISTENING:
                return

            credentials = None
            if self._config.https:
                credentials = await load_credentials(
                    self._config.ssl_keyfile,  # type: ignore[arg-type]
                    self._config.ssl_certfile,  # type: ignore[arg-type]
                )

            config = self._uvicorn_config(port, credentials)
            sock = bind_socket(self._config.host, port, self._config.backlog)
            server = uvicorn.Server(config)
            server.lifespan = config.lifespan_class(config)
            try:
                await server.startup(sockets=[sock])
            except BaseException:
                sock.close()
                raise
            if server.should_exit:
                sock.close()
                msg = "Application startup failed; not listening."
                raise ConfigurationError(msg)

            self._server = server
            self._socket = sock
            self._ticker = asyncio.create_task(server.main_loop())
            self.state = ListenerState.LISTENING

        logger.info("Listening on %s://%s:%d", self.scheme, self._config.host, self.port)

    async def serve_forever(self) -> None:
        """Wait until the listener is stopped."""
        if self._ticker is not None:
            await self._ticker

    async def stop(self) -> None:
        """Stop accepting connections, finish in-flight requests, unbind."""
        async with self._lock:
            server, ticker = self._server, self._ticker
            if self.state is ListenerState.UNBOUND or server is None or ticker is None:
                return

            port = self.port
            server.should_exit = True
            try:
                if not ticker.done():
                    await ticker
                elif not ticker.cancelled() and ticker.exception() is not None:
                    logger.error(
                        "Server loop on port %s failed", port, exc_info=ticker.exception()
                    )
            finally:
                await server.shutdown(sockets=[self._socket] if self._socket else None)
                self._server = None
                self._socket = None
                self._ticker = None
                self.state = ListenerState.UNBOUND

        logger.info("Stopped listening on port %s", port)

    def _uvicorn_config(self, port: int, credentials: TLSCredentials | None) -> uvicorn.Config:
        config = uvicorn.Config(
            self._app,
            host=self._config.host,
            port=port,
            backlog=self._config.backlog,
            lifespan="on",
            log_config=None,
            log_level=self._config.log_level,
            access_log=self._config.access_log,
            ssl_keyfile=str(credentials.keyfile) if credentials else None,
            ssl_certfile=str(credentials.certfile) if credentials else None,
        )
        try:
            config.load()
        except (ssl.SSLError, OSError) as exc:
            msg = f"Invalid TLS credentials: {exc}"
            raise ConfigurationError(msg) from exc
        return config
