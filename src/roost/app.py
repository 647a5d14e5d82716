"""Roost application class.

Owns the route table, the app-level error handler and the network
listener. Setup calls return the app, so configuration chains::

    app = (
        App(port=8443, https=True, ssl_keyfile="key.pem", ssl_certfile="cert.pem")
        .add_routes([home, users])
        .set_error_handler(on_error)
    )
    await app.listen()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import replace
from os import PathLike
from typing import Any

from roost._internal.asgi import Receive, Scope, Send
from roost._internal.types import ErrorHandler
from roost.config import AppConfig
from roost.http.request import Request
from roost.http.response import Response
from roost.routing.route import Route
from roost.routing.table import RouteTable
from roost.server.favicon import favicon_route
from roost.server.handler import handle, handle_request
from roost.server.transport import Listener, ListenerState

logger = logging.getLogger("roost.app")


class App:
    """The roost application.

    Routes and error handlers can be changed at any time, including
    while listening. ``AppConfig`` fields can be passed directly as
    keyword arguments, on their own or on top of a config object::

        App(AppConfig(host="127.0.0.1"), port=9000)
    """

    __slots__ = ("_error_handler", "_favicon", "_listener", "_routes", "config")

    def __init__(self, config: AppConfig | None = None, **overrides: Any) -> None:
        base = config or AppConfig()
        self.config: AppConfig = replace(base, **overrides) if overrides else base
        self._routes = RouteTable()
        self._error_handler: ErrorHandler | None = None
        self._favicon: str | PathLike[str] | None = None
        self._listener = Listener(self, self.config)

        if self.config.favicon:
            self.set_favicon(self.config.favicon)

    # -- Setup --

    def set_favicon(self, path: str | PathLike[str]) -> App:
        """Serve *path* at ``/favicon.ico``.

        Raises ``InvalidFaviconError`` (a ``TypeError``) for extensions
        other than .ico, .png, .jpg and .jpeg; nothing is installed then.
        """
        route = favicon_route(path)
        self._favicon = path
        return self.add_route(route)

    @property
    def favicon(self) -> str | PathLike[str] | None:
        return self._favicon

    def set_error_handler(self, handler: ErrorHandler) -> App:
        """Install the fallback for failures no route error handler took."""
        self._error_handler = handler
        return self

    @property
    def error_handler(self) -> ErrorHandler | None:
        return self._error_handler

    def add_route(self, route: Route) -> App:
        """Register *route*, replacing any route with the same lowercased path."""
        self._routes.add(route)
        logger.debug("Added route %r", route)
        return self

    def add_routes(self, routes: Iterable[Route]) -> App:
        """Register several routes; later ones win on path collisions."""
        routes = list(routes)
        self._routes.add_all(routes)
        logger.debug("Added %d routes", len(routes))
        return self

    @property
    def routes(self) -> RouteTable:
        return self._routes

    # -- Dispatch --

    async def dispatch(self, request: Request, response: Response) -> None:
        """Run *request* through routing, handlers and error handlers."""
        await handle(request, response, routes=self._routes, error_handler=self._error_handler)

    # -- Server --

    @property
    def state(self) -> ListenerState:
        return self._listener.state

    @property
    def listening(self) -> bool:
        return self._listener.state is ListenerState.LISTENING

    @property
    def port(self) -> int | None:
        """The port actually bound (differs from the requested one for port 0)."""
        return self._listener.port

    async def listen(self, port: int | None = None) -> None:
        """Start accepting connections on *port* (default ``config.port``).

        Returns once the socket is accepting; the server keeps running on
        the current event loop. A second call while listening does
        nothing.

        Raises ``ConfigurationError`` when ``https`` is set without both
        credential files or when they cannot be loaded, and ``OSError``
        when the port cannot be bound. No listener exists afterwards in
        either case.
        """
        await self._listener.start(self.config.port if port is None else port)

    async def close(self) -> None:
        """Stop listening. Does nothing if the app is not listening."""
        await self._listener.stop()

    async def serve(self, port: int | None = None) -> None:
        """Listen and keep serving until cancelled or closed."""
        await self.listen(port)
        try:
            await self._listener.serve_forever()
        finally:
            await self.close()

    def run(self, port: int | None = None) -> None:
        """Blocking entry point: serve on a fresh event loop until interrupted."""
        try:
            asyncio.run(self.serve(port))
        except KeyboardInterrupt:
            logger.info("Interrupted; server stopped")

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        await handle_request(
            scope,
            receive,
            send,
            routes=self._routes,
            error_handler=self._error_handler,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
