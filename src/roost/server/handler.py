"""Request dispatch — path lookup, method lookup, layered error handling.

The only component that turns an ASGI ``http`` scope into a handler
call. Failures are recovered as close to their origin as possible:

1. the route's error handler (handler failures only),
2. the app's error handler (anything raised by dispatch),
3. a plain response for ``HTTPError`` when neither handler exists,
4. otherwise the exception propagates to the ASGI server.
"""

import logging

from roost._internal.asgi import Receive, Scope, Send
from roost._internal.invoke import invoke
from roost._internal.types import ErrorHandler
from roost.errors import HTTPError, NotFound
from roost.http.request import Request
from roost.http.response import Response
from roost.routing.table import RouteTable, normalize_path
from roost.server.negotiation import apply, negotiate

logger = logging.getLogger("roost.server")


def request_target(request: Request) -> tuple[str, str]:
    """Return the lowercased (method, path) used for the route lookup.

    A missing method counts as GET and a missing path as ``/``. The
    query string is never part of ``request.path``.
    """
    method = (request.method or "GET").lower()
    path = normalize_path(request.path or "/")
    return method, path


async def dispatch(request: Request, response: Response, routes: RouteTable) -> None:
    """Resolve the route and method handler for *request* and run it.

    Raises ``NotFound`` or ``MethodNotAllowed`` for lookup failures.
    A handler exception goes to the route's error handler when one is
    installed and propagates otherwise.
    """
    method, path = request_target(request)

    route = routes.get(path)
    if route is None:
        logger.debug("No route for %s %s", method.upper(), path)
        raise NotFound(f"No route matches {request.path or '/'!r}")

    handler = route.handler_for(method)

    try:
        result = await invoke(handler, request, response)
    except Exception as exc:
        if route.error_handler is None:
            raise
        logger.debug("Route error handler for %s %s: %r", method.upper(), path, exc)
        result = await invoke(route.error_handler, request, response, exc)

    await apply(negotiate(result), response)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    routes: RouteTable,
    error_handler: ErrorHandler | None,
) -> None:
    """Process a single ASGI HTTP request."""
    request = Request.from_asgi(scope, receive)
    response = Response(send)
    await handle(request, response, routes=routes, error_handler=error_handler)


async def handle(
    request: Request,
    response: Response,
    *,
    routes: RouteTable,
    error_handler: ErrorHandler | None,
) -> None:
    """Dispatch *request* with app-level error recovery, then close *response*."""
    try:
        await dispatch(request, response, routes)
    except Exception as exc:
        if error_handler is not None:
            logger.debug("App error handler for %s %s: %r", request.method, request.path, exc)
            result = await invoke(error_handler, request, response, exc)
            await apply(negotiate(result), response)
        elif isinstance(exc, HTTPError) and not response.headers_sent:
            await send_http_error(exc, response)
        else:
            raise

    # A handler that returned without ending the response gets an empty body
    if not response.finished:
        await response.end()


async def send_http_error(exc: HTTPError, response: Response) -> None:
    """Default answer for an ``HTTPError`` nobody handled."""
    response.status = exc.status
    for name, value in exc.headers:
        response.set_header(name, value)
    await response.end(exc.detail or f"Error {exc.status}")
