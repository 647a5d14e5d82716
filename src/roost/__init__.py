"""Roost — a small HTTP/HTTPS request router.

Paths map to routes, methods map to handlers, and failures fall back
through route, app and server error handling.

Basic usage::

    from roost import App, Route

    def hello(request, response):
        return 200, "Hello, World!"

    app = App().add_route(Route("/").get(hello))
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "InvalidFaviconError",
    "MethodNotAllowed",
    "NotFound",
    "Reply",
    "Request",
    "Response",
    "ResponseAlreadySent",
    "RoostError",
    "Route",
    "Written",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    if name == "App":
        from roost.app import App

        return App

    if name == "AppConfig":
        from roost.config import AppConfig

        return AppConfig

    if name == "Route":
        from roost.routing.route import Route

        return Route

    if name == "Request":
        from roost.http.request import Request

        return Request

    if name == "Response":
        from roost.http.response import Response

        return Response

    if name in ("Reply", "Written"):
        from roost.server import negotiation as _negotiation

        return getattr(_negotiation, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidFaviconError",
        "MethodNotAllowed",
        "NotFound",
        "ResponseAlreadySent",
        "RoostError",
    ):
        from roost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
