"""Route: one path's method-to-handler table.

Every route starts with all six supported methods bound to
``method_not_supported``. Registration replaces a binding and returns
the route, so registrations chain::

    route = (
        Route("/users")
        .get(list_users)
        .post(create_user)
        .set_error_handler(users_failed)
    )
"""

from __future__ import annotations

from roost._internal.types import ErrorHandler, Handler
from roost.errors import MethodNotAllowed
from roost.http.request import Request
from roost.http.response import Response

METHODS: tuple[str, ...] = ("get", "post", "put", "patch", "head", "options")
ALLOWED_METHODS: frozenset[str] = frozenset(m.upper() for m in METHODS)

NOT_SUPPORTED_STATUS = 500
NOT_SUPPORTED_MESSAGE = "Method not supported by route"


def method_not_supported(request: Request, response: Response) -> tuple[int, str]:
    """Default handler for a method nobody registered on the route."""
    return NOT_SUPPORTED_STATUS, NOT_SUPPORTED_MESSAGE


class Route:
    """A path plus its per-method handlers and optional error handler.

    ``path`` is kept verbatim; the app's route table stores it under
    its lowercased form. Callers are responsible for passing a
    non-empty path.
    """

    __slots__ = ("error_handler", "handlers", "path")

    def __init__(self, path: str) -> None:
        self.path = path
        self.handlers: dict[str, Handler] = dict.fromkeys(METHODS, method_not_supported)
        self.error_handler: ErrorHandler | None = None

    def __repr__(self) -> str:
        registered = [m.upper() for m, h in self.handlers.items() if h is not method_not_supported]
        return f"Route({self.path!r}, methods={registered})"

    # -- Registration --

    def get(self, handler: Handler) -> Route:
        return self._register("get", handler)

    def post(self, handler: Handler) -> Route:
        return self._register("post", handler)

    def put(self, handler: Handler) -> Route:
        return self._register("put", handler)

    def patch(self, handler: Handler) -> Route:
        return self._register("patch", handler)

    def head(self, handler: Handler) -> Route:
        return self._register("head", handler)

    def options(self, handler: Handler) -> Route:
        return self._register("options", handler)

    def set_error_handler(self, handler: ErrorHandler) -> Route:
        """Install the handler called when one of this route's handlers raises."""
        self.error_handler = handler
        return self

    # -- Lookup --

    def handler_for(self, method: str) -> Handler:
        """Return the handler bound to *method* (any case).

        Raises ``MethodNotAllowed`` for methods outside the six a route
        can serve.
        """
        try:
            return self.handlers[method.lower()]
        except KeyError:
            raise MethodNotAllowed(ALLOWED_METHODS) from None

    def _register(self, method: str, handler: Handler) -> Route:
        self.handlers[method] = handler
        return self
