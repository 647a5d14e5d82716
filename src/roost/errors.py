"""Roost exception hierarchy.

Shared across the route table, dispatch, transport and the response
writer so every module raises and catches the same types.

Error handlers receive the raised exception unchanged and can match on
its class::

    def on_error(request, response, error):
        match error:
            case NotFound():
                return 404, "nothing here"
            case HTTPError(status=status, detail=detail):
                return status, detail
            case _:
                return 500, "handler failed"
"""

from dataclasses import dataclass


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when app or listener configuration is invalid.

    Raised synchronously, before any network resource is acquired.
    """


class InvalidFaviconError(ConfigurationError, TypeError):
    """The favicon file extension has no known image MIME type."""


class ResponseAlreadySent(RoostError):  # noqa: N818
    """Raised when changing a response whose headers or body already went out."""


@dataclass(frozen=True, slots=True)
class HTTPError(RoostError):
    """An error that maps directly to an HTTP status code.

    Raised by dispatch or by handlers. Without an app-level error
    handler it becomes a plain-text response with ``status`` and
    ``detail``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route is registered for the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — the request method is not one a route can ever serve.

    Carries an ``Allow`` header listing the supported methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
