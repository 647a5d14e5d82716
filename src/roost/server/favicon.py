"""Favicon route — serves one image file at ``/favicon.ico``.

The content type comes from a fixed extension table. Anything outside
the table is rejected before a route is built.
"""

from os import PathLike
from pathlib import Path

from roost.errors import InvalidFaviconError
from roost.http.request import Request
from roost.http.response import Response
from roost.routing.route import Route

FAVICON_PATH = "/favicon.ico"

FAVICON_CONTENT_TYPES: dict[str, str] = {
    ".ico": "image/x-icon",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


def favicon_content_type(path: str | PathLike[str]) -> str:
    """Return the MIME type for a favicon file, by extension."""
    suffix = Path(path).suffix.lower()
    try:
        return FAVICON_CONTENT_TYPES[suffix]
    except KeyError:
        supported = ", ".join(FAVICON_CONTENT_TYPES)
        msg = (
            f"Invalid favicon file extension {suffix or '(none)'!r} for {str(path)!r}. "
            f"Supported: {supported}"
        )
        raise InvalidFaviconError(msg) from None


def favicon_route(path: str | PathLike[str]) -> Route:
    """Build a ``GET /favicon.ico`` route streaming the file at *path*."""
    content_type = favicon_content_type(path)

    async def serve_favicon(request: Request, response: Response) -> None:
        response.status = 200
        response.set_header("Content-Type", content_type)
        await response.send_file(path)

    return Route(FAVICON_PATH).get(serve_favicon)
