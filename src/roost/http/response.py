"""Mutable HTTP response writer.

Handlers receive one of these alongside the request. A handler either
writes through it (``write``/``end``/``send_file``) and returns nothing,
or leaves it untouched and returns a ``(status, body)`` pair that
dispatch applies.

Headers go out with the first body write; after that the status and
headers are fixed.
"""

from __future__ import annotations

from os import PathLike

import anyio

from roost._internal.asgi import Send
from roost.errors import ResponseAlreadySent

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"
FILE_CHUNK_SIZE = 64 * 1024


def _to_bytes(body: str | bytes) -> bytes:
    return body.encode("utf-8") if isinstance(body, str) else body


class Response:
    """Writes one HTTP response to an ASGI ``send`` channel.

    Usage inside a handler::

        async def report(request, response):
            response.status = 201
            response.set_header("Content-Type", "text/csv")
            await response.write("a,b\\n")
            await response.end("1,2\\n")
    """

    __slots__ = ("_finished", "_headers", "_send", "_started", "status")

    def __init__(self, send: Send, *, status: int = 200) -> None:
        self.status = status
        self._send = send
        self._headers: dict[str, tuple[str, str]] = {}
        self._started = False
        self._finished = False

    @property
    def headers_sent(self) -> bool:
        """True once the status line and headers have been sent."""
        return self._started

    @property
    def finished(self) -> bool:
        """True once the response body has been completed."""
        return self._finished

    # -- Headers --

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing any earlier value for the same name."""
        if self._started:
            msg = f"Cannot set header {name!r}: headers already sent."
            raise ResponseAlreadySent(msg)
        self._headers[name.lower()] = (name, value)

    def get_header(self, name: str) -> str | None:
        entry = self._headers.get(name.lower())
        return entry[1] if entry else None

    def remove_header(self, name: str) -> None:
        if self._started:
            msg = f"Cannot remove header {name!r}: headers already sent."
            raise ResponseAlreadySent(msg)
        self._headers.pop(name.lower(), None)

    # -- Body --

    async def write(self, chunk: str | bytes) -> None:
        """Send a body chunk, sending the headers first if needed."""
        self._check_open()
        await self._start()
        await self._send(
            {"type": "http.response.body", "body": _to_bytes(chunk), "more_body": True}
        )

    async def end(self, body: str | bytes = b"") -> None:
        """Send the final body chunk and complete the response."""
        self._check_open()
        data = _to_bytes(body)
        if not self._started:
            self._headers.setdefault("content-length", ("Content-Length", str(len(data))))
        await self._start()
        self._finished = True
        await self._send({"type": "http.response.body", "body": data, "more_body": False})

    async def send_file(
        self,
        path: str | PathLike[str],
        *,
        chunk_size: int = FILE_CHUNK_SIZE,
    ) -> None:
        """Stream a file's raw bytes as the body and complete the response.

        The file is opened before anything is sent, so a missing or
        unreadable file raises ``OSError`` while an error handler can
        still answer.
        """
        self._check_open()
        async with await anyio.open_file(path, "rb") as f:
            if not self._started:
                size = (await anyio.Path(path).stat()).st_size
                self._headers.setdefault("content-length", ("Content-Length", str(size)))
            await self._start()
            while chunk := await f.read(chunk_size):
                await self._send({"type": "http.response.body", "body": chunk, "more_body": True})
        self._finished = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})

    # -- Internal --

    def _check_open(self) -> None:
        if self._finished:
            msg = "Response already finished."
            raise ResponseAlreadySent(msg)

    async def _start(self) -> None:
        if self._started:
            return
        self._headers.setdefault("content-type", ("Content-Type", DEFAULT_CONTENT_TYPE))
        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._headers.values()
        ]
        self._started = True
        await self._send(
            {"type": "http.response.start", "status": self.status, "headers": raw_headers}
        )
