"""Tests for roost.http.request — frozen Request with async body access."""

import pytest

from roost.http.request import Request


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*bodies: bytes):
    """Create an ASGI receive callable that yields bodies."""
    messages = []
    for i, body in enumerate(bodies):
        is_last = i == len(bodies) - 1
        messages.append({"type": "http.request", "body": body, "more_body": not is_last})
    if not messages:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    it = iter(messages)

    async def receive():
        return next(it)

    return receive


class TestRequestFromASGI:
    def test_basic_fields(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST", path="/Users"), _make_receive())

        assert req.method == "POST"
        assert req.path == "/Users"
        assert req.http_version == "1.1"
        assert req.scheme == "http"
        assert req.server == ("localhost", 8000)
        assert req.client == ("127.0.0.1", 54321)

    def test_missing_method_and_path(self) -> None:
        scope = _make_scope()
        del scope["method"]
        del scope["path"]
        req = Request.from_asgi(scope, _make_receive())
        assert req.method == ""
        assert req.path == ""

    def test_headers_case_insensitive(self) -> None:
        raw = [(b"Content-Type", b"text/csv"), (b"x-tag", b"a"), (b"X-Tag", b"b")]
        scope = _make_scope(headers=raw)
        req = Request.from_asgi(scope, _make_receive())

        assert req.headers["content-type"] == "text/csv"
        assert req.headers["CONTENT-TYPE"] == "text/csv"
        assert "X-TAG" in req.headers
        assert req.headers.get("missing") is None

    def test_repeated_header_keeps_first(self) -> None:
        raw = [(b"x-tag", b"a"), (b"X-Tag", b"b")]
        req = Request.from_asgi(_make_scope(headers=raw), _make_receive())

        assert req.headers["x-tag"] == "a"
        assert list(req.headers) == ["x-tag"]
        assert len(req.headers) == 1

    def test_query(self) -> None:
        req = Request.from_asgi(_make_scope(query_string=b"x=1&x=2&y="), _make_receive())
        assert req.query["x"] == "1"
        assert req.query["y"] == ""
        assert req.query.get("z", "none") == "none"
        assert dict(req.query) == {"x": "1", "y": ""}

    def test_frozen(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive())
        with pytest.raises(AttributeError):
            req.path = "/other"  # type: ignore[misc]


class TestRequestBody:
    async def test_body_joins_chunks(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"hel", b"lo"))
        assert await req.body() == b"hello"

    async def test_body_cached(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"once"))
        assert await req.body() == b"once"
        assert await req.body() == b"once"

    async def test_text_and_json(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b'{"a": 1}'))
        assert await req.text() == '{"a": 1}'
        assert await req.json() == {"a": 1}

    async def test_disconnect_ends_body(self) -> None:
        async def receive():
            return {"type": "http.disconnect"}

        req = Request.from_asgi(_make_scope(), receive)
        assert await req.body() == b""
