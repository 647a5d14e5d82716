"""Tests for roost.app — App setup, configuration and ASGI entry."""

import pytest

from roost.app import App
from roost.config import AppConfig
from roost.http.request import Request
from roost.http.response import Response
from roost.routing.route import Route
from roost.server.transport import ListenerState


def _hello(request, response):
    return 200, "hello"


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.https is False
        assert config.ssl_keyfile is None
        assert config.ssl_certfile is None
        assert config.favicon is None

    def test_frozen(self) -> None:
        config = AppConfig()
        with pytest.raises(AttributeError):
            config.port = 1  # type: ignore[misc]


class TestAppSetup:
    def test_default_config(self) -> None:
        assert App().config == AppConfig()

    def test_keyword_overrides(self) -> None:
        app = App(AppConfig(host="127.0.0.1"), port=9000)
        assert app.config.host == "127.0.0.1"
        assert app.config.port == 9000

    def test_unknown_override_rejected(self) -> None:
        with pytest.raises(TypeError):
            App(colour="blue")

    def test_chaining(self) -> None:
        def on_error(request, response, error):
            return 500, "x"

        app = App()
        result = app.add_route(Route("/a")).add_routes([Route("/b")]).set_error_handler(on_error)
        assert result is app
        assert app.error_handler is on_error
        assert len(app.routes) == 2

    def test_add_routes_accepts_generators(self) -> None:
        app = App().add_routes(Route(f"/r{i}") for i in range(3))
        assert len(app.routes) == 3

    def test_routes_keyed_lowercase(self) -> None:
        route = Route("/MiXeD")
        app = App().add_route(route)
        assert app.routes.get("/mixed") is route

    def test_starts_unbound(self) -> None:
        app = App()
        assert app.state is ListenerState.UNBOUND
        assert app.listening is False
        assert app.port is None


class TestDispatchMethod:
    async def test_dispatch_with_request_and_response(self) -> None:
        sent: list[dict] = []

        async def send(message):
            sent.append(message)

        async def receive():
            return {"type": "http.request", "body": b"", "more_body": False}

        scope = {"type": "http", "method": "GET", "path": "/A", "headers": []}
        app = App().add_route(Route("/a").get(_hello))
        await app.dispatch(Request.from_asgi(scope, receive), Response(send))

        assert sent[0]["status"] == 200
        assert sent[1]["body"] == b"hello"


class TestASGI:
    async def test_lifespan(self) -> None:
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict] = []

        async def receive():
            return incoming.pop(0)

        async def send(message):
            sent.append(message)

        await App()({"type": "lifespan"}, receive, send)
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    async def test_websocket_scope_ignored(self) -> None:
        sent: list[dict] = []

        async def send(message):
            sent.append(message)

        async def receive():
            return {"type": "websocket.connect"}

        await App()({"type": "websocket", "path": "/"}, receive, send)
        assert sent == []


class TestLazyImports:
    def test_top_level_names(self) -> None:
        import roost

        assert roost.App is App
        assert roost.Route is Route
        assert roost.NotFound.__name__ == "NotFound"

    def test_unknown_name(self) -> None:
        import roost

        with pytest.raises(AttributeError):
            roost.nothing_here  # noqa: B018
