"""Tests for roost.routing.table — normalized copy-on-write route table."""

import threading

from roost.routing.route import Route
from roost.routing.table import RouteTable, normalize_path


class TestNormalizePath:
    def test_lowercases(self) -> None:
        assert normalize_path("/Foo/BAR") == "/foo/bar"

    def test_root(self) -> None:
        assert normalize_path("/") == "/"


class TestRouteTable:
    def test_lookup_is_case_insensitive(self) -> None:
        table = RouteTable()
        route = Route("/Foo")
        table.add(route)

        assert table.get("/foo") is route
        assert table.get("/FOO") is route
        assert table.get("/Foo") is route

    def test_miss_returns_none(self) -> None:
        table = RouteTable()
        table.add(Route("/foo"))
        assert table.get("/bar") is None
        assert table.get("/foo/") is None

    def test_same_normalized_path_replaces(self) -> None:
        table = RouteTable()
        first = Route("/Users")
        second = Route("/users")
        table.add(first)
        table.add(second)

        assert len(table) == 1
        assert table.get("/USERS") is second

    def test_add_all_later_wins(self) -> None:
        table = RouteTable()
        a, b, c = Route("/a"), Route("/b"), Route("/A")
        table.add_all([a, b, c])

        assert len(table) == 2
        assert table.get("/a") is c
        assert table.get("/b") is b

    def test_contains(self) -> None:
        table = RouteTable()
        table.add(Route("/Foo"))
        assert "/foo" in table
        assert "/bar" not in table
        assert 42 not in table

    def test_iteration_is_a_snapshot(self) -> None:
        table = RouteTable()
        table.add(Route("/a"))
        routes = iter(table)
        table.add(Route("/b"))
        assert [r.path for r in routes] == ["/a"]

    def test_concurrent_adds(self) -> None:
        table = RouteTable()

        def add_many(prefix: str) -> None:
            for i in range(200):
                table.add(Route(f"/{prefix}/{i}"))

        threads = [threading.Thread(target=add_many, args=(p,)) for p in "abcd"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(table) == 800
