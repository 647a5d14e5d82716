"""Route table keyed by lowercased path.

Copy-on-write: writers build a new dict under a lock and swap the
reference, so lookups never lock and never see a half-applied update.
Routes can therefore be added while requests are being dispatched.
"""

import logging
import threading
from collections.abc import Iterable, Iterator

from roost.routing.route import Route

logger = logging.getLogger("roost.routing")


def normalize_path(path: str) -> str:
    """The table key for *path*: matching is case-insensitive."""
    return path.lower()


class RouteTable:
    """Maps normalized paths to routes. Later inserts replace earlier ones."""

    __slots__ = ("_lock", "_routes")

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}
        self._lock = threading.Lock()

    def add(self, route: Route) -> None:
        self.add_all((route,))

    def add_all(self, routes: Iterable[Route]) -> None:
        """Insert *routes* in order as one atomic swap."""
        with self._lock:
            updated = dict(self._routes)
            for route in routes:
                key = normalize_path(route.path)
                if key in updated:
                    logger.debug("Replacing route %r", key)
                updated[key] = route
            self._routes = updated

    def get(self, path: str) -> Route | None:
        """Look up the route for *path*, normalizing it first."""
        return self._routes.get(normalize_path(path))

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(list(self._routes.values()))

    def __len__(self) -> int:
        return len(self._routes)
