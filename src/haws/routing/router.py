"""Ordered router with request-line prefix matching.

Routes are registered during setup and frozen when the app starts
serving. Matching walks routes in registration order; the first route
whose ``GET <path> HTTP/1.1\\r\\n`` pattern prefixes the request wins,
and the ``"."`` route answers everything else.
"""

from haws.errors import MissingFallbackRoute
from haws.routing.route import FALLBACK, Route, RouteMatch


class Router:
    """Route table keyed by path.

    Usage::

        router = Router()
        router.add(Route("/", index))
        router.add(Route(".", not_found))
        router.compile()
        match = router.match(b"GET / HTTP/1.1\\r\\n\\r\\n")
    """

    __slots__ = ("_compiled", "_patterns", "_routes")

    def __init__(self) -> None:
        # dict keeps insertion order; re-adding a path keeps its slot
        self._routes: dict[str, Route] = {}
        self._patterns: tuple[tuple[bytes, Route], ...] = ()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add or replace a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._routes[route.path] = route

    @property
    def routes(self) -> list[Route]:
        """All registered routes in registration order, fallback included."""
        return list(self._routes.values())

    @property
    def fallback(self) -> Route | None:
        return self._routes.get(FALLBACK)

    @property
    def compiled(self) -> bool:
        return self._compiled

    def compile(self) -> None:
        """Validate and freeze the router. No more routes can be added.

        Raises ``MissingFallbackRoute`` if no route is registered under
        ``"."``; the router stays mutable in that case so the caller can
        register one and try again.
        """
        if FALLBACK not in self._routes:
            raise MissingFallbackRoute()
        self._patterns = tuple(
            (route.pattern, route) for route in self._routes.values() if not route.is_fallback
        )
        self._compiled = True

    def match(self, buffer: bytes) -> RouteMatch:
        """Match raw request bytes against compiled routes.

        Returns the first route (in registration order) whose pattern is
        a prefix of ``buffer``, or the fallback route if none is.
        """
        if not self._compiled:
            msg = "Router must be compiled before matching."
            raise RuntimeError(msg)

        for pattern, route in self._patterns:
            if buffer.startswith(pattern):
                return RouteMatch(route=route)

        return RouteMatch(route=self._routes[FALLBACK], fallback=True)
