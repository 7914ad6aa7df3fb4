"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from haws._internal.types import Handler

# Reserved route keys
ROOT = "/"
FALLBACK = "."


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup, compiled into the router at freeze time.
    """

    path: str
    handler: Handler

    @property
    def is_fallback(self) -> bool:
        return self.path == FALLBACK

    @property
    def pattern(self) -> bytes:
        """The request-line prefix this route answers to.

        ``"/users"`` -> ``b"GET /users HTTP/1.1\\r\\n"``
        """
        return f"GET {self.path} HTTP/1.1\r\n".encode("utf-8", "surrogateescape")


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of matching a request against the router."""

    route: Route
    fallback: bool = False
