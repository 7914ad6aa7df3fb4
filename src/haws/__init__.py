"""Haws — a tiny HTTP server that maps request lines to handler functions.

Every route is a path matched against the start of the raw request
(``GET <path> HTTP/1.1``). The reserved ``"."`` route serves everything
that matches nothing else and must be registered before serving.

Basic usage::

    from haws import App

    app = App("localhost", 3000)

    def index(request: bytes) -> str:
        return "<h1>Hello world</h1>"

    def err_page(request: bytes) -> str:
        return "<h1>404 page not found</h1>"

    app.route("/", index)
    app.route(".", err_page)
    app.serve()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "BindError",
    "ConfigurationError",
    "HawsError",
    "MissingFallbackRoute",
    "RequestBuffer",
    "Response",
    "Route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import haws`` fast while providing a clean top-level API.
    """
    if name == "App":
        from haws.app import App

        return App

    if name == "AppConfig":
        from haws.config import AppConfig

        return AppConfig

    if name == "Response":
        from haws.http.response import Response

        return Response

    if name == "Route":
        from haws.routing.route import Route

        return Route

    if name == "RequestBuffer":
        from haws._internal.types import RequestBuffer

        return RequestBuffer

    if name in ("BindError", "ConfigurationError", "HawsError", "MissingFallbackRoute"):
        from haws import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
