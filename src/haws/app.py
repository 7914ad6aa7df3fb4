"""Haws application class — the connection dispatcher.

Mutable during setup (route registration).
Frozen when serving starts: the route table is validated and compiled,
then one listening socket is bound and connections are handled one at
a time, in accept order.
"""

import logging
import socket
import sys
import threading
from dataclasses import dataclass, replace
from typing import Any

import anyio
from anyio.abc import SocketAttribute, SocketListener, SocketStream, TaskStatus
from anyio.streams.stapled import MultiListener

from haws._internal.types import Handler
from haws.config import AppConfig
from haws.errors import BindError, ConfigurationError
from haws.routing.route import Route
from haws.routing.router import Router
from haws.server.handler import handle_connection
from haws.server.terminal_errors import format_configuration_error

logger = logging.getLogger("haws.app")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: Handler


async def _bind(host: str, port: int, backlog: int) -> MultiListener[SocketStream]:
    """Bind exactly one TCP listener for ``host:port``.

    ``host`` is resolved first and only the first address is used, so
    a name like ``localhost`` never yields more than one socket.
    """
    try:
        infos = await anyio.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        address = str(infos[0][4][0])
        return await anyio.create_tcp_listener(
            local_host=address, local_port=port, backlog=backlog
        )
    except OSError as exc:
        raise BindError(host, port, exc.strerror or str(exc)) from exc


class App:
    """The haws application.

    Usage::

        app = App("localhost", 3000)

        def index(request: bytes) -> str:
            return "<h1>Hello world</h1>"

        def err_page(request: bytes) -> str:
            return "<h1>404 page not found</h1>"

        app.route("/", index)
        app.route(".", err_page)
        app.serve()

    ``route()`` also works as a decorator::

        @app.route("/about")
        def about(request: bytes) -> str: ...

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the route table.
        Serving itself runs on a single thread.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        # Compiled state (populated by _freeze)
        "_router",
        "config",
    )

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        config: AppConfig | None = None,
    ) -> None:
        config = config or AppConfig()
        if host is not None:
            config = replace(config, host=host)
        if port is not None:
            config = replace(config, port=port)
        self.config: AppConfig = config
        self._pending_routes: list[_PendingRoute] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None

    # -- Route registration --

    def route(self, path: str, handler: Handler | None = None) -> Any:
        """Register a route handler.

        Called with a handler, registers it and returns it unchanged.
        Called with only a path, returns a decorator.

        Args:
            path: Matched literally against the request line
                ``GET <path> HTTP/1.1``. Two keys are reserved: ``"/"``
                is the site root and ``"."`` is the fallback page served
                when nothing else matches. The fallback is required.
            handler: Callable receiving the raw request bytes and
                returning the response body as ``str``.

        Registering the same path twice replaces the earlier handler.
        """
        if handler is not None:
            self._add_route(path, handler)
            return handler

        def decorator(func: Handler) -> Handler:
            self._add_route(path, func)
            return func

        return decorator

    def _add_route(self, path: str, handler: Handler) -> None:
        self._check_not_frozen()
        self._pending_routes.append(_PendingRoute(path, handler))

    @property
    def routes(self) -> list[Route]:
        """Registered routes in match order, fallback included.

        Available before the app is frozen and without validation.
        """
        if self._router is not None:
            return self._router.routes
        return self._build_router().routes

    # -- Serving --

    def serve(self, host: str | None = None, port: int | None = None) -> None:
        """Validate the app, bind, and serve forever.

        A missing fallback route or a failed bind is reported on stderr
        and ends the process with exit status 1. Nothing is bound when
        validation fails.

        Args:
            host: Override bind host.
            port: Override bind port.
        """
        self._freeze_or_exit()
        try:
            anyio.run(self.serve_async, host, port)
        except BindError as exc:
            logger.error("%s", exc)
            print(f"Error: {exc}", file=sys.stderr)
            raise SystemExit(1) from exc

    async def serve_async(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        task_status: TaskStatus[tuple[str, int]] = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        """Async counterpart of ``serve()``; never returns normally.

        Reports the bound ``(host, port)`` through ``task_status`` once the
        listener is up, so it can be started with ``TaskGroup.start()``::

            async with anyio.create_task_group() as tg:
                host, port = await tg.start(app.serve_async, "127.0.0.1", 0)

        Raises:
            MissingFallbackRoute: No ``"."`` route is registered.
            BindError: The listener could not be bound.
        """
        self._ensure_frozen()
        router = self._router
        assert router is not None

        _host = host or self.config.host
        _port = port if port is not None else self.config.port

        multi = await _bind(_host, _port, self.config.backlog)
        async with multi:
            listener: SocketListener = multi.listeners[0]  # type: ignore[attr-defined]
            bound = (_host, listener.extra(SocketAttribute.local_port))
            logger.info("Serving on http://%s:%d", *bound)
            task_status.started(bound)

            while True:
                stream = await listener.accept()
                await handle_connection(stream, router=router, config=self.config)

    def check(self) -> None:
        """Validate the route table without serving.

        Prints the guidance and exits with status 1 when the app is
        misconfigured.
        """
        self._freeze_or_exit()

    # -- Internal --

    def _freeze_or_exit(self) -> None:
        try:
            self._ensure_frozen()
        except ConfigurationError as exc:
            print(format_configuration_error(exc), file=sys.stderr)
            raise SystemExit(1) from exc

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock. Raises
        ``MissingFallbackRoute`` and leaves the app mutable when no
        fallback route is registered.
        """
        router = self._build_router()
        router.compile()
        self._router = router
        self._frozen = True
        logger.debug("Compiled %d routes", len(router.routes))

    def _build_router(self) -> Router:
        router = Router()
        for pending in self._pending_routes:
            router.add(Route(path=pending.path, handler=pending.handler))
        return router

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes before calling app.serve()."
            )
            raise RuntimeError(msg)

