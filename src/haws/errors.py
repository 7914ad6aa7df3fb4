"""Haws exception hierarchy.

Shared across Router, App, the connection handler and the CLI so every
module raises and catches the same types.
"""


class HawsError(Exception):
    """Base for all haws-specific errors."""


class ConfigurationError(HawsError):
    """Raised when app configuration is invalid.

    Typically raised during ``App._freeze()``, before any socket is bound.
    """


class MissingFallbackRoute(ConfigurationError):  # noqa: N818
    """No route was registered under the reserved ``"."`` key.

    Carries the operator guidance shown by ``App.serve()`` and
    ``haws check``: a hint, the registration call to add, and the
    handler signature it expects.
    """

    example = 'app.route(".", err_page)'
    signature = "def err_page(request: bytes) -> str"
    hint = "consider adding an error page"
    notes = (
        "replace err_page with the name of your own function that returns "
        "html for the error page",
        f"the handler receives the raw request bytes ({signature})",
    )

    def __init__(self, detail: str = "web server has no error page") -> None:
        super().__init__(detail)
        self.detail = detail


class BindError(HawsError):
    """The listening socket could not be bound (e.g. port already in use)."""

    def __init__(self, host: str, port: int, reason: str) -> None:
        super().__init__(f"Cannot bind {host}:{port}: {reason}")
        self.host = host
        self.port = port
        self.reason = reason


class RequestError(HawsError):
    """A client request could not be read. Fatal for that connection only."""


class RequestTooLarge(RequestError):  # noqa: N818
    """The header block or declared body exceeds the configured limit."""

    def __init__(self, part: str, limit: int) -> None:
        super().__init__(f"request {part} exceeds {limit} bytes")
        self.part = part
        self.limit = limit


class MalformedRequest(RequestError):  # noqa: N818
    """The request head carries a value haws cannot interpret."""


class AppNotFound(HawsError):  # noqa: N818
    """A ``module:attribute`` target did not lead to a haws ``App``."""

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(f"cannot load {target!r}: {reason}")
        self.target = target
        self.reason = reason
