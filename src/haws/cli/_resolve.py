"""Locate the App a CLI command operates on.

Targets are written ``module:attribute``. ``module`` alone means
``module:app``, and an attribute that is a zero-argument callable
(other than an App) is treated as a factory and called once.
"""

import importlib
import sys

from haws.app import App
from haws.errors import AppNotFound

DEFAULT_ATTRIBUTE = "app"


def load_app(target: str) -> App:
    """Import ``target`` and return the App it names.

    Raises:
        AppNotFound: The module or attribute is missing, the factory
            failed, or the result is not an App.
    """
    module_name, _, attribute = target.partition(":")
    if not module_name:
        raise AppNotFound(target, "no module given")
    attribute = attribute or DEFAULT_ATTRIBUTE

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise AppNotFound(target, f"import failed ({exc})") from exc

    try:
        found = getattr(module, attribute)
    except AttributeError:
        reason = f"module {module_name!r} has no attribute {attribute!r}"
        raise AppNotFound(target, reason) from None

    if isinstance(found, App):
        return found

    if callable(found):
        try:
            found = found()
        except Exception as exc:
            reason = f"factory {attribute}() failed with {type(exc).__name__}: {exc}"
            raise AppNotFound(target, reason) from exc
        if isinstance(found, App):
            return found

    raise AppNotFound(target, f"expected a haws.App, got {type(found).__name__}")


def resolve_or_exit(target: str) -> App:
    """``load_app()`` for CLI commands: report on stderr and exit 1 on failure."""
    try:
        return load_app(target)
    except AppNotFound as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
