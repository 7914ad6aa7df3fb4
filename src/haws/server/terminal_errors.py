"""Terminal error formatting for haws.

Two kinds of output end up on the operator's terminal:

Startup configuration errors:
    ``format_configuration_error()`` renders the guidance carried by a
    ``ConfigurationError``. A missing fallback route looks like::

        -- Configuration Error ------------------------------------------
        Error: web server has no error page
        Help:  consider adding an error page

            app.route(".", err_page)

        Note:  replace err_page with the name of your own function ...
        Note:  the handler receives the raw request bytes (...)
        -----------------------------------------------------------------

    Colour is used only when the stream is a TTY.

Handler errors at runtime:
    Logged with configurable traceback verbosity controlled by the
    ``HAWS_TRACEBACK`` environment variable (compact/full/minimal).
"""

from __future__ import annotations

import logging
import os
import sys
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from haws.errors import ConfigurationError

logger = logging.getLogger("haws.server")

# Width of the terminal error banner
_BANNER_WIDTH = 65


def _use_color(stream: object | None = None) -> bool:
    """True if the output stream supports ANSI color."""
    s = stream or sys.stderr
    try:
        return s.isatty()  # type: ignore[union-attr]
    except Exception:
        return False


class _Palette:
    """ANSI escape sequences, or empty strings when color is disabled."""

    __slots__ = ("bold", "dim", "green", "red", "reset", "yellow")

    def __init__(self, *, enabled: bool) -> None:
        if enabled:
            self.reset = "\033[0m"
            self.bold = "\033[1m"
            self.dim = "\033[2m"
            self.red = "\033[31m"
            self.green = "\033[32m"
            self.yellow = "\033[33m"
        else:
            self.reset = ""
            self.bold = ""
            self.dim = ""
            self.red = ""
            self.green = ""
            self.yellow = ""


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages)."""
    if "site-packages" in filename:
        return False
    if filename.startswith("<"):
        return False
    stdlib_prefix = os.path.dirname(os.__file__)
    return not filename.startswith(stdlib_prefix)


def format_configuration_error(
    exc: ConfigurationError,
    *,
    color: bool | None = None,
) -> str:
    """Format a startup configuration error with corrective guidance.

    Reads the optional ``hint``, ``example`` and ``notes`` attributes
    that ``MissingFallbackRoute`` carries; any other
    ``ConfigurationError`` renders as a one-line error inside the banner.

    Args:
        exc: The configuration error.
        color: Force color on/off. ``None`` auto-detects from stderr.

    Returns:
        Multi-line string ready for ``sys.stderr.write()``.
    """
    c = _Palette(enabled=color if color is not None else _use_color())
    parts: list[str] = []

    parts.append(f"-- Configuration Error {'-' * (_BANNER_WIDTH - 23)}")
    parts.append(f"{c.red}{c.bold}Error:{c.reset} {exc}")

    hint = getattr(exc, "hint", None)
    if hint:
        parts.append(f"{c.yellow}Help:{c.reset}  {hint}")

    example = getattr(exc, "example", None)
    if example:
        parts.append("")
        parts.append(f"    {c.green}{example}{c.reset}")
        parts.append("")

    for note in getattr(exc, "notes", ()):
        parts.append(f"{c.dim}Note:{c.reset}  {note}")

    parts.append("-" * _BANNER_WIDTH)
    return "\n".join(parts)


def format_compact_traceback(exc: BaseException) -> str:
    """Format an error with a compact traceback.

    Shows only application frames + error summary, suppressing
    frames from the standard library, anyio and haws internals
    installed under site-packages.
    """
    parts: list[str] = []

    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []

    app_frames = [f for f in frames if _is_app_frame(f.filename)]

    # If no app frames, show last 3 frames instead
    display_frames = app_frames if app_frames else frames[-3:]

    parts.append(f"{type(exc).__name__}: {exc}")

    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:  # Show at most 5 app frames
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")

    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary for minimal verbosity."""
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def log_error(exc: BaseException, request_line: str | None = None) -> None:
    """Log a handler failure with appropriate formatting.

    Uses the traceback verbosity level from ``HAWS_TRACEBACK``
    (compact, full, minimal). Defaults to compact.

    Args:
        exc: The exception raised by the handler.
        request_line: First line of the request being served, if known.
    """
    prefix = f"Handler error on {request_line!r}" if request_line else "Handler error"

    traceback_style = os.environ.get("HAWS_TRACEBACK", "compact").lower()

    if traceback_style == "full":
        logger.error(prefix, exc_info=exc)
    elif traceback_style == "minimal":
        logger.error("%s: %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
