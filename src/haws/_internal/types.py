"""Shared type aliases used across haws modules."""

from collections.abc import Callable
from typing import TypeAlias

# Raw request bytes as read from the connection, passed verbatim to handlers
RequestBuffer: TypeAlias = bytes

# Route handler: maps the raw request to a response body
Handler: TypeAlias = Callable[[RequestBuffer], str]
