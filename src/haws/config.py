"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, max_header_bytes=8192)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    backlog: int = 128

    # Limits
    max_header_bytes: int = 64 * 1024  # 64 KB
    max_body_bytes: int = 1024 * 1024  # 1 MB
    receive_size: int = 4096  # bytes requested per socket read

    # Logging
    log_level: str = "info"
