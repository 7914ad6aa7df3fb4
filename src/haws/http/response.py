"""Response framing.

Every response haws writes has the same shape: a ``200 OK`` status
line, a ``Content-Length`` header and the body. Fallback responses
use the same template.
"""

from dataclasses import dataclass

STATUS_LINE = "HTTP/1.1 200 OK"


@dataclass(frozen=True, slots=True)
class Response:
    """A handler's body, ready to be framed for the wire."""

    body: str = ""

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8")

    @property
    def content_length(self) -> int:
        return len(self.body_bytes)

    def encode(self) -> bytes:
        """Frame as ``HTTP/1.1 200 OK\\r\\nContent-Length: N\\r\\n\\r\\n<body>``."""
        body = self.body_bytes
        head = f"{STATUS_LINE}\r\nContent-Length: {len(body)}\r\n\r\n"
        return head.encode("ascii") + body


def frame_response(body: str) -> bytes:
    """Shortcut for ``Response(body).encode()``."""
    return Response(body).encode()
