"""Incremental request reader.

Reads one request from a socket stream: the head up to the blank line
that ends it, then exactly ``Content-Length`` body bytes when the head
declares one. The result is the raw request as bytes, which is what
route matching and handlers work with.
"""

import anyio
from anyio.abc import ByteReceiveStream

from haws.errors import MalformedRequest, RequestTooLarge

HEAD_TERMINATOR = b"\r\n\r\n"
_CONTENT_LENGTH = b"content-length"


async def _read_until(
    stream: ByteReceiveStream,
    marker: bytes,
    max_bytes: int,
    receive_size: int,
) -> tuple[bytes, bytes]:
    """Receive until ``marker``; return (head including marker, leftover).

    On EOF before the marker, returns everything received as the head.
    """
    buf = bytearray()
    while True:
        idx = buf.find(marker)
        if idx != -1:
            end = idx + len(marker)
            if end > max_bytes:
                raise RequestTooLarge("head", max_bytes)
            return bytes(buf[:end]), bytes(buf[end:])
        if len(buf) > max_bytes:
            raise RequestTooLarge("head", max_bytes)
        try:
            chunk = await stream.receive(receive_size)
        except anyio.EndOfStream:
            return bytes(buf), b""
        if not chunk:
            return bytes(buf), b""
        buf.extend(chunk)


async def _read_exact(stream: ByteReceiveStream, n: int, receive_size: int) -> bytes:
    buf = bytearray()
    while len(buf) < n:
        try:
            chunk = await stream.receive(min(receive_size, n - len(buf)))
        except anyio.EndOfStream:
            break
        if not chunk:
            break
        buf.extend(chunk)
    return bytes(buf)


def content_length(head: bytes) -> int:
    """Return the declared ``Content-Length`` of a request head, or 0.

    Only this one header is interpreted; everything else in the head is
    passed through untouched.
    """
    for line in head.split(b"\r\n")[1:]:
        name, sep, value = line.partition(b":")
        if not sep or name.strip().lower() != _CONTENT_LENGTH:
            continue
        raw = value.strip()
        if raw.startswith(b"-") and raw[1:].isdigit():
            msg = f"negative Content-Length: {raw.decode()}"
            raise MalformedRequest(msg)
        # int() alone would also take "+5" and "1_0"
        if not raw.isdigit():
            msg = f"invalid Content-Length: {raw!r}"
            raise MalformedRequest(msg)
        return int(raw)
    return 0


def request_line(buffer: bytes) -> str:
    """First line of a raw request, for log output."""
    line, _, _ = buffer.partition(b"\r\n")
    return line.decode("latin-1")


async def read_request(
    stream: ByteReceiveStream,
    *,
    max_header_bytes: int,
    max_body_bytes: int,
    receive_size: int = 4096,
) -> bytes:
    """Read one raw request (head + body) from ``stream``.

    Returns ``b""`` if the peer closed without sending anything.

    Raises:
        RequestTooLarge: The head or the declared body exceeds its limit.
        MalformedRequest: ``Content-Length`` is not a non-negative integer.
    """
    head, leftover = await _read_until(stream, HEAD_TERMINATOR, max_header_bytes, receive_size)
    if not head.endswith(HEAD_TERMINATOR):
        # Peer closed mid-head; hand over what arrived
        return head

    length = content_length(head)
    if length > max_body_bytes:
        raise RequestTooLarge("body", max_body_bytes)

    body = leftover[:length]
    if len(body) < length:
        body += await _read_exact(stream, length - len(body), receive_size)
    return head + body
