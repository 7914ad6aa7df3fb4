"""Shared fixtures for haws tests."""

import anyio
import pytest
from anyio.abc import ByteStream


class FakeStream(ByteStream):
    """In-memory byte stream fed from a list of chunks.

    ``receive()`` hands out the chunks one at a time (split further if
    they exceed ``max_bytes``) and raises ``EndOfStream`` when they run
    out. Everything sent is collected in ``sent``.
    """

    def __init__(self, *chunks: bytes, send_error: Exception | None = None) -> None:
        self.chunks = list(chunks)
        self.sent = bytearray()
        self.closed = False
        self.reads = 0
        self.send_error = send_error

    async def receive(self, max_bytes: int = 65536) -> bytes:
        self.reads += 1
        if not self.chunks:
            raise anyio.EndOfStream
        chunk = self.chunks.pop(0)
        if len(chunk) > max_bytes:
            self.chunks.insert(0, chunk[max_bytes:])
            chunk = chunk[:max_bytes]
        return chunk

    async def send(self, item: bytes) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.extend(item)

    async def send_eof(self) -> None:
        pass

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def make_stream() -> type[FakeStream]:
    """The ``FakeStream`` class, for building streams inside a test."""
    return FakeStream
