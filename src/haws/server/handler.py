"""Connection handler — one request in, one response out.

The per-connection pipeline is linear:
Read -> Match -> InvokeHandler -> WriteResponse, then close.

Any failure is contained to the connection it happened on: it is
logged and the connection is closed without a response, so the
accept loop can move on to the next client.
"""

import logging

import anyio
from anyio.abc import ByteStream

from haws._internal.invoke import invoke
from haws.config import AppConfig
from haws.errors import RequestError
from haws.http.request import read_request, request_line
from haws.http.response import Response
from haws.routing.router import Router
from haws.server.terminal_errors import log_error

logger = logging.getLogger("haws.server")

# Transport failures that end a single connection
TRANSPORT_ERRORS = (OSError, anyio.BrokenResourceError, anyio.ClosedResourceError)


async def handle_connection(stream: ByteStream, *, router: Router, config: AppConfig) -> None:
    """Serve exactly one request on ``stream`` and close it."""
    async with stream:
        try:
            buffer = await read_request(
                stream,
                max_header_bytes=config.max_header_bytes,
                max_body_bytes=config.max_body_bytes,
                receive_size=config.receive_size,
            )
        except RequestError as exc:
            logger.warning("Dropped request: %s", exc)
            return
        except TRANSPORT_ERRORS as exc:
            logger.warning("Read failed: %s", exc)
            return

        if not buffer:
            logger.debug("Connection closed before sending a request")
            return

        line = request_line(buffer)
        match = router.match(buffer)

        try:
            response = Response(await invoke(match.route.handler, buffer))
            payload = response.encode()
        except Exception as exc:
            log_error(exc, line)
            return

        try:
            await stream.send(payload)
        except TRANSPORT_ERRORS as exc:
            logger.warning("Write failed for %r: %s", line, exc)
            return

        logger.info(
            '"%s" 200 %d%s',
            line,
            response.content_length,
            " (fallback)" if match.fallback else "",
        )
