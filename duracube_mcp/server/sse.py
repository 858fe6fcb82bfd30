"""Server-Sent Events stream for MCP clients.

The stream announces the endpoint a client should POST its JSON-RPC messages
to, then holds the connection open with keep-alive comments. Responses are
returned on the POST itself, never pushed over the stream.
"""

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable

from loguru import logger

KEEPALIVE_FRAME = ": keepalive\n\n"


def new_session_id() -> str:
    """Session id in the form ``session_<epoch milliseconds>``."""
    return f"session_{int(time.time() * 1000)}"


def endpoint_frame(session_id: str) -> str:
    return f"event: endpoint\ndata: /messages?sessionId={session_id}\n\n"


async def sse_event_stream(
    session_id: str,
    keepalive_seconds: float,
    is_disconnected: Callable[[], Awaitable[bool]],
) -> AsyncIterator[str]:
    """Generate the SSE frames for one client connection.

    Args:
        session_id: Session id announced in the endpoint event
        keepalive_seconds: Interval between keep-alive comments
        is_disconnected: Coroutine function reporting whether the client has gone

    Yields:
        The endpoint event, then a keep-alive comment per interval until the
        client disconnects
    """
    logger.info(f"SSE stream opened: {session_id}")
    try:
        yield endpoint_frame(session_id)

        while not await is_disconnected():
            await asyncio.sleep(keepalive_seconds)
            yield KEEPALIVE_FRAME
    except asyncio.CancelledError:
        logger.debug(f"SSE stream cancelled: {session_id}")
        raise
    finally:
        logger.info(f"SSE stream closed: {session_id}")
