"""Open an event stream over HTTP with httpx."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from sse_stream.config import ParserConfig
from sse_stream.errors import ResponseError
from sse_stream.pipeline import Stage, parse_stream
from sse_stream.stream import SSEStream

EVENT_STREAM_HEADERS = {
    "accept": "text/event-stream",
    "cache-control": "no-cache",
}


@asynccontextmanager
async def connect(
    client: httpx.AsyncClient,
    url: str,
    *,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    stage: Stage[Any] | None = None,
    config: ParserConfig | None = None,
    **request_kwargs: Any,
) -> AsyncIterator[SSEStream[Any]]:
    """Send a request and yield the parsed response body as an ``SSEStream``.

    The response is closed when the block exits, whether or not the stream
    was fully consumed.

    Example:
        >>> async with connect(client, "/events") as events:
        ...     async for fields in events:
        ...         print(fields["data"])
    """
    request_headers = {**EVENT_STREAM_HEADERS, **(headers or {})}

    async with client.stream(method, url, headers=request_headers, **request_kwargs) as response:
        if response.status_code >= 400:
            await response.aread()
            raise ResponseError(
                f"Event stream request failed with status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        events = parse_stream(response.aiter_bytes(), stage, config=config)
        try:
            yield events
        finally:
            await events.aclose()
