"""Split a stream of text chunks into SSE event blocks."""

from __future__ import annotations

from sse_stream.config import DEFAULT_EVENT_SEPARATOR


def _is_blank(text: str) -> bool:
    return text.strip() == ""


class EventBlockSplitter:
    """Buffer text chunks and emit complete event blocks.

    Splitting always runs against the whole pending buffer, never against a
    single chunk, so the emitted blocks do not depend on how the input was
    fragmented. Blank blocks are dropped.
    """

    def __init__(self, separator: str = DEFAULT_EVENT_SEPARATOR):
        self._separator = separator
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by a separator."""
        return self._buffer

    def feed(self, chunk: str) -> list[str]:
        self._buffer += chunk
        *complete, self._buffer = self._buffer.split(self._separator)
        return [block for block in complete if not _is_blank(block)]

    def flush(self) -> list[str]:
        """Emit whatever is left in the buffer as a final block."""
        remainder, self._buffer = self._buffer, ""
        if _is_blank(remainder):
            return []
        return [remainder]
