"""Incremental byte-to-text decoding for event streams."""

from __future__ import annotations

import codecs
from typing import AsyncIterable, AsyncIterator


async def decode_chunks(
    source: AsyncIterable[bytes | str],
    *,
    encoding: str = "utf-8",
    errors: str = "replace",
) -> AsyncIterator[str]:
    """Decode byte chunks into text chunks.

    Multi-byte characters split across chunk boundaries are held back until
    complete. ``str`` chunks are passed through unchanged, after any bytes
    still held by the decoder.
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors)

    async for chunk in source:
        if isinstance(chunk, str):
            pending = decoder.decode(b"", final=True)
            decoder.reset()
            if pending:
                yield pending
            text = chunk
        else:
            text = decoder.decode(bytes(chunk))
        if text:
            yield text

    final_text = decoder.decode(b"", final=True)
    if final_text:
        yield final_text
