"""Streaming a byte range of a remote file that is fetched in fixed-size chunks."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024

FetchChunk = Callable[[int, int], Awaitable[bytes]]


async def iter_file_range(
    fetch_chunk: FetchChunk,
    start: int,
    end: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AsyncIterator[bytes]:
    """Yield the bytes ``start`` to ``end`` (inclusive) of a file.

    ``fetch_chunk(offset, limit)`` is awaited for each chunk-aligned part.
    The iteration stops early when it returns no data.
    """
    if chunk_size <= 0:
        raise ValueError("chunk size must be positive")
    if start < 0 or end < start:
        raise ValueError(f"invalid byte range {start}-{end}")

    offset = start - start % chunk_size
    first_cut = start - offset
    last_cut = end % chunk_size + 1
    part_count = (end - offset + chunk_size) // chunk_size

    for part in range(1, part_count + 1):
        data = await fetch_chunk(offset, chunk_size)
        if not data:
            return
        if part_count == 1:
            data = data[first_cut:last_cut]
        elif part == 1:
            data = data[first_cut:]
        elif part == part_count:
            data = data[:last_cut]
        offset += chunk_size
        log.debug("Part %d/%d", part, part_count)
        yield data


class TelegramReader:
    """File-like async reader over a byte range served by ``fetch_chunk``."""

    def __init__(
        self,
        fetch_chunk: FetchChunk,
        start: int,
        end: int,
        content_length: int,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._fetch_chunk = fetch_chunk
        self._start = start
        self._end = end
        self._content_length = content_length
        self._chunk_size = chunk_size
        self._parts = self._new_parts()
        self._buffer = b""
        self._pos = 0
        self._bytes_read = 0
        log.debug("Start")

    def _new_parts(self) -> AsyncIterator[bytes]:
        return iter_file_range(self._fetch_chunk, self._start, self._end, self._chunk_size)

    async def _next_part(self) -> bytes:
        try:
            return await anext(self._parts)
        except StopAsyncIteration:
            return b""

    async def read(self, size: int) -> bytes:
        """Return up to ``size`` bytes; an empty result means the end of the range."""
        if size < 0:
            raise ValueError("size must not be negative")
        if size == 0 or self._bytes_read >= self._content_length:
            return b""

        if self._pos >= len(self._buffer):
            self._buffer = await self._next_part()
            log.debug("Next buffer of %d bytes", len(self._buffer))
            if not self._buffer:
                await self._parts.aclose()
                self._parts = self._new_parts()
                self._buffer = await self._next_part()
            self._pos = 0
            if not self._buffer:
                return b""

        remaining = self._content_length - self._bytes_read
        count = min(size, remaining, len(self._buffer) - self._pos)
        data = self._buffer[self._pos:self._pos + count]
        self._pos += count
        self._bytes_read += count
        return data

    async def close(self) -> None:
        """Release the underlying chunk iterator."""
        await self._parts.aclose()