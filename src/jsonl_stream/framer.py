from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator

from .buffer import LineBuffer
from .errors import JSONLinesError, SourceError
from .sources import AsyncByteSource, ByteSource

logger = logging.getLogger(__name__)


class LineFramer:
    """Turn a byte-pull source into a line-pull source.

    Lines are returned without their trailing line-feed. A carriage return
    before the line-feed is kept. Once the source is exhausted any
    unterminated remainder is returned as the last line.
    """

    def __init__(self, source: ByteSource, *, max_line_length: int | None = None):
        self._source = source
        self._buffer = LineBuffer(max_line_length=max_line_length)
        self._eof = False
        self.bytes_read = 0

    @property
    def line_no(self) -> int:
        return self._buffer.line_no

    @property
    def exhausted(self) -> bool:
        return self._eof and not self._buffer.pending

    def next_line(self) -> bytes | None:
        while True:
            line = self._buffer.pop_line()
            if line is not None:
                return line
            if self._eof:
                return None

            try:
                chunk = self._source.pull()
            except JSONLinesError:
                raise
            except Exception as e:
                raise SourceError(f"Byte source failed: {e}") from e
            # An empty chunk counts as exhaustion, like read() returning b"".
            if not chunk:
                self._eof = True
                logger.debug("Source exhausted after %d bytes", self.bytes_read)
                return self._buffer.drain()

            self.bytes_read += len(chunk)
            self._buffer.append(chunk)

    def close(self) -> None:
        self._eof = True
        self._buffer.clear()
        close = getattr(self._source, "close", None)
        if close is not None:
            close()

    def __iter__(self) -> Iterator[bytes]:
        return self

    def __next__(self) -> bytes:
        line = self.next_line()
        if line is None:
            raise StopIteration
        return line


class AsyncLineFramer:
    """Async counterpart of LineFramer; suspends only while pulling bytes."""

    def __init__(self, source: AsyncByteSource, *, max_line_length: int | None = None):
        self._source = source
        self._buffer = LineBuffer(max_line_length=max_line_length)
        self._eof = False
        self.bytes_read = 0

    @property
    def line_no(self) -> int:
        return self._buffer.line_no

    @property
    def exhausted(self) -> bool:
        return self._eof and not self._buffer.pending

    async def next_line(self) -> bytes | None:
        while True:
            line = self._buffer.pop_line()
            if line is not None:
                return line
            if self._eof:
                return None

            try:
                chunk = await self._source.pull()
            except JSONLinesError:
                raise
            except Exception as e:
                raise SourceError(f"Byte source failed: {e}") from e
            if not chunk:
                self._eof = True
                logger.debug("Source exhausted after %d bytes", self.bytes_read)
                return self._buffer.drain()

            self.bytes_read += len(chunk)
            self._buffer.append(chunk)

    async def aclose(self) -> None:
        self._eof = True
        self._buffer.clear()
        aclose = getattr(self._source, "aclose", None)
        if aclose is not None:
            await aclose()

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self

    async def __anext__(self) -> bytes:
        line = await self.next_line()
        if line is None:
            raise StopAsyncIteration
        return line
