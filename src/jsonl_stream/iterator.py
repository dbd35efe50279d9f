from __future__ import annotations

import enum
import logging
from collections.abc import AsyncIterator, Iterator
from typing import Any, Generic, TypeVar

from .decoders import Decoder
from .errors import DecodeError, JSONLinesError
from .framer import AsyncLineFramer, LineFramer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IteratorState(enum.Enum):
    IDLE = "idle"
    AWAITING_BYTES = "awaiting_bytes"
    HAVE_LINE = "have_line"
    DECODING = "decoding"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class _DecodingBase(Generic[T]):
    def __init__(self, decoder: Decoder, target: Any):
        self._decoder = decoder
        self._target = target
        self.state = IteratorState.IDLE

    def _decode(self, line: bytes, line_no: int) -> T:
        self.state = IteratorState.DECODING
        try:
            value = self._decoder.decode(line, self._target)
        except DecodeError as e:
            # A bad line fails this pull only; the framer is untouched.
            self.state = IteratorState.FAILED
            if e.line_no is None:
                e.line_no = line_no
            logger.debug("Line %d failed to decode: %s", line_no, e.reason)
            raise
        self.state = IteratorState.IDLE
        return value


class LineDecodingIterator(_DecodingBase[T], Iterator[T]):
    """Decode every non-blank line from a LineFramer.

    A DecodeError only affects the call that hit the malformed line; the next
    call continues with the following line. Source and framing errors are
    raised once and end the iteration.
    """

    def __init__(self, framer: LineFramer, decoder: Decoder, target: Any = Any):
        super().__init__(decoder, target)
        self._framer = framer

    @property
    def line_no(self) -> int:
        return self._framer.line_no

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self.state is IteratorState.EXHAUSTED:
            raise StopIteration

        while True:
            self.state = IteratorState.AWAITING_BYTES
            try:
                line = self._framer.next_line()
            except JSONLinesError:
                self.state = IteratorState.EXHAUSTED
                raise

            if line is None:
                self.state = IteratorState.EXHAUSTED
                raise StopIteration
            self.state = IteratorState.HAVE_LINE
            if not line:
                continue
            return self._decode(line, self._framer.line_no)

    def close(self) -> None:
        self.state = IteratorState.EXHAUSTED
        self._framer.close()

    def __enter__(self) -> LineDecodingIterator[T]:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class AsyncLineDecodingIterator(_DecodingBase[T], AsyncIterator[T]):
    """Async counterpart of LineDecodingIterator, for ``async for``."""

    def __init__(self, framer: AsyncLineFramer, decoder: Decoder, target: Any = Any):
        super().__init__(decoder, target)
        self._framer = framer

    @property
    def line_no(self) -> int:
        return self._framer.line_no

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        if self.state is IteratorState.EXHAUSTED:
            raise StopAsyncIteration

        while True:
            self.state = IteratorState.AWAITING_BYTES
            try:
                line = await self._framer.next_line()
            except JSONLinesError:
                self.state = IteratorState.EXHAUSTED
                raise

            if line is None:
                self.state = IteratorState.EXHAUSTED
                raise StopAsyncIteration
            self.state = IteratorState.HAVE_LINE
            if not line:
                continue
            return self._decode(line, self._framer.line_no)

    async def aclose(self) -> None:
        self.state = IteratorState.EXHAUSTED
        await self._framer.aclose()

    async def __aenter__(self) -> AsyncLineDecodingIterator[T]:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
