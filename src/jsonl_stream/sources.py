from __future__ import annotations

import inspect
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Any, Protocol

from .errors import SourceError

DEFAULT_CHUNK_SIZE = 64 * 1024


class ByteSource(Protocol):
    def pull(self) -> bytes | None:
        """Return the next non-empty chunk, or None once the source is exhausted."""
        ...

    def close(self) -> None: ...


class AsyncByteSource(Protocol):
    async def pull(self) -> bytes | None: ...

    async def aclose(self) -> None: ...


def _as_chunk(item: Any) -> bytes:
    # Byte-at-a-time producers yield ints; everything else is a chunk.
    if isinstance(item, int):
        try:
            return bytes((item,))
        except ValueError as e:
            raise SourceError(f"Byte value out of range: {item}") from e
    if isinstance(item, (bytes, bytearray, memoryview)):
        return bytes(item)
    if isinstance(item, str):
        return item.encode("utf-8")
    raise SourceError(f"Unsupported chunk type: {type(item).__name__}")


class BufferByteSource:
    """Serve an in-memory buffer in fixed-size slices."""

    def __init__(self, data: bytes | bytearray | memoryview, *, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._view = memoryview(bytes(data))
        self._offset = 0
        self._chunk_size = max(1, chunk_size)

    def pull(self) -> bytes | None:
        if self._offset >= len(self._view):
            return None
        end = self._offset + self._chunk_size
        chunk = self._view[self._offset : end].tobytes()
        self._offset = end
        return chunk

    def close(self) -> None:
        self._view.release()
        self._view = memoryview(b"")
        self._offset = 0


class IterableByteSource:
    """Pull from an iterable of ints (single bytes), bytes chunks or str chunks."""

    def __init__(self, iterable: Iterable[Any]):
        self._it: Iterator[Any] | None = iter(iterable)

    def pull(self) -> bytes | None:
        while self._it is not None:
            try:
                item = next(self._it)
            except StopIteration:
                self._it = None
                return None
            except Exception as e:
                raise SourceError(f"Byte source failed: {e}") from e
            chunk = _as_chunk(item)
            if chunk:
                return chunk
        return None

    def close(self) -> None:
        it, self._it = self._it, None
        close = getattr(it, "close", None)
        if close is not None:
            close()


class ReaderByteSource:
    """Pull from a file-like object exposing ``read(n)``."""

    def __init__(self, reader: Any, *, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._reader = reader
        self._chunk_size = max(1, chunk_size)
        self._done = False

    def pull(self) -> bytes | None:
        if self._done:
            return None
        try:
            data = self._reader.read(self._chunk_size)
        except Exception as e:
            raise SourceError(f"Byte source failed: {e}") from e
        if not data:
            self._done = True
            return None
        return _as_chunk(data)

    def close(self) -> None:
        # The reader belongs to the caller; only stop pulling from it.
        self._done = True


class AsyncIterableByteSource:
    def __init__(self, iterable: AsyncIterable[Any]):
        self._it: AsyncIterator[Any] | None = iterable.__aiter__()

    async def pull(self) -> bytes | None:
        while self._it is not None:
            try:
                item = await self._it.__anext__()
            except StopAsyncIteration:
                self._it = None
                return None
            except Exception as e:
                raise SourceError(f"Byte source failed: {e}") from e
            chunk = _as_chunk(item)
            if chunk:
                return chunk
        return None

    async def aclose(self) -> None:
        it, self._it = self._it, None
        aclose = getattr(it, "aclose", None)
        if aclose is not None:
            await aclose()


class AsyncReaderByteSource:
    """Pull from an object with a coroutine ``read(n)``, e.g. ``asyncio.StreamReader``."""

    def __init__(self, reader: Any, *, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._reader = reader
        self._chunk_size = max(1, chunk_size)
        self._done = False

    async def pull(self) -> bytes | None:
        if self._done:
            return None
        try:
            data = await self._reader.read(self._chunk_size)
        except Exception as e:
            raise SourceError(f"Byte source failed: {e}") from e
        if not data:
            self._done = True
            return None
        return _as_chunk(data)

    async def aclose(self) -> None:
        self._done = True


class SyncToAsyncByteSource:
    """Expose a synchronous source through the async pull contract."""

    def __init__(self, source: ByteSource):
        self._source = source

    async def pull(self) -> bytes | None:
        return self._source.pull()

    async def aclose(self) -> None:
        close = getattr(self._source, "close", None)
        if close is not None:
            close()


def byte_source(obj: Any, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> ByteSource:
    """Wrap bytes, a reader or an iterable in the synchronous pull contract."""

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BufferByteSource(obj, chunk_size=chunk_size)
    if isinstance(obj, str):
        return BufferByteSource(obj.encode("utf-8"), chunk_size=chunk_size)
    if callable(getattr(obj, "pull", None)) and not inspect.iscoroutinefunction(obj.pull):
        return obj
    if callable(getattr(obj, "read", None)):
        return ReaderByteSource(obj, chunk_size=chunk_size)
    if isinstance(obj, Iterable):
        return IterableByteSource(obj)
    raise TypeError(f"Cannot read bytes from {type(obj).__name__}")


def async_byte_source(obj: Any, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncByteSource:
    """Like byte_source, also accepting async iterables and async readers."""

    pull = getattr(obj, "pull", None)
    if callable(pull) and inspect.iscoroutinefunction(pull):
        return obj
    # Checked before AsyncIterable: asyncio.StreamReader iterates by line.
    read = getattr(obj, "read", None)
    if callable(read) and inspect.iscoroutinefunction(read):
        return AsyncReaderByteSource(obj, chunk_size=chunk_size)
    if isinstance(obj, AsyncIterable):
        return AsyncIterableByteSource(obj)
    return SyncToAsyncByteSource(byte_source(obj, chunk_size=chunk_size))
