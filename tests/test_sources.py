from __future__ import annotations

import asyncio
import io

import pytest

from jsonl_stream.errors import SourceError
from jsonl_stream.sources import (
    AsyncIterableByteSource,
    AsyncReaderByteSource,
    BufferByteSource,
    IterableByteSource,
    ReaderByteSource,
    SyncToAsyncByteSource,
    async_byte_source,
    byte_source,
)


def _drain(source) -> list[bytes]:
    out = []
    while (chunk := source.pull()) is not None:
        out.append(chunk)
    return out


def test_byte_source_picks_adapter() -> None:
    assert isinstance(byte_source(b"abc"), BufferByteSource)
    assert isinstance(byte_source("abc"), BufferByteSource)
    assert isinstance(byte_source(io.BytesIO(b"abc")), ReaderByteSource)
    assert isinstance(byte_source([b"a", b"b"]), IterableByteSource)

    custom = BufferByteSource(b"x")
    assert byte_source(custom) is custom

    with pytest.raises(TypeError):
        byte_source(42)


def test_buffer_source_slices() -> None:
    assert _drain(BufferByteSource(b"abcdefg", chunk_size=3)) == [b"abc", b"def", b"g"]


def test_iterable_source_accepts_ints_bytes_and_text() -> None:
    source = IterableByteSource([0x61, b"", b"bc", bytearray(b"d"), "é"])
    assert _drain(source) == [b"a", b"bc", b"d", "é".encode("utf-8")]
    assert source.pull() is None


def test_iterable_source_rejects_bad_items() -> None:
    with pytest.raises(SourceError):
        IterableByteSource([3.5]).pull()
    with pytest.raises(SourceError):
        IterableByteSource([256]).pull()


def test_reader_source_text_and_binary() -> None:
    assert _drain(ReaderByteSource(io.BytesIO(b"abcde"), chunk_size=2)) == [b"ab", b"cd", b"e"]
    assert _drain(ReaderByteSource(io.StringIO("xy"), chunk_size=1)) == [b"x", b"y"]


def test_reader_failure_is_source_error() -> None:
    class Broken:
        def read(self, n: int) -> bytes:
            raise OSError("read failed")

    with pytest.raises(SourceError) as exc:
        ReaderByteSource(Broken()).pull()
    assert isinstance(exc.value.__cause__, OSError)


def test_async_byte_source_picks_adapter() -> None:
    async def gen():
        yield b"a"

    async def run() -> None:
        reader = asyncio.StreamReader()
        assert isinstance(async_byte_source(reader), AsyncReaderByteSource)
        assert isinstance(async_byte_source(gen()), AsyncIterableByteSource)
        assert isinstance(async_byte_source(b"abc"), SyncToAsyncByteSource)

    asyncio.run(run())


def test_async_reader_source() -> None:
    async def run() -> list[bytes]:
        reader = asyncio.StreamReader()
        reader.feed_data(b"hello")
        reader.feed_eof()
        source = AsyncReaderByteSource(reader, chunk_size=2)
        out = []
        while (chunk := await source.pull()) is not None:
            out.append(chunk)
        return out

    assert asyncio.run(run()) == [b"he", b"ll", b"o"]
