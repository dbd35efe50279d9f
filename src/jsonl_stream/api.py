from __future__ import annotations

from typing import Any

from .config import StreamConfig
from .decoders import Decoder, default_decoder
from .framer import AsyncLineFramer, LineFramer
from .iterator import AsyncLineDecodingIterator, LineDecodingIterator
from .sources import async_byte_source, byte_source


def open_framer(source: Any, *, config: StreamConfig | None = None) -> LineFramer:
    cfg = config or StreamConfig()
    return LineFramer(
        byte_source(source, chunk_size=cfg.chunk_size),
        max_line_length=cfg.max_line_length,
    )


def json_lines(
    source: Any,
    decoding: Any = Any,
    *,
    decoder: Decoder | None = None,
    config: StreamConfig | None = None,
) -> LineDecodingIterator[Any]:
    """Lazily decode a JSON Lines byte stream, one value per non-blank line.

    `source` can be bytes, a file-like object with `read(n)`, an iterable of
    ints (single bytes) or of chunks, or anything with a `pull()` method.
    `decoding` is the target type of every line; `decoder` overrides how
    lines are decoded (defaults to plain json for untyped targets and
    pydantic otherwise).
    """

    return LineDecodingIterator(
        open_framer(source, config=config),
        decoder or default_decoder(decoding),
        decoding,
    )


def ajson_lines(
    source: Any,
    decoding: Any = Any,
    *,
    decoder: Decoder | None = None,
    config: StreamConfig | None = None,
) -> AsyncLineDecodingIterator[Any]:
    """Async variant of json_lines, for `async for`.

    Also accepts async iterables of bytes and readers with a coroutine
    `read(n)` such as `asyncio.StreamReader`.
    """

    cfg = config or StreamConfig()
    framer = AsyncLineFramer(
        async_byte_source(source, chunk_size=cfg.chunk_size),
        max_line_length=cfg.max_line_length,
    )
    return AsyncLineDecodingIterator(framer, decoder or default_decoder(decoding), decoding)
