from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from .api import open_framer
from .config import StreamConfig
from .decoders import Decoder, default_decoder
from .errors import DecodeError


@dataclass(frozen=True)
class StreamRecord:
    line_no: int
    raw: bytes
    value: Any | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None


def iter_records(
    source: Any,
    decoding: Any = Any,
    *,
    decoder: Decoder | None = None,
    config: StreamConfig | None = None,
) -> Iterator[StreamRecord]:
    """Iterate a JSON Lines stream without raising on malformed lines.

    Every non-blank line yields a record holding either the decoded value or
    the decode error. Source and framing failures still raise.
    """

    dec = decoder or default_decoder(decoding)
    framer = open_framer(source, config=config)
    try:
        for raw in framer:
            if not raw:
                continue
            try:
                value = dec.decode(raw, decoding)
            except DecodeError as e:
                yield StreamRecord(line_no=framer.line_no, raw=raw, value=None, error=e.reason)
                continue
            yield StreamRecord(line_no=framer.line_no, raw=raw, value=value, error=None)
    finally:
        framer.close()
