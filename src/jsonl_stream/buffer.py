from __future__ import annotations

import logging

from .errors import LineTooLongError

logger = logging.getLogger(__name__)

NEWLINE = 0x0A

# Consumed prefix is only compacted away once it is at least this large.
_COMPACT_MIN = 4096


class LineBuffer:
    """Accumulates bytes and hands out complete lines.

    Consumed bytes stay in front of a read cursor until they dominate the
    buffer, so popping lines never shifts the whole buffer. A scan cursor
    remembers how far a failed newline search got, so every byte is scanned
    once no matter how the input is chunked.
    """

    def __init__(self, *, max_line_length: int | None = None):
        self._buf = bytearray()
        self._start = 0
        self._scan = 0
        self._max_line_length = max_line_length
        self.line_no = 0

    def __len__(self) -> int:
        return self.pending

    @property
    def pending(self) -> int:
        return len(self._buf) - self._start

    def append(self, data: bytes) -> None:
        if data:
            self._buf += data

    def pop_line(self) -> bytes | None:
        idx = self._buf.find(NEWLINE, self._scan)
        if idx < 0:
            self._scan = len(self._buf)
            self._check_length(self.pending)
            return None

        self._check_length(idx - self._start)
        line = bytes(self._buf[self._start : idx])
        self._start = idx + 1
        self._scan = self._start
        self.line_no += 1
        self._compact()
        return line

    def drain(self) -> bytes | None:
        """Return everything left (an unterminated final line) and clear."""

        if not self.pending:
            self.clear()
            return None
        line = bytes(self._buf[self._start :])
        self.clear()
        self.line_no += 1
        logger.debug("Unterminated final line %d (%d bytes)", self.line_no, len(line))
        return line

    def clear(self) -> None:
        self._buf.clear()
        self._start = 0
        self._scan = 0

    def _check_length(self, length: int) -> None:
        limit = self._max_line_length
        if limit is not None and length > limit:
            logger.warning("Line %d exceeds %d bytes", self.line_no + 1, limit)
            raise LineTooLongError(limit=limit, line_no=self.line_no + 1)

    def _compact(self) -> None:
        if self._start == len(self._buf):
            self.clear()
        elif self._start >= _COMPACT_MIN and self._start * 2 >= len(self._buf):
            del self._buf[: self._start]
            self._scan -= self._start
            self._start = 0
