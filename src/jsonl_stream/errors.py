from __future__ import annotations


class JSONLinesError(Exception):
    """Base class for errors raised while reading a JSON Lines stream."""


class SourceError(JSONLinesError):
    """The upstream byte source failed. Fatal to the stream."""


class FramingError(JSONLinesError):
    """Line framing failed. Fatal to the stream."""


class LineTooLongError(FramingError):
    def __init__(self, *, limit: int, line_no: int):
        super().__init__(f"Line {line_no} exceeds maximum length of {limit} bytes")
        self.limit = limit
        self.line_no = line_no


class DecodeError(JSONLinesError, ValueError):
    """A single line could not be decoded.

    Scoped to that line: the stream stays usable and the next pull moves on to
    the following line.
    """

    def __init__(self, reason: str, *, payload: bytes = b"", line_no: int | None = None):
        where = f"line {line_no}: " if line_no is not None else ""
        super().__init__(f"{where}{reason}")
        self.reason = reason
        self.payload = payload
        self.line_no = line_no
