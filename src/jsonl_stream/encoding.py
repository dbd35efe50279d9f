from __future__ import annotations

import json
from collections.abc import Iterable
from typing import IO, Any

from pydantic_core import to_jsonable_python


def encode_line(value: Any) -> bytes:
    # Models, dataclasses, datetimes, Decimals and UUIDs go through pydantic's
    # serializer, so anything the pydantic decoder accepts also encodes.
    # json.dumps escapes control characters, so a record never spans lines.
    text = json.dumps(to_jsonable_python(value, by_alias=True), ensure_ascii=False, separators=(",", ":"))
    return text.encode("utf-8") + b"\n"


def encode_lines(values: Iterable[Any]) -> bytes:
    return b"".join(encode_line(v) for v in values)


def write_lines(fp: IO[bytes], values: Iterable[Any]) -> int:
    """Write one JSON document per line to a binary stream; returns the record count."""

    n = 0
    for v in values:
        fp.write(encode_line(v))
        n += 1
    return n
