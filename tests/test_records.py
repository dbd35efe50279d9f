from __future__ import annotations

import io

import pytest

from jsonl_stream.decoders import JSONDecoder
from jsonl_stream.errors import SourceError
from jsonl_stream.records import iter_records


def test_iter_records_parses_ndjson() -> None:
    s = io.StringIO('{"type":"init","session_id":"abc"}\n{"type":"delta","delta":"hi"}\n')
    records = list(iter_records(s))

    assert len(records) == 2
    assert records[0].value and records[0].value["session_id"] == "abc"
    assert records[1].value and records[1].value["delta"] == "hi"
    assert [r.line_no for r in records] == [1, 2]


def test_iter_records_handles_invalid_json() -> None:
    s = io.StringIO('{"type":"ok"}\nnot-json\n')
    records = list(iter_records(s))

    assert len(records) == 2
    assert records[0].value is not None and records[0].ok
    assert records[1].value is None
    assert records[1].raw == b"not-json"
    assert records[1].error and "json_decode_error" in records[1].error


def test_iter_records_reports_unexpected_type() -> None:
    records = list(iter_records(b'{"a":1}\n[1,2]\n', dict, decoder=JSONDecoder()))

    assert records[0].ok
    assert records[1].error == "unexpected_json_type: list"


def test_iter_records_skips_blank_lines_but_counts_them() -> None:
    records = list(iter_records(b'\n\n{"a":1}\n\n'))

    assert len(records) == 1
    assert records[0].line_no == 3


def test_iter_records_propagates_source_failure() -> None:
    def source():
        yield b'{"a":1}\n'
        raise OSError("connection reset")

    it = iter_records(source())
    assert next(it).value == {"a": 1}
    with pytest.raises(SourceError):
        next(it)
