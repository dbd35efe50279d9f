from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .sources import DEFAULT_CHUNK_SIZE

DEFAULT_MAX_LINE_LENGTH = 16 * 1024 * 1024

ENV_CHUNK_SIZE = "JSONL_STREAM_CHUNK_SIZE"
ENV_MAX_LINE_LENGTH = "JSONL_STREAM_MAX_LINE_LENGTH"


@dataclass
class StreamConfig:
    # Read size used for in-memory buffers and file-like readers.
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # None means unbounded.
    max_line_length: int | None = DEFAULT_MAX_LINE_LENGTH


def _as_positive_int(v: Any) -> int | None:
    if isinstance(v, bool):
        return None
    if isinstance(v, str):
        try:
            v = int(v.strip())
        except ValueError:
            return None
    return v if isinstance(v, int) and v > 0 else None


def _is_unbounded(v: Any) -> bool:
    if v is None or v == 0:
        return True
    return isinstance(v, str) and v.strip().lower() in {"", "0", "none", "unlimited"}


def _apply(cfg: StreamConfig, data: Mapping[str, Any], *, chunk_key: str, limit_key: str) -> None:
    cfg.chunk_size = _as_positive_int(data.get(chunk_key)) or cfg.chunk_size
    if limit_key in data:
        raw = data[limit_key]
        if _is_unbounded(raw):
            cfg.max_line_length = None
        else:
            cfg.max_line_length = _as_positive_int(raw) or cfg.max_line_length


def load_stream_config(path: Path | None = None, *, env: Mapping[str, str] | None = None) -> StreamConfig:
    """Build a StreamConfig from defaults, an optional YAML file and the environment.

    Precedence: environment wins over the file, the file wins over defaults.
    Values that don't parse are ignored.
    """

    cfg = StreamConfig()

    if path is not None and path.exists():
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        if isinstance(loaded, dict):
            _apply(cfg, loaded, chunk_key="chunk_size", limit_key="max_line_length")

    environ = os.environ if env is None else env
    _apply(cfg, environ, chunk_key=ENV_CHUNK_SIZE, limit_key=ENV_MAX_LINE_LENGTH)

    return cfg
