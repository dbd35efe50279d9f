from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure `import jsonl_stream` works when running tests without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


def _split(data: bytes, size: int) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


@pytest.fixture
def split_chunks() -> Callable[[bytes, int], list[bytes]]:
    return _split
