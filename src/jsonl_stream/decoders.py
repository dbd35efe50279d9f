from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, Protocol, get_origin

from pydantic import TypeAdapter, ValidationError

from .errors import DecodeError


class Decoder(Protocol):
    def decode(self, data: bytes, target: Any) -> Any:
        """Decode one line payload into `target`, raising DecodeError on failure."""
        ...


def is_untyped(target: Any) -> bool:
    return target is None or target is Any or target is object


class JSONDecoder:
    """Plain `json` decoding; the hooks are passed straight to `json.loads`.

    Class targets (and generic aliases such as ``dict[str, int]``) are only
    checked against the top-level JSON value, not validated field by field.
    """

    def __init__(
        self,
        *,
        object_hook: Callable[[dict[str, Any]], Any] | None = None,
        object_pairs_hook: Callable[[list[tuple[str, Any]]], Any] | None = None,
        parse_float: Callable[[str], Any] | None = None,
        parse_int: Callable[[str], Any] | None = None,
        parse_constant: Callable[[str], Any] | None = None,
    ):
        self._kwargs = {
            k: v
            for k, v in {
                "object_hook": object_hook,
                "object_pairs_hook": object_pairs_hook,
                "parse_float": parse_float,
                "parse_int": parse_int,
                "parse_constant": parse_constant,
            }.items()
            if v is not None
        }

    def decode(self, data: bytes, target: Any = Any) -> Any:
        try:
            obj = json.loads(data, **self._kwargs)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
            raise DecodeError(f"json_decode_error: {e}", payload=data) from e

        if is_untyped(target):
            return obj
        expected = get_origin(target) or target
        mismatch = isinstance(expected, type) and not isinstance(obj, expected)
        # JSON true/false are not numbers even though bool subclasses int.
        if isinstance(obj, bool) and expected in (int, float):
            mismatch = True
        if mismatch:
            raise DecodeError(f"unexpected_json_type: {type(obj).__name__}", payload=data)
        return obj


class PydanticDecoder:
    """Typed decoding through pydantic.

    Anything pydantic can validate works as a target: models, dataclasses,
    TypedDicts, ``list[int]`` and so on. Field aliases, date formats and other
    per-field strategies are configured on the target type itself.
    """

    def __init__(self, *, strict: bool | None = None, context: Any | None = None):
        self._strict = strict
        self._context = context
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def adapter_for(self, target: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(target)
        if adapter is None:
            adapter = TypeAdapter(Any if is_untyped(target) else target)
            self._adapters[target] = adapter
        return adapter

    def decode(self, data: bytes, target: Any = Any) -> Any:
        adapter = self.adapter_for(target)
        try:
            return adapter.validate_json(data, strict=self._strict, context=self._context)
        except ValidationError as e:
            raise DecodeError(f"validation_error: {e}", payload=data) from e


def default_decoder(target: Any) -> Decoder:
    return JSONDecoder() if is_untyped(target) else PydanticDecoder()
