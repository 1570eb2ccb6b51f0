"""Decoders for serialized error payloads."""

from __future__ import annotations

import json
from typing import Any, Callable

import msgpack

from rustcall import config

DEFAULT_CODEC = "json"


def _decode_json(data: bytes) -> Any:
    return json.loads(data.decode("utf-8"))


def _decode_msgpack(data: bytes) -> Any:
    return msgpack.unpackb(data, raw=False)


def _decode_utf8(data: bytes) -> Any:
    return data.decode("utf-8")


_DECODERS: dict[str, Callable[[bytes], Any]] = {
    "json": _decode_json,
    "msgpack": _decode_msgpack,
    "utf8": _decode_utf8,
    "raw": bytes,
}


def resolve_codec(codec: str | None = None) -> str:
    name = codec or config.preferred_wire() or DEFAULT_CODEC
    if name not in _DECODERS:
        raise ValueError(f"Unknown error payload codec '{name}'")
    return name


def decode_error_payload(data: bytes, codec: str) -> Any:
    decoder = _DECODERS.get(codec)
    if decoder is None:
        raise ValueError(f"Unknown error payload codec '{codec}'")
    return decoder(data)
