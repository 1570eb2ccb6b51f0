from __future__ import annotations

import json
from typing import Any

import msgpack
import pytest

from rustcall.buffer import LocalAllocator, RustBuffer
from rustcall.codec import decode_error_payload, resolve_codec
from rustcall.errors import InternalError
from rustcall.lifters import NULL_ERROR_LIFTER, CodecErrorLifter


class NotFound(Exception):
    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key


def _from_record(record: dict[str, Any]) -> Exception:
    if record.get("kind") == "NotFound":
        return NotFound(record["key"])
    return InternalError(f"unknown error kind {record.get('kind')!r}")


def test_null_lifter_frees_without_decoding(allocator: LocalAllocator) -> None:
    error = NULL_ERROR_LIFTER.lift(RustBuffer.from_bytes(b"\x00\x01"))
    assert isinstance(error, InternalError)
    assert str(error) == "Unexpected CALL_ERROR"
    assert allocator.frees == 1


def test_codec_lifter_json(allocator: LocalAllocator) -> None:
    lifter = CodecErrorLifter(_from_record, codec="json")
    payload = json.dumps({"kind": "NotFound", "key": "users/7"}).encode("utf-8")
    error = lifter.lift(RustBuffer.from_bytes(payload))
    assert isinstance(error, NotFound)
    assert error.key == "users/7"
    assert allocator.live == 0


def test_codec_lifter_defaults_to_json(
    allocator: LocalAllocator, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("RUSTCALL_WIRE", raising=False)
    lifter = CodecErrorLifter(_from_record)
    assert lifter.codec == "json"
    error = lifter.lift(RustBuffer.from_bytes(b'{"kind":"NotFound","key":"k"}'))
    assert isinstance(error, NotFound)
    assert error.key == "k"
    assert allocator.live == 0


def test_codec_lifter_msgpack(allocator: LocalAllocator) -> None:
    lifter = CodecErrorLifter(_from_record, codec="msgpack")
    payload = msgpack.packb({"kind": "NotFound", "key": "k"}, use_bin_type=True)
    error = lifter.lift(RustBuffer.from_bytes(payload))
    assert isinstance(error, NotFound)
    assert allocator.live == 0


def test_codec_lifter_wire_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RUSTCALL_WIRE", "msgpack")
    assert CodecErrorLifter(_from_record).codec == "msgpack"
    assert CodecErrorLifter(_from_record, codec="json").codec == "json"


def test_resolve_codec_rejects_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RUSTCALL_WIRE", "xml")
    with pytest.raises(ValueError, match="Unknown error payload codec 'xml'"):
        resolve_codec()


def test_decode_error_payload_utf8_and_raw() -> None:
    assert decode_error_payload("bad input".encode(), "utf8") == "bad input"
    assert decode_error_payload(b"\x01", "raw") == b"\x01"
    with pytest.raises(ValueError):
        decode_error_payload(b"", "xml")
