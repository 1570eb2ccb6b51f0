"""Error lifters: turn an error payload into the exception a call site raises.

Each generated error type pairs with one lifter. A lifter owns the buffer it is
handed and must release it exactly once, whether or not it decodes it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

from rustcall.buffer import RustBuffer
from rustcall.codec import decode_error_payload, resolve_codec
from rustcall.errors import InternalError

Decoder = Callable[[bytes], BaseException]
ErrorFactory = Callable[[Any], BaseException]


class ErrorLifter(ABC):
    @abstractmethod
    def lift(self, error_buf: RustBuffer) -> BaseException:
        raise NotImplementedError


class NullErrorLifter(ErrorLifter):
    """Lifter for calls that are not expected to return CALL_ERROR."""

    def lift(self, error_buf: RustBuffer) -> BaseException:
        error_buf.free()
        return InternalError("Unexpected CALL_ERROR")


NULL_ERROR_LIFTER = NullErrorLifter()


class FunctionErrorLifter(ErrorLifter):
    def __init__(self, decode: Decoder) -> None:
        self._decode = decode

    def lift(self, error_buf: RustBuffer) -> BaseException:
        return self._decode(error_buf.consume())


class CodecErrorLifter(ErrorLifter):
    """Decode a serialized error payload, then build the exception from it."""

    def __init__(self, factory: ErrorFactory, codec: str | None = None) -> None:
        self._factory = factory
        self._codec = resolve_codec(codec)

    @property
    def codec(self) -> str:
        return self._codec

    def lift(self, error_buf: RustBuffer) -> BaseException:
        return self._factory(decode_error_payload(error_buf.consume(), self._codec))
