"""Per-call status envelope written by the native side."""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Union

from rustcall.buffer import RustBuffer


class CallStatusCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    PANIC = 2


class CallStatus(ctypes.Structure):
    _fields_ = [
        ("code", ctypes.c_int8),
        ("error_buf", RustBuffer),
    ]

    def is_success(self) -> bool:
        return self.code == CallStatusCode.SUCCESS

    def is_error(self) -> bool:
        return self.code == CallStatusCode.ERROR

    def is_panic(self) -> bool:
        return self.code == CallStatusCode.PANIC

    def __repr__(self) -> str:
        return f"CallStatus(code={self.code}, error_buf={self.error_buf!r})"


@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class Failure:
    error: BaseException


@dataclass(frozen=True)
class Panic:
    message: str


CallOutcome = Union[Success, Failure, Panic]
