"""Helpers for calling native functions that report through a ``CallStatus``.

These do not synchronize. Call sites that share a non-reentrant native object
across threads must serialize access themselves.
"""

from __future__ import annotations

import ctypes
import logging
from typing import Any, Callable

from rustcall.buffer import RustBuffer, lift_string as _lift_string
from rustcall.errors import InternalError, PanicError
from rustcall.lifters import NULL_ERROR_LIFTER, ErrorLifter
from rustcall.status import CallOutcome, CallStatus, Failure, Panic, Success

logger = logging.getLogger(__name__)

StringLifter = Callable[[RustBuffer], str]


def call_outcome(
    lifter: ErrorLifter,
    status: CallStatus,
    value: Any = None,
    lift_string: StringLifter = _lift_string,
) -> CallOutcome:
    if status.is_success():
        return Success(value)
    if status.is_error():
        error = lifter.lift(status.error_buf)
        logger.debug("native call returned error %r", error)
        return Failure(error)
    if status.is_panic():
        # The native side sends an empty buffer when formatting the panic
        # message itself panicked.
        if status.error_buf.len > 0:
            message = lift_string(status.error_buf)
        else:
            message = "Rust panic"
        logger.debug("native call panicked: %s", message)
        return Panic(message)
    status.error_buf.free()
    raise InternalError(f"Unknown rust call status: {status.code}")


def check_call_status(
    lifter: ErrorLifter,
    status: CallStatus,
    lift_string: StringLifter = _lift_string,
) -> None:
    outcome = call_outcome(lifter, status, lift_string=lift_string)
    if isinstance(outcome, Failure):
        raise outcome.error
    if isinstance(outcome, Panic):
        raise PanicError(outcome.message)


def rust_call_with_error(lifter: ErrorLifter, fn: Callable[..., Any], *args: Any) -> Any:
    status = CallStatus()
    result = fn(*args, ctypes.pointer(status))
    check_call_status(lifter, status)
    return result


def rust_call(fn: Callable[..., Any], *args: Any) -> Any:
    return rust_call_with_error(NULL_ERROR_LIFTER, fn, *args)


def rust_call_outcome(
    lifter: ErrorLifter, fn: Callable[..., Any], *args: Any
) -> CallOutcome:
    status = CallStatus()
    result = fn(*args, ctypes.pointer(status))
    return call_outcome(lifter, status, result)
