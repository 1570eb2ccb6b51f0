"""Runtime support for ctypes bindings to native (Rust) libraries."""

from __future__ import annotations

from rustcall.buffer import (
    BufferAllocator,
    LocalAllocator,
    RustBuffer,
    get_allocator,
    lift_string,
    set_allocator,
    use_allocator,
)
from rustcall.errors import (
    BufferReleaseError,
    InternalError,
    LibraryLoadError,
    PanicError,
    RustCallError,
)
from rustcall.futures import (
    CONTINUATION_CALLBACK,
    CONTINUATIONS,
    POLL_MAYBE_READY,
    POLL_READY,
    rust_call_async,
)
from rustcall.handles import HandleMap
from rustcall.invoke import (
    call_outcome,
    check_call_status,
    rust_call,
    rust_call_outcome,
    rust_call_with_error,
)
from rustcall.library import NativeLibrary, find_library, load_library
from rustcall.lifters import (
    NULL_ERROR_LIFTER,
    CodecErrorLifter,
    ErrorLifter,
    FunctionErrorLifter,
    NullErrorLifter,
)
from rustcall.status import CallStatus, CallStatusCode, Failure, Panic, Success
from rustcall.usize import USize

__all__ = [
    "BufferAllocator",
    "BufferReleaseError",
    "CONTINUATIONS",
    "CONTINUATION_CALLBACK",
    "CallStatus",
    "CallStatusCode",
    "CodecErrorLifter",
    "ErrorLifter",
    "Failure",
    "FunctionErrorLifter",
    "HandleMap",
    "InternalError",
    "LibraryLoadError",
    "LocalAllocator",
    "NULL_ERROR_LIFTER",
    "NativeLibrary",
    "NullErrorLifter",
    "POLL_MAYBE_READY",
    "POLL_READY",
    "Panic",
    "PanicError",
    "RustBuffer",
    "RustCallError",
    "Success",
    "USize",
    "call_outcome",
    "check_call_status",
    "find_library",
    "get_allocator",
    "lift_string",
    "load_library",
    "rust_call",
    "rust_call_async",
    "rust_call_outcome",
    "rust_call_with_error",
    "set_allocator",
    "use_allocator",
]
