"""Length-prefixed byte buffers shared with the native library.

A ``RustBuffer`` is owned by exactly one side at a time. Whoever holds it last
must release it exactly once, through the allocator that is active for the
process (managed-side ``LocalAllocator`` by default, the native library's
allocator once one is installed).
"""

from __future__ import annotations

import ctypes
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from rustcall.errors import BufferReleaseError

_MAX_LEN = 2**31 - 1


class RustBuffer(ctypes.Structure):
    _fields_ = [
        ("len", ctypes.c_int32),
        ("data", ctypes.POINTER(ctypes.c_uint8)),
    ]

    @staticmethod
    def from_bytes(data: bytes) -> "RustBuffer":
        return get_allocator().alloc(bytes(data))

    def is_empty(self) -> bool:
        return self.len <= 0 or not self.data

    def to_bytes(self) -> bytes:
        if self.is_empty():
            return b""
        return ctypes.string_at(self.data, self.len)

    def free(self) -> None:
        get_allocator().free(self)

    def consume(self) -> bytes:
        try:
            return self.to_bytes()
        finally:
            self.free()

    def __repr__(self) -> str:
        return f"RustBuffer(len={self.len}, data={_address(self):#x})"


class ForeignBytes(ctypes.Structure):
    """Borrowed managed-side bytes handed to the native allocator."""

    _fields_ = [
        ("len", ctypes.c_int32),
        ("data", ctypes.POINTER(ctypes.c_uint8)),
    ]


def _address(buf: RustBuffer) -> int:
    return ctypes.cast(buf.data, ctypes.c_void_p).value or 0


def lift_string(buf: RustBuffer) -> str:
    # Invalid sequences are replaced; a string lift never fails on content.
    return buf.consume().decode("utf-8", errors="replace")


class BufferAllocator(ABC):
    @abstractmethod
    def alloc(self, data: bytes) -> RustBuffer:
        raise NotImplementedError

    @abstractmethod
    def free(self, buf: RustBuffer) -> None:
        raise NotImplementedError


class LocalAllocator(BufferAllocator):
    """Managed-side allocator that keeps backing storage alive until freed."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._blocks: dict[int, ctypes.Array[ctypes.c_uint8]] = {}
        self.allocs = 0
        self.frees = 0

    @property
    def live(self) -> int:
        with self._lock:
            return len(self._blocks)

    def alloc(self, data: bytes) -> RustBuffer:
        size = len(data)
        if size > _MAX_LEN:
            raise OverflowError(f"Buffer size {size} exceeds max {_MAX_LEN}")
        if size == 0:
            return RustBuffer()
        block = (ctypes.c_uint8 * size)()
        ctypes.memmove(block, data, size)
        with self._lock:
            self._blocks[ctypes.addressof(block)] = block
            self.allocs += 1
        return RustBuffer(size, ctypes.cast(block, ctypes.POINTER(ctypes.c_uint8)))

    def free(self, buf: RustBuffer) -> None:
        if not buf.data:
            return
        addr = _address(buf)
        with self._lock:
            block = self._blocks.pop(addr, None)
            if block is None:
                raise BufferReleaseError(
                    f"Buffer at {addr:#x} was already released or not allocated here"
                )
            self.frees += 1


_ALLOCATOR_LOCK = threading.Lock()
_ALLOCATOR: BufferAllocator = LocalAllocator()


def get_allocator() -> BufferAllocator:
    with _ALLOCATOR_LOCK:
        return _ALLOCATOR


def set_allocator(allocator: BufferAllocator) -> BufferAllocator:
    global _ALLOCATOR
    with _ALLOCATOR_LOCK:
        previous = _ALLOCATOR
        _ALLOCATOR = allocator
    return previous


@contextmanager
def use_allocator(allocator: BufferAllocator) -> Iterator[BufferAllocator]:
    previous = set_allocator(allocator)
    try:
        yield allocator
    finally:
        set_allocator(previous)
